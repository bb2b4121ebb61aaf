"""
Domain models — dataclasses and Pydantic types for dotctl.

All models are re-exported here for convenient access:

    from dotctl.core.models import LinkOutcome, ReconciliationReport, Secret, Settings
"""

from dotctl.core.models.check import CheckReport, CheckResult, CheckStatus
from dotctl.core.models.config import LanguageManager, Settings, SymlinkMethod
from dotctl.core.models.link import (
    ConflictReason,
    LinkIssue,
    LinkOutcome,
    OutcomeKind,
    ReconciliationReport,
)
from dotctl.core.models.secret import Secret

__all__ = [
    # check.py
    "CheckReport",
    "CheckResult",
    "CheckStatus",
    # link.py
    "ConflictReason",
    # config.py
    "LanguageManager",
    "LinkIssue",
    "LinkOutcome",
    "OutcomeKind",
    "ReconciliationReport",
    # secret.py
    "Secret",
    "Settings",
    "SymlinkMethod",
]
