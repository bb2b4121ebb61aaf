"""
Read-only link inspection shared by every symlinker.

Only the direct children of a source directory are considered. A
nested directory that already exists at the target is one conflicting
entry; it is never traversed (the whole directory is linked as a unit).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotctl.core.errors import SourceMissingError
from dotctl.core.models.link import ConflictReason, LinkIssue, LinkOutcome

logger = logging.getLogger(__name__)


def source_entries(source: Path, exclude: Iterable[str] = ()) -> list[Path]:
    """List the entries of ``source`` to link, in directory order.

    A single-file source yields itself. Raises ``SourceMissingError``
    when ``source`` does not exist; an unreadable directory raises
    ``OSError``.
    """
    if not source.exists():
        raise SourceMissingError(source)
    if not source.is_dir():
        return [source]
    skip = set(exclude)
    return [entry for entry in source.iterdir() if entry.name not in skip]


def read_link(path: Path) -> Path:
    """Return the absolute destination of the link at ``path``."""
    dest = Path(os.readlink(path))
    if not dest.is_absolute():
        dest = path.parent / dest
    return dest


def link_points_to(link: Path, expected: Path) -> bool:
    """True if ``link`` is a symlink resolving to ``expected``."""
    try:
        dest = read_link(link)
    except OSError:
        return False
    return dest.resolve() == expected.resolve()


def inspect_target(entry: Path, dest: Path) -> LinkOutcome | None:
    """Classify what currently occupies ``dest``.

    Returns None when ``dest`` is absent, ``already_correct`` when it is
    a link to ``entry``, and a conflict outcome otherwise. A dangling
    link counts as a wrong link target.
    """
    if dest.is_symlink():
        if link_points_to(dest, entry):
            return LinkOutcome.already_correct(dest)
        try:
            current = str(read_link(dest))
        except OSError as e:
            current = f"unreadable link ({e})"
        return LinkOutcome.conflict(dest, ConflictReason.WRONG_LINK_TARGET, current)
    if dest.is_dir():
        return LinkOutcome.conflict(dest, ConflictReason.DIRECTORY_EXISTS)
    if dest.exists():
        return LinkOutcome.conflict(dest, ConflictReason.FILE_EXISTS)
    return None


def detect_conflicts(
    source: Path,
    target: Path,
    *,
    exclude: Iterable[str] = (),
) -> list[LinkOutcome]:
    """Conflicts that would block linking ``source`` into ``target``.

    Entries that are absent or already correct produce nothing. No
    filesystem changes are made.
    """
    conflicts: list[LinkOutcome] = []
    for entry in source_entries(source, exclude):
        state = inspect_target(entry, target / entry.name)
        if state is not None and state.is_conflict:
            conflicts.append(state)
    logger.debug("Planned %s -> %s: %d conflict(s)", source, target, len(conflicts))
    return conflicts


def validate_links(
    source: Path,
    target: Path,
    *,
    exclude: Iterable[str] = (),
) -> list[LinkIssue]:
    """Check that every entry of ``source`` is correctly linked in ``target``."""
    issues: list[LinkIssue] = []
    for entry in source_entries(source, exclude):
        dest = target / entry.name
        if dest.is_symlink():
            try:
                actual = read_link(dest)
            except OSError as e:
                issues.append(LinkIssue(dest, f"failed to read link: {e}"))
                continue
            if actual.resolve() != entry.resolve():
                issues.append(LinkIssue(dest, f"points to {actual} instead of {entry}"))
        elif dest.exists():
            issues.append(LinkIssue(dest, "not a link"))
        else:
            issues.append(LinkIssue(dest, "does not exist"))
    return issues
