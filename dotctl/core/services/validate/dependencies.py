"""
Dependency checks — Homebrew, a version manager, essential tools and
the package catalog.
"""

from __future__ import annotations

from dotctl.core.models.check import CheckReport, CheckResult
from dotctl.core.services import detection
from dotctl.core.services.install import homebrew, packages, version_manager


def check_homebrew() -> CheckResult:
    if not detection.is_macos():
        return CheckResult.ok("Homebrew", "Not required (not on macOS)")

    brew = homebrew.detect_homebrew()
    if brew is not None:
        return CheckResult.ok("Homebrew", f"Installed at {brew}")
    return CheckResult.error(
        "Homebrew",
        "Not installed",
        f'Install with: /bin/bash -c "$(curl -fsSL {homebrew.HOMEBREW_INSTALL_URL})"',
    )


def check_version_manager() -> CheckResult:
    vm = version_manager.detect()
    if vm is not None:
        return CheckResult.ok(
            "Version Manager", f"{vm.display_name} installed at {version_manager.path_of(vm)}",
        )
    return CheckResult.warn(
        "Version Manager",
        "No version manager detected (mise, ASDF, or rtx)",
        "Install mise with: brew install mise",
    )


def check_tool(tool: str) -> CheckResult:
    path = detection.tool_path(tool)
    if path:
        return CheckResult.ok(f"Tool:{tool}", f"Installed at {path}")
    return CheckResult.error(f"Tool:{tool}", "Not installed", f"Install with: brew install {tool}")


def validate_all() -> CheckReport:
    report = CheckReport()
    report.add(check_homebrew())
    report.add(check_version_manager())
    for tool in packages.ESSENTIAL_PACKAGES:
        report.add(check_tool(tool))
    return report


# Missing essential packages are errors; the rest of the catalog is advisory.
_CATEGORY_LABELS = {
    "development": ("Development Tools", True),
    "cloud": ("Cloud Tools", True),
    "productivity": ("Productivity Tools", False),
    "editor": ("Editor Tools", False),
}


def validate_packages() -> CheckReport:
    """Check the Homebrew package catalog."""
    report = CheckReport()
    if not homebrew.is_installed():
        report.add(CheckResult.warn(
            "Packages", "Homebrew not available, package checks skipped",
            "Install Homebrew, then run: dotctl packages install essential",
        ))
        return report

    essential = packages.category_status("essential")
    for pkg in essential.missing:
        report.add(CheckResult.error(
            "Packages:essential", f"Missing essential package: {pkg}", f"Run: brew install {pkg}",
        ))
    if essential.is_complete:
        report.add(CheckResult.ok("Packages:essential", "All essential packages installed"))

    for category, (label, warn_missing) in _CATEGORY_LABELS.items():
        status = packages.category_status(category)
        name = f"Packages:{label}"
        if status.is_complete:
            report.add(CheckResult.ok(name, f"All {label.lower()} installed"))
        elif warn_missing:
            report.add(CheckResult.warn(
                name,
                f"Missing {len(status.missing)} {label.lower()}: {', '.join(status.missing)}",
                f"Run: dotctl packages install {category}",
            ))
        else:
            report.add(CheckResult.ok(
                name,
                f"Optional: {len(status.missing)} available for install ({', '.join(status.missing)})",
            ))
    return report
