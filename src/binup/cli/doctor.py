"""``binup doctor`` — self-update readiness diagnostics.

Gathers information about the running build and its surroundings and
renders a Rich table summarising whether a self-update could succeed:
which release asset would be fetched, whether updates are enabled, and
whether the executable's directory is writable.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import os
import platform
import sys

from binup.cli import exit_codes
from binup.cli.console import console, rich_available
from binup.config import SKIP_UPGRADE_ENV, UpgradeSettings
from binup.core.release import asset_name
from binup.exceptions import EnvironmentError
from binup.infra.platform_info import current_executable, detect_platform
from binup.version import DEVELOPMENT_VERSION, __version__

_KNOWN_OS: frozenset[str] = frozenset({"linux", "darwin", "windows", "freebsd"})


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _binup_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the binup build row."""
    if __version__ == DEVELOPMENT_VERSION:
        return "binup", __version__, "[yellow]WARN[/yellow]"
    return "binup", __version__, "[green]OK[/green]"


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _httpx_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the httpx row."""
    try:
        import httpx
    except ImportError:
        return "httpx", "NOT INSTALLED", "[red]FAIL[/red]"
    return "httpx", getattr(httpx, "__version__", "unknown"), "[green]OK[/green]"


def _release_target_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the release asset row."""
    target = detect_platform()
    version = "<version>" if __version__ == DEVELOPMENT_VERSION else __version__
    value = asset_name(UpgradeSettings().tool_name, version, target)
    status = "[green]OK[/green]" if target.os in _KNOWN_OS else "[yellow]WARN[/yellow]"
    return "Release asset", value, status


def _self_update_check(settings: UpgradeSettings) -> tuple[str, str, str]:
    """Return (label, value, status) for the self-update toggle row."""
    if settings.skip_upgrade:
        return "Self-update", f"disabled ({SKIP_UPGRADE_ENV})", "[yellow]WARN[/yellow]"
    if __version__ == DEVELOPMENT_VERSION:
        return "Self-update", "disabled (development build)", "[yellow]WARN[/yellow]"
    return "Self-update", "enabled", "[green]OK[/green]"


def _executable_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the install-location row."""
    try:
        executable = current_executable()
    except EnvironmentError:
        return "Executable", "Python source launch", "[yellow]WARN (not a binary)[/yellow]"
    if os.access(executable.parent, os.W_OK):
        return "Executable", str(executable), "[green]OK[/green]"
    return "Executable", str(executable), "[yellow]WARN (not writable)[/yellow]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nbinup doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<46} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        plain_status = _status_plain(status)
        print(f"{label:<14} {value:<46} {plain_status:<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: UpgradeSettings | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    settings = settings if settings is not None else UpgradeSettings.from_env()
    checks = [
        _binup_version_check(),
        _python_version_check(),
        _httpx_version_check(),
        _release_target_check(),
        _self_update_check(settings),
        _executable_check(),
    ]

    has_failure = any("FAIL" in status for _, _, status in checks)

    if rich_available():
        from rich.table import Table

        table = Table(
            title="binup doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=14)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
