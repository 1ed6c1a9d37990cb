"""CLI application entry point and command routing for binup.

This module is the **sole error boundary** for the entire application.
It catches :class:`~binup.exceptions.BinupError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* The self-update check runs first, before any command is dispatched.
  It either returns control (no update, declined, check failed) or
  yields the exit code the process must terminate with (update applied,
  upgrade failed).
* No business logic lives here — all work is delegated to the core
  service and the infrastructure adapters wired below.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from binup.cli import exit_codes
from binup.cli.console import console
from binup.cli.logging_setup import configure_logging
from binup.config import UpgradeSettings
from binup.core.models import (
    Deadline,
    ProcessInvocation,
    SemVer,
    UpdateOutcome,
    UpgradeResult,
    UpgradeSession,
)
from binup.core.upgrade_service import UpgradeService
from binup.exceptions import BinupError, EnvironmentError
from binup.version import __version__

_LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``binup doctor``     — self-update readiness diagnostics
    * ``binup --version``
    """
    parser = argparse.ArgumentParser(
        prog="binup",
        description="Single-binary command-line tool with built-in self-update.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (debug, info, warning, error). "
        "Defaults to $BINUP_LOG_LEVEL or 'warning'.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Command to run: 'doctor'.",
    )
    return parser


# ---------------------------------------------------------------------------
# Self-update wiring
# ---------------------------------------------------------------------------

def _build_upgrade_service() -> UpgradeService:
    """Instantiate the infra adapters and the core service."""
    from binup.infra.archive_extractor import TarGzBinaryExtractor
    from binup.infra.binary_patcher import AtomicBinaryPatcher
    from binup.infra.http_client import HttpxReleaseFetcher, HttpxTagSource
    from binup.infra.respawner import SubprocessRespawner

    return UpgradeService(
        tag_source=HttpxTagSource(),
        fetcher=HttpxReleaseFetcher(),
        extractor=TarGzBinaryExtractor(),
        patcher=AtomicBinaryPatcher(),
        respawner=SubprocessRespawner(),
    )


def _build_session(
    settings: UpgradeSettings,
    arguments: Sequence[str],
) -> UpgradeSession:
    """Capture the running build, platform and invocation for one attempt."""
    from binup.infra.platform_info import current_executable, detect_platform

    return UpgradeSession(
        settings=settings,
        current_version=__version__,
        platform=detect_platform(),
        invocation=ProcessInvocation(
            executable=current_executable(),
            arguments=tuple(arguments),
        ),
        deadline=Deadline.after(settings.check_timeout),
    )


def _handle_upgrade_check(
    settings: UpgradeSettings,
    arguments: Sequence[str],
) -> int | None:
    """Run the self-update flow.

    Returns
    -------
    int | None
        ``None`` when the original command should continue, otherwise the
        exit code the process must terminate with.
    """
    from binup.cli.progress import CheckSpinner, RichDownloadProgress
    from binup.cli.upgrade_prompt import prompt_upgrade_confirmation

    try:
        session = _build_session(settings, arguments)
    except EnvironmentError as exc:
        _LOGGER.debug("Self-update unavailable: %s", exc)
        return None
    if UpgradeService.is_disabled(session):
        return None

    service = _build_upgrade_service()

    with CheckSpinner() as spinner, RichDownloadProgress() as progress:

        def _confirm(current: SemVer, latest: SemVer) -> bool:
            spinner.stop()
            return prompt_upgrade_confirmation(current, latest)

        result = service.run(session, _confirm, progress_callback=progress)

    return _handle_upgrade_result(result)


def _handle_upgrade_result(result: UpgradeResult) -> int | None:
    """Translate an upgrade outcome into "continue" or an exit code."""
    from binup.cli.upgrade_prompt import print_skip_note

    if result.terminates_process:
        if result.outcome is UpdateOutcome.APPLIED:
            return result.exit_code if result.exit_code is not None else exit_codes.SUCCESS
        if result.error is not None:
            _render_error(result.error)
        return exit_codes.UPGRADE_FAILED

    if result.outcome is UpdateOutcome.DECLINED and result.error is None:
        print_skip_note()

    return None


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_doctor(settings: UpgradeSettings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from binup.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the binup CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  The same list is replayed verbatim if a self-update
        restarts the tool.

    Returns
    -------
    int
        OS process exit code.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)

    parser = _build_parser()
    args = parser.parse_args(arguments)

    settings = UpgradeSettings.from_env()
    configure_logging(args.log_level or settings.log_level)

    upgrade_exit = _handle_upgrade_check(settings, arguments)
    if upgrade_exit is not None:
        return upgrade_exit

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor(settings)

    parser.error(f"unknown command: {args.command}")
    return exit_codes.GENERAL_ERROR  # pragma: no cover


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _render_error(exc: BinupError) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except BinupError as exc:
        _render_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
