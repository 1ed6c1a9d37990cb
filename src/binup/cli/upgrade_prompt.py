"""Interactive upgrade confirmation for the CLI layer.

This module is responsible for:

* Showing the running and the latest available versions.
* Asking a yes/no question via questionary.
* Telling the user how to silence future prompts after a "no".

No business logic lives here — the core service decides when to ask.
"""

from __future__ import annotations

from typing import Any

from binup.cli.console import console
from binup.config import SKIP_UPGRADE_ENV, TOOL_NAME
from binup.core.models import SemVer
from binup.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for the confirmation prompt."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def prompt_upgrade_confirmation(current: SemVer, latest: SemVer) -> bool:
    """Render both versions and block for a yes/no answer.

    Returns
    -------
    bool
        ``True`` only when the user explicitly answers yes.  Ctrl+C or
        Esc during the prompt counts as "no".

    Raises
    ------
    EnvironmentError
        If questionary is not installed or no answer can be read from
        the terminal.
    """
    questionary = _import_questionary()

    console.print(
        f"A new version of {TOOL_NAME} is available: "
        f"[bold bright_green]{latest}[/bold bright_green]"
    )
    console.print(f"Current version: [bold bright_cyan]{current}[/bold bright_cyan]")

    try:
        answer: bool | None = questionary.confirm(
            "Upgrade to the latest version?",
            default=True,
        ).ask()  # Returns None on Ctrl+C / Esc
    except (EOFError, OSError) as exc:
        # Closed or non-interactive stdin, e.g. ``binup doctor </dev/null``.
        raise EnvironmentError(
            f"Cannot read confirmation input: {exc}",
            hint=f"Set {SKIP_UPGRADE_ENV}=1 in non-interactive environments.",
        ) from exc

    return answer is True


def print_skip_note() -> None:
    """Tell the user how to stop future upgrade prompts."""
    console.print(
        f"[dim]Note: set {SKIP_UPGRADE_ENV}=1 to stop upgrade prompts[/dim]"
    )
