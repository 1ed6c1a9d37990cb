"""Rich-based progress display for the self-update flow.

Two purely cosmetic indicators live here:

* :class:`CheckSpinner` — a spinner shown while the version check runs.
* :class:`RichDownloadProgress` — a download bar driven by the release
  fetcher's ``(downloaded, total)`` callback.

Neither one feeds data back into the pipeline.  Both degrade to silent
no-ops when Rich is not installed, and both are shutdown-safe: calls
after :meth:`stop` are ignored.
"""

from __future__ import annotations

from typing import Any

from binup.cli.console import get_rich_console
from binup.exceptions import EnvironmentError


class CheckSpinner:
    """Spinner shown while looking for a newer release.

    Usage::

        with CheckSpinner() as spinner:
            ...
            spinner.stop()  # before prompting
    """

    def __init__(self, message: str = "Checking for updates…") -> None:
        self._status: Any = None
        try:
            self._status = get_rich_console().status(message, spinner="dots")
        except EnvironmentError:
            self._status = None
        self._started: bool = False

    def __enter__(self) -> CheckSpinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    def start(self) -> None:
        """Start the spinner."""
        if self._status is not None and not self._started:
            self._status.start()
            self._started = True

    def stop(self) -> None:
        """Stop the spinner (idempotent)."""
        if self._status is not None and self._started:
            self._status.stop()
            self._started = False


class RichDownloadProgress:
    """Callable download-progress adapter for Rich.

    Usage::

        with RichDownloadProgress("binup 2.3.0") as progress:
            service.run(session, confirm, progress_callback=progress)
    """

    def __init__(self, description: str = "Downloading update") -> None:
        self._description = description
        self._progress: Any = None
        try:
            from rich.progress import (
                BarColumn,
                DownloadColumn,
                Progress,
                SpinnerColumn,
                TextColumn,
                TimeRemainingColumn,
                TransferSpeedColumn,
            )

            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
                console=get_rich_console(),
                transient=True,
            )
        except (ModuleNotFoundError, EnvironmentError):
            self._progress = None
        self._task_id: Any = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichDownloadProgress:
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent)."""
        if self._progress is not None and self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Fetcher callback
    # ------------------------------------------------------------------

    def __call__(self, downloaded: int, total: int | None) -> None:
        """Update the bar; it starts on the first chunk and stops once complete."""
        if self._progress is None:
            return

        if self._task_id is None:
            self._progress.start()
            self._started = True
            self._task_id = self._progress.add_task(self._description, total=total)

        if not self._started:
            return

        if total is not None:
            self._progress.update(self._task_id, total=total, completed=downloaded)
        else:
            self._progress.update(self._task_id, completed=downloaded)

        # The bar must be gone before the respawned child writes output.
        if total is not None and downloaded >= total:
            self.stop()
