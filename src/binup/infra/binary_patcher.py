"""Infrastructure: atomic replacement of the running executable.

The new image is written in full to a hidden staging file next to the
target (same directory, hence same filesystem), flushed to disk, given
the target's permission bits, and only then swapped into place.

Swap strategies
---------------
``rename``
    POSIX.  A single ``os.replace`` over the existing path; the kernel
    guarantees any observer sees either the old or the new file.
``move-aside``
    Windows, where a running image cannot be overwritten but can be
    renamed.  The current image is moved to ``.<name>.old`` and the
    staged one renamed into place.  Between the two renames the target
    path is briefly missing; if the second rename fails the original is
    moved back.  The old image is deleted when the OS allows it and left
    behind otherwise.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from binup.exceptions import PatchError, PatchPermissionError

_LOGGER = logging.getLogger(__name__)

_DEFAULT_MODE = 0o755


class AtomicBinaryPatcher:
    """Concrete :class:`~binup.core.protocols.BinaryPatcher`.

    Parameters
    ----------
    move_aside:
        Force the Windows ``move-aside`` strategy.  Defaults to ``True``
        on Windows and ``False`` elsewhere.
    """

    def __init__(self, *, move_aside: bool | None = None) -> None:
        self._move_aside = os.name == "nt" if move_aside is None else move_aside

    def apply(self, target: Path, content: bytes) -> None:
        """Replace *target* with *content*.

        Raises
        ------
        PatchPermissionError
            If the filesystem denies writing the staging file or the swap.
        PatchError
            For any other I/O failure.  *target* is left untouched.
        """
        target = target.resolve()
        staging = target.with_name(f".{target.name}.new")

        try:
            mode = _existing_mode(target)
            _write_staging(staging, content, mode)
            if self._move_aside:
                self._swap_move_aside(staging, target)
            else:
                os.replace(staging, target)
        except PermissionError as exc:
            _discard(staging)
            raise PatchPermissionError(
                f"Failed to apply update due to a permission error: {exc}",
                hint=_elevation_hint(),
            ) from exc
        except OSError as exc:
            _discard(staging)
            raise PatchError(f"Failed to apply update: {exc}") from exc

        _LOGGER.info("Replaced %s", target)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    @staticmethod
    def _swap_move_aside(staging: Path, target: Path) -> None:
        old = target.with_name(f".{target.name}.old")
        _discard(old)
        os.replace(target, old)
        try:
            os.replace(staging, target)
        except OSError:
            os.replace(old, target)
            raise
        try:
            old.unlink()
        except OSError as exc:
            # A running image cannot be deleted on Windows.
            _LOGGER.debug("Leaving previous image at %s: %s", old, exc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _existing_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return _DEFAULT_MODE


def _write_staging(staging: Path, content: bytes, mode: int) -> None:
    with staging.open("wb") as handle:
        handle.write(content)
        handle.flush()
        os.fsync(handle.fileno())
    os.chmod(staging, mode)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        _LOGGER.debug("Could not remove %s: %s", path, exc)


def _elevation_hint() -> str:
    if os.name == "nt":
        return "Run the command again from an Administrator terminal."
    return "Run the command again with elevated privileges, e.g. with 'sudo'."
