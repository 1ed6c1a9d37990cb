"""Domain models for binup.

All models are **frozen** dataclasses — immutable value objects that live
only for the duration of one process invocation.  None of them performs
I/O.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Any

from binup.config import UpgradeSettings
from binup.exceptions import BinupError


# ---------------------------------------------------------------------------
# Versions and tags
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SemVer:
    """A parsed semantic version.

    Equality here is structural (build metadata included); use
    :func:`~binup.core.semver.compare_versions` for precedence.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    """Dot-separated prerelease identifiers, e.g. ``("rc", "1")``."""

    build: tuple[str, ...] = ()
    """Build metadata identifiers.  Ignored for ordering."""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


@dataclass(frozen=True, slots=True)
class ReleaseTag:
    """Canonical remote identifier of a CLI release (``cli/vX.Y.Z``)."""

    name: str

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Archive
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One record of a decompressed tar stream, in stream order."""

    name: str
    is_regular_file: bool
    size: int


# ---------------------------------------------------------------------------
# Platform and process
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PlatformTarget:
    """Operating system and architecture in release-asset naming."""

    os: str
    """``linux``, ``darwin``, ``windows``, ``freebsd``..."""

    arch: str
    """``amd64``, ``arm64``, ``386``, ``arm``..."""

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"


@dataclass(frozen=True, slots=True)
class ProcessInvocation:
    """How the tool was started; replayed verbatim after patching.

    ``None`` stream handles mean "inherit the parent's stream".
    """

    executable: Path
    arguments: tuple[str, ...]
    stdin: IO[Any] | None = None
    stdout: IO[Any] | None = None
    stderr: IO[Any] | None = None


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Deadline:
    """Absolute point on a monotonic clock after which work must stop."""

    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)

    @classmethod
    def after(
        cls,
        seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> Deadline:
        """Return a deadline *seconds* from now according to *clock*."""
        return cls(expires_at=clock() + seconds, clock=clock)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.expires_at - self.clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0


# ---------------------------------------------------------------------------
# Session and results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UpgradeSession:
    """Everything one upgrade attempt needs, passed explicitly to each stage."""

    settings: UpgradeSettings
    current_version: str
    """Build-embedded version string, possibly the ``development`` sentinel."""

    platform: PlatformTarget
    invocation: ProcessInvocation
    deadline: Deadline
    """Bound for the version-check phase only."""


@dataclass(frozen=True, slots=True)
class UpgradeCandidate:
    """A remote release that is newer than the running build."""

    current: SemVer
    latest: SemVer


class UpdateOutcome(Enum):
    """Terminal state of one upgrade attempt."""

    NO_UPDATE_CHECKED = "no_update_checked"
    UP_TO_DATE = "up_to_date"
    DECLINED = "declined"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class UpgradeResult:
    """Outcome of :meth:`~binup.core.upgrade_service.UpgradeService.run`.

    The top-level dispatcher inspects this value to decide whether the
    original command continues (``NO_UPDATE_CHECKED``, ``UP_TO_DATE``,
    ``DECLINED``) or the process terminates (``APPLIED``, ``FAILED``).
    """

    outcome: UpdateOutcome
    candidate: UpgradeCandidate | None = None
    exit_code: int | None = None
    """Exit status of the respawned child; set only for ``APPLIED``."""

    error: BinupError | None = None
    """Failure reason for ``FAILED``; soft failure for ``UP_TO_DATE``/``DECLINED``."""

    @property
    def terminates_process(self) -> bool:
        return self.outcome in (UpdateOutcome.APPLIED, UpdateOutcome.FAILED)
