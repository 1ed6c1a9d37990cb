"""Custom exception hierarchy for binup.

All exceptions that cross layer boundaries must inherit from
:class:`BinupError`.  Raw third-party and OS exceptions (httpx, tarfile,
``OSError``) must NEVER propagate beyond the infrastructure layer — they
are caught there and re-raised as a typed subclass defined here.

Hierarchy
---------
BinupError
├── NetworkError
├── VersionParseError
├── ReleaseNotFoundError
├── ArchiveError
├── PatchError
├── PatchPermissionError
├── RespawnError
└── EnvironmentError

Whether an error is fatal depends on *when* it happens, not on its type:
anything raised before the user confirms the upgrade degrades to "no
update", anything after confirmation terminates the process.
"""

from __future__ import annotations


class BinupError(Exception):
    """Base exception for all binup errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Version discovery -----------------------------------------------------

class NetworkError(BinupError):
    """Raised when a release endpoint cannot be reached or answers badly."""


class VersionParseError(BinupError):
    """Raised when a version string is not valid semantic-version syntax."""


class ReleaseNotFoundError(BinupError):
    """Raised when the tag listing contains no CLI release tag."""


# --- Archive ---------------------------------------------------------------

class ArchiveError(BinupError):
    """Raised when the release archive is corrupt or lacks the binary."""


# --- Patching --------------------------------------------------------------

class PatchError(BinupError):
    """Raised when replacing the executable fails for a non-permission reason."""


class PatchPermissionError(BinupError):
    """Raised when the filesystem denies replacing the executable."""


# --- Respawn ---------------------------------------------------------------

class RespawnError(BinupError):
    """Raised when the updated executable cannot be started or waited on."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(BinupError):
    """Raised when a required runtime dependency is not available."""
