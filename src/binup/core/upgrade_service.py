"""Core upgrade service — drives the check → confirm → apply pipeline.

The service owns the state machine of one upgrade attempt::

    Idle → CheckingVersion → [UpToDate]
                           → UpdateAvailable → [Declined]
                                             → Downloading → Extracting
                                               → Patching → [Failed]
                                               → Respawning → [Applied]

Every stage is delegated to an adapter injected at construction time
(see :mod:`binup.core.protocols`).  The service never terminates the
process: it returns an :class:`~binup.core.models.UpgradeResult` and the
CLI dispatcher decides what to do with it.

Guarantees
----------
* Errors before confirmation never escape :meth:`UpgradeService.run`;
  they become ``UP_TO_DATE`` (or ``DECLINED`` for a broken prompt).
* Errors after confirmation become ``FAILED``.
* No byte reaches the patcher before the archive has been fully
  downloaded and the binary entry located.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from binup.core.models import (
    SemVer,
    UpdateOutcome,
    UpgradeCandidate,
    UpgradeResult,
    UpgradeSession,
)
from binup.core.protocols import (
    BinaryExtractor,
    BinaryPatcher,
    ProcessRespawner,
    ProgressCallback,
    ReleaseFetcher,
    TagSource,
)
from binup.core.release import binary_name, download_url
from binup.core.semver import is_upgrade, parse_semver
from binup.core.tag_scan import scan_latest_version
from binup.exceptions import (
    ArchiveError,
    BinupError,
    NetworkError,
    PatchError,
    RespawnError,
)
from binup.version import DEVELOPMENT_VERSION

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

ConfirmCallback = Callable[[SemVer, SemVer], bool]
"""Called with ``(current, latest)``; returns the user's yes/no answer."""


class UpgradeService:
    """Stateless service that runs one self-update attempt.

    Parameters
    ----------
    tag_source:
        Fetches the raw tag listing.
    fetcher:
        Downloads release archives.
    extractor:
        Pulls the executable out of an archive.
    patcher:
        Swaps the executable on disk.
    respawner:
        Re-runs the updated executable.
    """

    def __init__(
        self,
        tag_source: TagSource,
        fetcher: ReleaseFetcher,
        extractor: BinaryExtractor,
        patcher: BinaryPatcher,
        respawner: ProcessRespawner,
    ) -> None:
        self._tag_source: TagSource = tag_source
        self._fetcher: ReleaseFetcher = fetcher
        self._extractor: BinaryExtractor = extractor
        self._patcher: BinaryPatcher = patcher
        self._respawner: ProcessRespawner = respawner

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def is_disabled(session: UpgradeSession) -> bool:
        """Return ``True`` when the environment toggle or the dev sentinel applies."""
        return (
            session.settings.skip_upgrade
            or session.current_version == DEVELOPMENT_VERSION
        )

    def run(
        self,
        session: UpgradeSession,
        confirm: ConfirmCallback,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> UpgradeResult:
        """Run the whole pipeline for *session*.

        *confirm* is only invoked when a newer release exists.
        """
        if self.is_disabled(session):
            _LOGGER.debug("Self-update disabled for version %s", session.current_version)
            return UpgradeResult(UpdateOutcome.NO_UPDATE_CHECKED)

        try:
            candidate = self.check_for_update(session)
        except BinupError as exc:
            _LOGGER.debug("Version check failed, continuing without update: %s", exc)
            return UpgradeResult(UpdateOutcome.UP_TO_DATE, error=exc)

        if candidate is None:
            return UpgradeResult(UpdateOutcome.UP_TO_DATE)

        try:
            confirmed = confirm(candidate.current, candidate.latest)
        except BinupError as exc:
            _LOGGER.debug("Upgrade prompt unavailable: %s", exc)
            return UpgradeResult(UpdateOutcome.DECLINED, candidate=candidate, error=exc)

        if not confirmed:
            _LOGGER.info("Upgrade to %s declined", candidate.latest)
            return UpgradeResult(UpdateOutcome.DECLINED, candidate=candidate)

        try:
            exit_code = self.apply_update(
                session,
                candidate,
                progress_callback=progress_callback,
            )
        except BinupError as exc:
            _LOGGER.debug("Upgrade to %s failed: %s", candidate.latest, exc)
            return UpgradeResult(UpdateOutcome.FAILED, candidate=candidate, error=exc)

        return UpgradeResult(
            UpdateOutcome.APPLIED,
            candidate=candidate,
            exit_code=exit_code,
        )

    def check_for_update(self, session: UpgradeSession) -> UpgradeCandidate | None:
        """Return a candidate when the registry lists a newer release.

        Raises
        ------
        NetworkError
            If the tag listing cannot be fetched within the deadline.
        ReleaseNotFoundError
            If the listing holds no CLI tag.
        VersionParseError
            If either version string is malformed.
        """
        body = self._fetch_tag_listing(session)
        latest = parse_semver(scan_latest_version(body))
        current = parse_semver(session.current_version)

        if not is_upgrade(current, latest):
            _LOGGER.debug("Up to date: current=%s latest=%s", current, latest)
            return None

        _LOGGER.info("Update available: current=%s latest=%s", current, latest)
        return UpgradeCandidate(current=current, latest=latest)

    def apply_update(
        self,
        session: UpgradeSession,
        candidate: UpgradeCandidate,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        """Download, extract, patch and respawn; return the child's exit status.

        Raises
        ------
        NetworkError, ArchiveError, PatchPermissionError, PatchError, RespawnError
            Any of these is fatal for the caller.
        """
        settings = session.settings
        url = download_url(
            settings.releases_url,
            settings.tool_name,
            candidate.latest,
            session.platform,
        )
        expected_name = binary_name(settings.tool_name, session.platform)

        _LOGGER.info("Downloading %s", url)
        content = self._download_and_extract(url, expected_name, progress_callback)

        target = session.invocation.executable
        _LOGGER.info("Replacing %s (%d bytes)", target, len(content))
        self._guarded(
            lambda: self._patcher.apply(target, content),
            PatchError,
            "Unexpected error while replacing the executable",
        )

        _LOGGER.info("Restarting %s", target)
        return self._guarded(
            lambda: self._respawner.respawn(session.invocation),
            RespawnError,
            "Unexpected error while restarting",
        )

    # ------------------------------------------------------------------
    # Stages (safe boundaries)
    # ------------------------------------------------------------------

    def _fetch_tag_listing(self, session: UpgradeSession) -> str:
        if session.deadline.expired:
            raise NetworkError("Version check deadline exceeded.")
        return self._guarded(
            lambda: self._tag_source.fetch_tag_listing(
                session.settings.tags_url,
                deadline=session.deadline,
            ),
            NetworkError,
            "Unexpected error while checking the latest version",
        )

    def _download_and_extract(
        self,
        url: str,
        expected_name: str,
        progress_callback: ProgressCallback | None,
    ) -> bytes:
        def _run() -> bytes:
            with self._fetcher.fetch(url, progress_callback=progress_callback) as archive_path:
                return self._extractor.extract(archive_path, expected_name)

        content = self._guarded(
            _run,
            ArchiveError,
            "Unexpected error while unpacking the update",
        )
        if not content:
            raise ArchiveError(f"Release archive entry '{expected_name}' is empty.")
        return content

    @staticmethod
    def _guarded(
        action: Callable[[], _T],
        error_type: type[BinupError],
        message: str,
    ) -> _T:
        """Run *action*, wrapping non-binup exceptions into *error_type*."""
        try:
            return action()
        except BinupError:
            # Already typed; propagate unchanged.
            raise
        except Exception as exc:
            raise error_type(f"{message}: {exc}") from exc
