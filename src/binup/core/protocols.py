"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so every stage of the upgrade pipeline can be
replaced by a fake in tests.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol

from binup.core.models import Deadline, ProcessInvocation

ProgressCallback = Callable[[int, int | None], None]
"""Called with ``(downloaded_bytes, total_bytes_or_None)``.

A final call with ``downloaded == total`` marks the end of the download.
"""


class TagSource(Protocol):
    """Contract for the remote tag-listing endpoint."""

    def fetch_tag_listing(self, url: str, *, deadline: Deadline) -> str:
        """Return the raw response body of *url*.

        The request must not outlive *deadline*.

        Raises
        ------
        NetworkError
            On connection failure, timeout, or a non-success status.
        """
        ...  # pragma: no cover


class ReleaseFetcher(Protocol):
    """Contract for downloading a release archive to local storage."""

    def fetch(
        self,
        url: str,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> AbstractContextManager[Path]:
        """Download *url* completely into a private temporary file.

        The returned context manager yields the file path only once the
        whole body has been written, and deletes the file on exit
        whatever happened inside the ``with`` block.

        Raises
        ------
        NetworkError
            If the download fails or answers with a non-success status.
        """
        ...  # pragma: no cover


class BinaryExtractor(Protocol):
    """Contract for locating the executable inside a release archive."""

    def extract(self, archive_path: Path, binary_name: str) -> bytes:
        """Return the content of the first regular entry named *binary_name*.

        Raises
        ------
        ArchiveError
            If the archive is unreadable or holds no such entry.
        """
        ...  # pragma: no cover


class BinaryPatcher(Protocol):
    """Contract for atomically replacing an executable on disk."""

    def apply(self, target: Path, content: bytes) -> None:
        """Replace *target* with *content* without a partial-file window.

        Raises
        ------
        PatchPermissionError
            If the filesystem denies the replacement.
        PatchError
            For any other I/O failure.
        """
        ...  # pragma: no cover


class ProcessRespawner(Protocol):
    """Contract for re-running the tool and collecting its exit status."""

    def respawn(self, invocation: ProcessInvocation) -> int:
        """Run *invocation* to completion and return its exit status.

        Raises
        ------
        RespawnError
            If the process cannot be started or waited on.
        """
        ...  # pragma: no cover
