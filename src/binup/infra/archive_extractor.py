"""Infrastructure: locate the executable inside a ``.tar.gz`` release.

The archive is read strictly as a stream (``tarfile`` mode ``r|gz``):
entries are visited in order, the first regular file with the expected
name is read and scanning stops there.  Nothing is written to disk.
"""

from __future__ import annotations

import logging
import tarfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from binup.core.models import ArchiveEntry
from binup.exceptions import ArchiveError

_LOGGER = logging.getLogger(__name__)

MAX_BINARY_SIZE: int = 512 * 1024 * 1024
"""Largest executable entry accepted from a release archive."""


class TarGzBinaryExtractor:
    """Concrete :class:`~binup.core.protocols.BinaryExtractor` for tar.gz archives.

    Parameters
    ----------
    max_binary_size:
        Entries larger than this are rejected rather than read into memory.
    """

    def __init__(self, max_binary_size: int = MAX_BINARY_SIZE) -> None:
        self._max_binary_size = max_binary_size

    def extract(self, archive_path: Path, binary_name: str) -> bytes:
        """Return the content of the first regular entry named *binary_name*.

        Raises
        ------
        ArchiveError
            If the archive is corrupt, the entry is oversized, or no
            matching entry exists.
        """
        try:
            with tarfile.open(archive_path, mode="r|gz") as archive:
                for entry, member in _iter_entries(archive):
                    if not (entry.is_regular_file and entry.name == binary_name):
                        _LOGGER.debug("Skipping archive entry %s", entry.name)
                        continue
                    return self._read_member(archive, member, entry)
        except (tarfile.TarError, zlib.error, EOFError, OSError) as exc:
            raise ArchiveError(f"Failed to read update archive: {exc}") from exc

        raise ArchiveError(
            f"Binary '{binary_name}' not found in the update archive.",
            hint="The release archive may be incomplete; try again later.",
        )

    def _read_member(
        self,
        archive: tarfile.TarFile,
        member: tarfile.TarInfo,
        entry: ArchiveEntry,
    ) -> bytes:
        if entry.size > self._max_binary_size:
            raise ArchiveError(
                f"Archive entry '{entry.name}' is too large "
                f"({entry.size} > {self._max_binary_size} bytes).",
            )
        handle = archive.extractfile(member)
        if handle is None:
            raise ArchiveError(f"Archive entry '{entry.name}' has no readable content.")
        with handle:
            content = handle.read()
        _LOGGER.info("Located %s in update archive (%d bytes)", entry.name, len(content))
        return content


def _iter_entries(
    archive: tarfile.TarFile,
) -> Iterator[tuple[ArchiveEntry, tarfile.TarInfo]]:
    """Yield archive entries in stream order."""
    for member in archive:
        yield (
            ArchiveEntry(
                name=member.name,
                is_regular_file=member.isreg(),
                size=member.size,
            ),
            member,
        )
