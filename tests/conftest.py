"""Shared pytest fixtures and configuration for the binup test suite.

Guidelines
----------
* No internet access in any test — HTTP goes through ``httpx.MockTransport``.
* Core tests use in-memory fakes for every infrastructure adapter.
* Filesystem tests work inside ``tmp_path`` only.
"""

from __future__ import annotations

import io
import tarfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from binup.config import UpgradeSettings
from binup.core.models import (
    Deadline,
    PlatformTarget,
    ProcessInvocation,
    UpgradeSession,
)

ArchiveSpec = Sequence[tuple[str, bytes | None]]
"""``(name, content)`` pairs; ``None`` content creates a directory entry."""


def write_tar_gz(path: Path, entries: ArchiveSpec) -> Path:
    """Write a gzip-compressed tar archive holding *entries* in order."""
    with tarfile.open(path, mode="w:gz") as archive:
        for name, content in entries:
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                archive.addfile(info)
                continue
            info.size = len(content)
            info.mode = 0o755
            archive.addfile(info, io.BytesIO(content))
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[[ArchiveSpec], Path]:
    """Factory building ``release.tar.gz`` archives under ``tmp_path``."""
    counter = {"n": 0}

    def _make(entries: ArchiveSpec) -> Path:
        counter["n"] += 1
        return write_tar_gz(tmp_path / f"release-{counter['n']}.tar.gz", entries)

    return _make


def make_session(**overrides: object) -> UpgradeSession:
    """Build an :class:`UpgradeSession` with sensible test defaults."""
    defaults: dict[str, object] = {
        "settings": UpgradeSettings(
            tags_url="https://tags.example.test/tags",
            releases_url="https://releases.example.test/binup",
        ),
        "current_version": "2.2.4",
        "platform": PlatformTarget(os="linux", arch="amd64"),
        "invocation": ProcessInvocation(
            executable=Path("/opt/binup/binup"),
            arguments=("doctor", "--log-level", "debug"),
        ),
        "deadline": Deadline.after(10.0),
    }
    defaults.update(overrides)
    return UpgradeSession(**defaults)  # type: ignore[arg-type]
