"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, network, or subprocess I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from binup.core.models import (
    ArchiveEntry,
    Deadline,
    PlatformTarget,
    ProcessInvocation,
    ReleaseTag,
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
    ReleaseFetcher,
    TagSource,
)
from binup.core.semver import compare_versions, is_upgrade, parse_semver
from binup.core.upgrade_service import UpgradeService

__all__: list[str] = [
    "ArchiveEntry",
    "BinaryExtractor",
    "BinaryPatcher",
    "Deadline",
    "PlatformTarget",
    "ProcessInvocation",
    "ProcessRespawner",
    "ReleaseFetcher",
    "ReleaseTag",
    "SemVer",
    "TagSource",
    "UpdateOutcome",
    "UpgradeCandidate",
    "UpgradeResult",
    "UpgradeService",
    "UpgradeSession",
    "compare_versions",
    "is_upgrade",
    "parse_semver",
]
