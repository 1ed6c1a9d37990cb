"""Infrastructure layer — external system integration.

This layer wraps all interaction with HTTP endpoints, tar archives, the
filesystem, and child processes.  Every raw third-party or OS exception
must be caught here and re-raised as a
:class:`~binup.exceptions.BinupError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from binup.infra.archive_extractor import TarGzBinaryExtractor
from binup.infra.binary_patcher import AtomicBinaryPatcher
from binup.infra.http_client import HttpxReleaseFetcher, HttpxTagSource
from binup.infra.platform_info import current_executable, detect_platform
from binup.infra.respawner import SubprocessRespawner

__all__: list[str] = [
    "AtomicBinaryPatcher",
    "HttpxReleaseFetcher",
    "HttpxTagSource",
    "SubprocessRespawner",
    "TarGzBinaryExtractor",
    "current_executable",
    "detect_platform",
]
