"""Runtime settings for the self-update flow.

Settings are read once from the process environment into an immutable
:class:`UpgradeSettings` value, which is then threaded through the
upgrade session.  Nothing else in the package reads ``os.environ``.

Environment variables
---------------------
``BINUP_SKIP_UPGRADE``
    Any non-empty value skips the update check before any network call.
``BINUP_TAGS_URL``
    Override for the tag-listing endpoint.
``BINUP_RELEASES_URL``
    Override for the release base URL (archives live under
    ``<base>/releases/download/...``).
``BINUP_LOG_LEVEL``
    Logging level name (``debug``, ``info``, ``warning``...).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

SKIP_UPGRADE_ENV: str = "BINUP_SKIP_UPGRADE"
TAGS_URL_ENV: str = "BINUP_TAGS_URL"
RELEASES_URL_ENV: str = "BINUP_RELEASES_URL"
LOG_LEVEL_ENV: str = "BINUP_LOG_LEVEL"

TOOL_NAME: str = "binup"
DEFAULT_TAGS_URL: str = "https://api.github.com/repos/binup/binup/tags"
DEFAULT_RELEASES_URL: str = "https://github.com/binup/binup"
DEFAULT_LOG_LEVEL: str = "warning"

VERSION_CHECK_TIMEOUT: float = 10.0
"""Upper bound, in seconds, for the whole version-check phase."""


@dataclass(frozen=True, slots=True)
class UpgradeSettings:
    """Immutable configuration for one upgrade attempt."""

    tool_name: str = TOOL_NAME
    tags_url: str = DEFAULT_TAGS_URL
    releases_url: str = DEFAULT_RELEASES_URL
    check_timeout: float = VERSION_CHECK_TIMEOUT
    skip_upgrade: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> UpgradeSettings:
        """Build settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            tags_url=_non_empty(env.get(TAGS_URL_ENV)) or DEFAULT_TAGS_URL,
            releases_url=(
                _non_empty(env.get(RELEASES_URL_ENV)) or DEFAULT_RELEASES_URL
            ).rstrip("/"),
            skip_upgrade=bool(env.get(SKIP_UPGRADE_ENV)),
            log_level=_non_empty(env.get(LOG_LEVEL_ENV)) or DEFAULT_LOG_LEVEL,
        )


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
