"""Extract the newest CLI release version from a raw tag listing.

The listing is treated as unstructured text rather than parsed as a
document.  The first line carrying both the ``"name"`` field marker and
a ``"cli/v`` tag wins; the registry is expected to list newest tags
first, so no attempt is made to pick the semantic maximum.
"""

from __future__ import annotations

from binup.core.release import TAG_PREFIX
from binup.exceptions import ReleaseNotFoundError

_NAME_MARKER = '"name"'
_QUOTED_TAG_PREFIX = f'"{TAG_PREFIX}'


def scan_latest_version(body: str) -> str:
    """Return the version text of the first CLI tag found in *body*.

    For a line such as ``"name": "cli/v2.3.0",`` this returns
    ``"2.3.0"``.  Lines whose tag has no closing quote, or an empty
    version, are skipped.

    Raises
    ------
    ReleaseNotFoundError
        If no line matches.
    """
    for line in body.splitlines():
        if _NAME_MARKER not in line or _QUOTED_TAG_PREFIX not in line:
            continue
        start = line.index(_QUOTED_TAG_PREFIX) + len(_QUOTED_TAG_PREFIX)
        end = line.find('"', start)
        if end > start:
            return line[start:end]

    raise ReleaseNotFoundError(
        f"No '{TAG_PREFIX}' release tag found in the tag listing.",
    )
