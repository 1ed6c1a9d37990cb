"""Pure semantic-version parsing and precedence.

Ordering follows semver 2.0.0 precedence rules:

1. ``major``, ``minor``, ``patch`` compared numerically.
2. A version without prerelease identifiers outranks one with them.
3. Prerelease identifiers are compared left to right: numeric
   identifiers numerically, alphanumeric ones in ASCII order, numeric
   below alphanumeric; a longer identifier list wins when all shared
   identifiers are equal.
4. Build metadata never affects precedence.
"""

from __future__ import annotations

import re

from binup.core.models import SemVer
from binup.exceptions import VersionParseError

__all__ = [
    "compare_versions",
    "is_upgrade",
    "parse_semver",
]

# Official semver 2.0.0 grammar with an optional leading "v".
_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)


def parse_semver(text: str) -> SemVer:
    """Parse *text* into a :class:`SemVer`.

    Raises
    ------
    VersionParseError
        If *text* is not valid semantic-version syntax.
    """
    match = _SEMVER_RE.match(text.strip())
    if match is None:
        raise VersionParseError(f"Invalid semantic version: {text!r}")
    pre = match.group("pre")
    build = match.group("build")
    return SemVer(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=tuple(pre.split(".")) if pre else (),
        build=tuple(build.split(".")) if build else (),
    )


def compare_versions(a: SemVer | str, b: SemVer | str) -> int:
    """Return ``-1`` when *a* < *b*, ``0`` when equal, ``1`` when *a* > *b*."""
    left = _coerce(a)
    right = _coerce(b)

    core_left = (left.major, left.minor, left.patch)
    core_right = (right.major, right.minor, right.patch)
    if core_left != core_right:
        return -1 if core_left < core_right else 1

    return _compare_prerelease(left.prerelease, right.prerelease)


def is_upgrade(current: SemVer | str, remote: SemVer | str) -> bool:
    """Return ``True`` when *remote* strictly outranks *current*."""
    return compare_versions(current, remote) < 0


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _coerce(version: SemVer | str) -> SemVer:
    if isinstance(version, SemVer):
        return version
    return parse_semver(version)


def _compare_prerelease(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    if left == right:
        return 0
    # A release outranks any of its prereleases.
    if not left:
        return 1
    if not right:
        return -1

    for left_id, right_id in zip(left, right):
        result = _compare_identifier(left_id, right_id)
        if result:
            return result

    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


def _compare_identifier(left: str, right: str) -> int:
    left_numeric = left.isdigit()
    right_numeric = right.isdigit()
    if left_numeric and right_numeric:
        left_key: int | str = int(left)
        right_key: int | str = int(right)
    elif left_numeric != right_numeric:
        return -1 if left_numeric else 1
    else:
        left_key, right_key = left, right

    if left_key == right_key:
        return 0
    return -1 if left_key < right_key else 1  # type: ignore[operator]
