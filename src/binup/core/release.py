"""Release naming rules: tags, asset names, and download URLs.

Pure string construction — no network access happens here.
"""

from __future__ import annotations

from urllib.parse import quote_plus

from binup.core.models import PlatformTarget, ReleaseTag, SemVer

TAG_PREFIX: str = "cli/v"
"""Prefix shared by every CLI release tag."""

ARCHIVE_SUFFIX: str = ".tar.gz"


def release_tag(version: SemVer | str) -> ReleaseTag:
    """Return the canonical tag for *version* (``cli/v2.3.0``)."""
    return ReleaseTag(f"{TAG_PREFIX}{version}")


def binary_name(tool_name: str, platform: PlatformTarget) -> str:
    """Return the executable's entry name inside the release archive."""
    if platform.is_windows:
        return f"{tool_name}.exe"
    return tool_name


def asset_name(tool_name: str, version: SemVer | str, platform: PlatformTarget) -> str:
    """Return the archive file name, e.g. ``binup_2.3.0_linux_amd64.tar.gz``."""
    return f"{tool_name}_{version}_{platform.os}_{platform.arch}{ARCHIVE_SUFFIX}"


def download_url(
    releases_url: str,
    tool_name: str,
    version: SemVer | str,
    platform: PlatformTarget,
) -> str:
    """Build the archive download URL for *version* on *platform*.

    The tag is query-escaped, so ``cli/v2.3.0`` becomes ``cli%2Fv2.3.0``.
    """
    tag = release_tag(version)
    return (
        f"{releases_url.rstrip('/')}/releases/download/"
        f"{quote_plus(tag.name)}/{asset_name(tool_name, version, platform)}"
    )
