"""Tests for domain models, release naming, and settings.

Models are frozen dataclasses — these tests verify immutability, the
deadline arithmetic, and the pure URL/name construction rules.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from binup.config import (
    DEFAULT_RELEASES_URL,
    DEFAULT_TAGS_URL,
    VERSION_CHECK_TIMEOUT,
    UpgradeSettings,
)
from binup.core.models import (
    Deadline,
    PlatformTarget,
    ProcessInvocation,
    SemVer,
    UpdateOutcome,
    UpgradeResult,
)
from binup.core.release import asset_name, binary_name, download_url, release_tag
from binup.exceptions import PatchError


_LINUX = PlatformTarget(os="linux", arch="amd64")
_WINDOWS = PlatformTarget(os="windows", arch="arm64")


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

class TestSemVerModel:
    def test_frozen(self) -> None:
        v = SemVer(1, 2, 3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.major = 9  # type: ignore[misc]

    def test_str_without_extras(self) -> None:
        assert str(SemVer(1, 2, 3)) == "1.2.3"


class TestProcessInvocation:
    def test_streams_default_to_inherit(self) -> None:
        inv = ProcessInvocation(executable=Path("/bin/tool"), arguments=("a",))
        assert inv.stdin is None
        assert inv.stdout is None
        assert inv.stderr is None


class TestDeadline:
    def test_remaining_counts_down(self) -> None:
        now = [100.0]
        deadline = Deadline.after(10.0, clock=lambda: now[0])
        assert deadline.remaining() == pytest.approx(10.0)
        now[0] = 104.0
        assert deadline.remaining() == pytest.approx(6.0)
        assert deadline.expired is False

    def test_expired_never_negative(self) -> None:
        now = [0.0]
        deadline = Deadline.after(1.0, clock=lambda: now[0])
        now[0] = 5.0
        assert deadline.remaining() == 0.0
        assert deadline.expired is True


class TestUpgradeResult:
    @pytest.mark.parametrize(
        ("outcome", "terminates"),
        [
            (UpdateOutcome.NO_UPDATE_CHECKED, False),
            (UpdateOutcome.UP_TO_DATE, False),
            (UpdateOutcome.DECLINED, False),
            (UpdateOutcome.APPLIED, True),
            (UpdateOutcome.FAILED, True),
        ],
    )
    def test_terminates_process(self, outcome: UpdateOutcome, terminates: bool) -> None:
        assert UpgradeResult(outcome).terminates_process is terminates

    def test_failure_carries_error(self) -> None:
        err = PatchError("disk full")
        result = UpgradeResult(UpdateOutcome.FAILED, error=err)
        assert result.error is err


# ---------------------------------------------------------------------------
# Release naming
# ---------------------------------------------------------------------------

class TestReleaseNaming:
    def test_release_tag(self) -> None:
        assert str(release_tag(SemVer(2, 3, 0))) == "cli/v2.3.0"

    def test_binary_name_posix(self) -> None:
        assert binary_name("binup", _LINUX) == "binup"

    def test_binary_name_windows(self) -> None:
        assert binary_name("binup", _WINDOWS) == "binup.exe"

    def test_asset_name(self) -> None:
        assert asset_name("binup", "2.3.0", _LINUX) == "binup_2.3.0_linux_amd64.tar.gz"

    def test_download_url_escapes_tag(self) -> None:
        url = download_url("https://github.com/binup/binup", "binup", SemVer(2, 3, 0), _LINUX)
        assert url == (
            "https://github.com/binup/binup/releases/download/"
            "cli%2Fv2.3.0/binup_2.3.0_linux_amd64.tar.gz"
        )

    def test_download_url_tolerates_trailing_slash(self) -> None:
        url = download_url("https://e.test/repo/", "binup", "1.0.0", _WINDOWS)
        assert url.startswith("https://e.test/repo/releases/download/")
        assert url.endswith("binup_1.0.0_windows_arm64.tar.gz")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestUpgradeSettings:
    def test_defaults_from_empty_env(self) -> None:
        settings = UpgradeSettings.from_env({})
        assert settings.tags_url == DEFAULT_TAGS_URL
        assert settings.releases_url == DEFAULT_RELEASES_URL
        assert settings.check_timeout == VERSION_CHECK_TIMEOUT == 10.0
        assert settings.skip_upgrade is False

    @pytest.mark.parametrize("value", ["1", "true", "yes", "0"])
    def test_any_non_empty_skip_value_disables(self, value: str) -> None:
        assert UpgradeSettings.from_env({"BINUP_SKIP_UPGRADE": value}).skip_upgrade

    def test_empty_skip_value_keeps_enabled(self) -> None:
        assert not UpgradeSettings.from_env({"BINUP_SKIP_UPGRADE": ""}).skip_upgrade

    def test_url_overrides(self) -> None:
        settings = UpgradeSettings.from_env(
            {
                "BINUP_TAGS_URL": "https://mirror.test/tags",
                "BINUP_RELEASES_URL": "https://mirror.test/repo/",
            }
        )
        assert settings.tags_url == "https://mirror.test/tags"
        assert settings.releases_url == "https://mirror.test/repo"

    def test_log_level_override(self) -> None:
        assert UpgradeSettings.from_env({"BINUP_LOG_LEVEL": "debug"}).log_level == "debug"
