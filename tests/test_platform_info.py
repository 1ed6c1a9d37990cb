"""Tests for platform and executable detection (infra/platform_info.py)."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from binup.exceptions import EnvironmentError
from binup.infra import platform_info
from binup.infra.platform_info import current_executable, detect_platform


class TestDetectPlatform:
    @pytest.mark.parametrize(
        ("sys_platform", "machine", "expected_os", "expected_arch"),
        [
            ("linux", "x86_64", "linux", "amd64"),
            ("linux", "aarch64", "linux", "arm64"),
            ("darwin", "arm64", "darwin", "arm64"),
            ("win32", "AMD64", "windows", "amd64"),
            ("freebsd14", "i386", "freebsd", "386"),
            ("linux", "armv7l", "linux", "arm"),
            ("sunos5", "sparc", "sunos5", "sparc"),
        ],
    )
    def test_release_naming(
        self,
        monkeypatch: pytest.MonkeyPatch,
        sys_platform: str,
        machine: str,
        expected_os: str,
        expected_arch: str,
    ) -> None:
        monkeypatch.setattr(platform_info.sys, "platform", sys_platform)
        with patch("binup.infra.platform_info.platform.machine", return_value=machine):
            target = detect_platform()
        assert target.os == expected_os
        assert target.arch == expected_arch


class TestCurrentExecutable:
    def test_frozen_build_uses_sys_executable(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        exe = tmp_path / "binup"
        exe.write_bytes(b"")
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(exe))
        assert current_executable() == exe.resolve()

    def test_script_path_is_resolved(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        script = tmp_path / "bin" / "binup"
        script.parent.mkdir()
        script.write_bytes(b"")
        monkeypatch.setattr(sys, "argv", [str(script), "doctor"])
        assert current_executable() == script.resolve()

    def test_bare_name_looked_up_on_path(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        found = tmp_path / "binup"
        found.write_bytes(b"")
        monkeypatch.setattr(sys, "argv", ["binup"])
        with patch("binup.infra.platform_info.shutil.which", return_value=str(found)):
            assert current_executable() == found.resolve()

    def test_python_source_launch_is_refused(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        main_py = tmp_path / "binup" / "__main__.py"
        monkeypatch.setattr(sys, "argv", [str(main_py), "doctor"])
        with pytest.raises(EnvironmentError, match="not a standalone executable"):
            current_executable()
