"""Tests for the ``binup doctor`` command (cli/doctor.py).

Platform and executable detection are mocked where the result matters —
no network, no writes outside ``tmp_path``.

Coverage:
* Individual check functions return correct tuples.
* Doctor returns SUCCESS when only warnings are present.
* Doctor returns GENERAL_ERROR when a critical check fails.
* Plain-text fallback when Rich is missing.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from binup.cli import exit_codes
from binup.config import UpgradeSettings
from binup.core.models import PlatformTarget


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from binup.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestHttpxVersionCheck:
    def test_installed(self) -> None:
        from binup.cli.doctor import _httpx_version_check

        label, _value, status = _httpx_version_check()
        assert label == "httpx"
        assert "OK" in status

    @patch.dict("sys.modules", {"httpx": None})
    def test_not_installed(self) -> None:
        from binup.cli.doctor import _httpx_version_check

        label, value, status = _httpx_version_check()
        assert label == "httpx"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestBinupVersionCheck:
    def test_development_build_warns(self) -> None:
        from binup.cli.doctor import _binup_version_check

        label, value, status = _binup_version_check()
        assert label == "binup"
        assert value == "development"
        assert "WARN" in status

    @patch("binup.cli.doctor.__version__", "2.3.0")
    def test_release_build_ok(self) -> None:
        from binup.cli.doctor import _binup_version_check

        _label, value, status = _binup_version_check()
        assert value == "2.3.0"
        assert "OK" in status


class TestReleaseTargetCheck:
    @patch("binup.cli.doctor.__version__", "2.3.0")
    @patch(
        "binup.cli.doctor.detect_platform",
        return_value=PlatformTarget(os="linux", arch="arm64"),
    )
    def test_names_release_asset(self, _mock_platform: MagicMock) -> None:
        from binup.cli.doctor import _release_target_check

        label, value, status = _release_target_check()
        assert label == "Release asset"
        assert value == "binup_2.3.0_linux_arm64.tar.gz"
        assert "OK" in status

    @patch(
        "binup.cli.doctor.detect_platform",
        return_value=PlatformTarget(os="plan9", arch="mips"),
    )
    def test_unknown_platform_warns(self, _mock_platform: MagicMock) -> None:
        from binup.cli.doctor import _release_target_check

        _label, value, status = _release_target_check()
        assert "<version>" in value
        assert "WARN" in status


class TestSelfUpdateCheck:
    def test_skip_setting_warns(self) -> None:
        from binup.cli.doctor import _self_update_check

        _label, value, status = _self_update_check(UpgradeSettings(skip_upgrade=True))
        assert "BINUP_SKIP_UPGRADE" in value
        assert "WARN" in status

    @patch("binup.cli.doctor.__version__", "2.3.0")
    def test_enabled(self) -> None:
        from binup.cli.doctor import _self_update_check

        _label, value, status = _self_update_check(UpgradeSettings())
        assert value == "enabled"
        assert "OK" in status


class TestExecutableCheck:
    def test_writable_directory_ok(self, tmp_path: Path) -> None:
        from binup.cli.doctor import _executable_check

        exe = tmp_path / "binup"
        with patch("binup.cli.doctor.current_executable", return_value=exe):
            label, value, status = _executable_check()
        assert label == "Executable"
        assert value == str(exe)
        assert "OK" in status

    def test_read_only_directory_warns(self, tmp_path: Path) -> None:
        from binup.cli.doctor import _executable_check

        exe = tmp_path / "binup"
        with patch("binup.cli.doctor.current_executable", return_value=exe), patch(
            "binup.cli.doctor.os.access", return_value=False
        ):
            _label, _value, status = _executable_check()
        assert "WARN" in status

    def test_source_launch_warns(self) -> None:
        from binup.cli.doctor import _executable_check
        from binup.exceptions import EnvironmentError

        with patch(
            "binup.cli.doctor.current_executable",
            side_effect=EnvironmentError("__main__.py is a Python source file"),
        ):
            _label, value, status = _executable_check()
        assert value == "Python source launch"
        assert "WARN" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_warnings_still_succeed(self) -> None:
        """A development build is a WARN, not a FAIL."""
        from binup.cli.doctor import run_doctor

        assert run_doctor(UpgradeSettings()) == exit_codes.SUCCESS

    @patch("binup.cli.doctor._httpx_version_check")
    def test_failure_returns_general_error(self, mock_check: MagicMock) -> None:
        from binup.cli.doctor import run_doctor

        mock_check.return_value = ("httpx", "NOT INSTALLED", "[red]FAIL[/red]")
        assert run_doctor(UpgradeSettings()) == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(self, capsys: pytest.CaptureFixture[str]) -> None:
        from binup.cli.doctor import run_doctor

        code = run_doctor(UpgradeSettings())
        err = capsys.readouterr().err
        assert code == exit_codes.SUCCESS
        assert "binup doctor" in err
        assert "Release asset" in err
        assert "[green]" not in err

    @patch("binup.cli.doctor.rich_available", return_value=False)
    def test_plain_table_when_rich_unavailable(
        self, _mock_rich: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        from binup.cli.doctor import run_doctor

        run_doctor(UpgradeSettings())
        assert "Component" in capsys.readouterr().err
        _mock_rich.assert_called_once()


class TestRichAvailable:
    def test_true_when_installed(self) -> None:
        from binup.cli.console import rich_available

        assert rich_available() is True

    @patch.dict("sys.modules", {"rich": None, "rich.console": None})
    def test_false_when_missing(self) -> None:
        from binup.cli.console import rich_available

        assert rich_available() is False


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("binup.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from binup.cli.app import main

        assert main(["doctor"]) == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("binup.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from binup.cli.app import main

        assert main(["doctor"]) == exit_codes.GENERAL_ERROR
