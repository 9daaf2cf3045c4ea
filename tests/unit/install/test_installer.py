"""Tests for the package manager installer."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from nativedeps.bootstrap.elevation import ElevatedCommand
from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.bootstrap.platform import PlatformInfo
from nativedeps.catalog.loader import NativeDepsCatalog, load_catalog
from nativedeps.core.errors import InstallationError
from nativedeps.core.models import DependencyGroup, InstallationRequest
from nativedeps.install.installer import (
    install_dependencies,
    install_dependencies_linux,
    install_dependencies_windows,
)

CATALOG = NativeDepsCatalog.from_dict({
    "ubuntu22.04": {
        "tools": ["xvfb", "fonts-liberation"],
        "chromium": ["fonts-liberation", "libnss3"],
        "firefox": ["libgtk-3-0", "libnss3"],
    },
})

SUDO = ElevatedCommand(command="sudo", args=["--", "sh", "-c", "SCRIPT"], elevated=True)


class TestInstallDependenciesLinux:
    """Tests for the apt-get installer."""

    def test_dry_run_prints_command(self, capsys: pytest.CaptureFixture) -> None:
        with patch("nativedeps.install.installer.run_inherited") as mock_run, \
             patch("nativedeps.bootstrap.elevation.is_root_user", return_value=False), \
             patch("shutil.which", return_value="/usr/bin/sudo"):
            install_dependencies_linux(
                [DependencyGroup.CHROMIUM], dry_run=True, catalog=CATALOG, host_platform="ubuntu22.04"
            )

        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert out == (
            'sudo -- sh -c "apt-get update&& apt-get install -y --no-install-recommends '
            'fonts-liberation libnss3"\n'
        )

    def test_packages_deduplicated_in_group_order(self) -> None:
        # Groups follow a fixed order regardless of request order
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=SUDO) as mock_tr, \
             patch("nativedeps.install.installer.run_inherited", return_value=0):
            install_dependencies_linux(
                [DependencyGroup.FIREFOX, DependencyGroup.TOOLS, DependencyGroup.CHROMIUM],
                catalog=CATALOG,
                host_platform="ubuntu22.04",
            )

        commands = mock_tr.call_args.args[0]
        assert commands == [
            "apt-get update",
            "apt-get install -y --no-install-recommends "
            "fonts-liberation libnss3 libgtk-3-0 xvfb",
        ]

    @pytest.mark.parametrize("host_platform", ["ubuntu24.04", "debian12", "ubuntu20.04-arm64"])
    def test_bundled_catalog_covers_newer_hosts(
        self, host_platform: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=SUDO) as mock_tr:
            install_dependencies_linux(
                [DependencyGroup.CHROMIUM], dry_run=True, catalog=load_catalog(), host_platform=host_platform
            )

        assert "Cannot install dependencies" not in caplog.text
        install_command = mock_tr.call_args.args[0][1]
        assert install_command.startswith("apt-get install -y --no-install-recommends ")
        assert "libnss3" in install_command.split()

    def test_runs_elevated_with_messages(self, capsys: pytest.CaptureFixture) -> None:
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=SUDO), \
             patch("nativedeps.install.installer.run_inherited", return_value=0) as mock_run:
            install_dependencies_linux([DependencyGroup.TOOLS], catalog=CATALOG, host_platform="ubuntu22.04")

        mock_run.assert_called_once_with(["sudo", "--", "sh", "-c", "SCRIPT"], cwd=None)
        out = capsys.readouterr().out
        assert "Installing Ubuntu dependencies..." in out
        assert "Switching to root user to install dependencies..." in out

    def test_root_does_not_switch_user(self, capsys: pytest.CaptureFixture) -> None:
        root = ElevatedCommand(command="sh", args=["-c", "SCRIPT"], elevated=False)
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=root), \
             patch("nativedeps.install.installer.run_inherited", return_value=0):
            install_dependencies_linux([DependencyGroup.TOOLS], catalog=CATALOG, host_platform="ubuntu22.04")

        assert "Switching to root user" not in capsys.readouterr().out

    def test_non_zero_exit_raises(self) -> None:
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=SUDO), \
             patch("nativedeps.install.installer.run_inherited", return_value=100):
            with pytest.raises(InstallationError) as exc_info:
                install_dependencies_linux(
                    [DependencyGroup.TOOLS], catalog=CATALOG, host_platform="ubuntu22.04"
                )
        assert exc_info.value.returncode == 100

    def test_spawn_failure_raises(self) -> None:
        with patch("nativedeps.install.installer.transform_commands_for_root", return_value=SUDO), \
             patch(
                "nativedeps.install.installer.run_inherited",
                side_effect=subprocess.SubprocessError("no sudo"),
             ):
            with pytest.raises(InstallationError, match="no sudo"):
                install_dependencies_linux(
                    [DependencyGroup.TOOLS], catalog=CATALOG, host_platform="ubuntu22.04"
                )

    def test_unknown_distribution_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch("nativedeps.install.installer.run_inherited") as mock_run:
            install_dependencies_linux(
                [DependencyGroup.TOOLS], catalog=CATALOG, host_platform="generic-linux"
            )

        mock_run.assert_not_called()
        assert "Cannot install dependencies for this linux distribution!" in caplog.text


class TestInstallDependenciesWindows:
    """Tests for the media pack installer."""

    def _paths(self, tmp_path: Path) -> NativeDepsPaths:
        return NativeDepsPaths(tmp_path / "home", tmp_path / "bin")

    def test_only_chromium_needs_install(self, tmp_path: Path) -> None:
        with patch("nativedeps.install.installer.run_inherited") as mock_run:
            install_dependencies_windows(
                [DependencyGroup.FIREFOX, DependencyGroup.TOOLS], paths=self._paths(tmp_path)
            )
        mock_run.assert_not_called()

    def test_runs_media_pack_script(self, tmp_path: Path) -> None:
        paths = self._paths(tmp_path)
        with patch("nativedeps.install.installer.run_inherited", return_value=0) as mock_run:
            install_dependencies_windows([DependencyGroup.CHROMIUM], paths=paths)

        mock_run.assert_called_once_with(
            [
                "powershell.exe",
                "-ExecutionPolicy",
                "Bypass",
                "-File",
                str(paths.media_pack_script),
            ],
            cwd=paths.bin_dir,
        )

    def test_dry_run_prints_command(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        paths = NativeDepsPaths(tmp_path, Path("C:/Program Files/nativedeps/bin"))
        with patch("nativedeps.install.installer.run_inherited") as mock_run:
            install_dependencies_windows([DependencyGroup.CHROMIUM], dry_run=True, paths=paths)

        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert out.startswith("powershell.exe -ExecutionPolicy Bypass -File \"")
        assert "install_media_pack.ps1\"" in out

    def test_failure_raises(self, tmp_path: Path) -> None:
        with patch("nativedeps.install.installer.run_inherited", return_value=1):
            with pytest.raises(InstallationError, match="Failed to install windows dependencies!"):
                install_dependencies_windows([DependencyGroup.CHROMIUM], paths=self._paths(tmp_path))


class TestInstallDependencies:
    def test_dispatches_to_linux(self) -> None:
        request = InstallationRequest(groups=frozenset({DependencyGroup.TOOLS}), dry_run=True)
        with patch("nativedeps.install.installer.install_dependencies_linux") as mock_linux:
            install_dependencies(
                request,
                platform_info=PlatformInfo("linux", "amd64"),
                catalog=CATALOG,
                host_platform="ubuntu22.04",
            )
        mock_linux.assert_called_once_with(
            request.groups, True, catalog=CATALOG, host_platform="ubuntu22.04"
        )

    def test_dispatches_to_windows(self, tmp_path: Path) -> None:
        request = InstallationRequest(groups=frozenset({DependencyGroup.CHROMIUM}))
        paths = NativeDepsPaths(tmp_path, tmp_path)
        with patch("nativedeps.install.installer.install_dependencies_windows") as mock_windows:
            install_dependencies(request, platform_info=PlatformInfo("windows", "amd64"), paths=paths)
        mock_windows.assert_called_once_with(request.groups, False, paths=paths)

    def test_other_os_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        request = InstallationRequest(groups=frozenset({DependencyGroup.CHROMIUM}))
        install_dependencies(request, platform_info=PlatformInfo("darwin", "arm64"))
        assert "not supported on darwin" in caplog.text
