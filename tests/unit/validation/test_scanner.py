"""Tests for binary candidate discovery."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from nativedeps.core.errors import CandidateScanError
from nativedeps.validation.scanner import (
    executables_or_shared_libraries,
    is_executable,
    is_shared_library,
)


def _make_file(path: Path, mode: int = 0o644) -> Path:
    path.write_bytes(b"\x7fELF")
    path.chmod(mode)
    return path


class TestIsSharedLibrary:
    @pytest.mark.parametrize("name", ["libfoo.so", "libfoo.so.1", "libfoo.so.1.2.3", "LIBFOO.SO"])
    def test_linux_names(self, name: str) -> None:
        assert is_shared_library(name, "linux")

    @pytest.mark.parametrize("name", ["libfoo.a", "foo.sonic", "readme.txt", "foo.dll"])
    def test_linux_non_libraries(self, name: str) -> None:
        assert not is_shared_library(name, "linux")

    def test_windows_dll_case_insensitive(self) -> None:
        assert is_shared_library("KERNEL32.DLL", "windows")
        assert not is_shared_library("libfoo.so", "windows")

    def test_other_os(self) -> None:
        assert not is_shared_library("libfoo.dylib", "darwin")
        assert not is_shared_library("libfoo.so", "darwin")


class TestIsExecutable:
    @pytest.mark.parametrize("bits", [stat.S_IXUSR, stat.S_IXGRP, stat.S_IXOTH])
    def test_any_execute_bit(self, bits: int) -> None:
        assert is_executable(stat.S_IFREG | 0o600 | bits)

    def test_no_execute_bits(self) -> None:
        assert not is_executable(stat.S_IFREG | 0o644)


class TestExecutablesOrSharedLibraries:
    """Tests for directory scanning."""

    def test_executable_library_and_text_file(self, tmp_path: Path) -> None:
        _make_file(tmp_path / "app", 0o755)
        _make_file(tmp_path / "lib.so.1")
        _make_file(tmp_path / "readme.txt")

        candidates = executables_or_shared_libraries(tmp_path, "linux")

        assert candidates == [tmp_path.resolve() / "app", tmp_path.resolve() / "lib.so.1"]

    def test_paths_are_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _make_file(tmp_path / "app", 0o755)
        monkeypatch.chdir(tmp_path.parent)

        candidates = executables_or_shared_libraries(tmp_path.name, "linux")

        assert all(path.is_absolute() for path in candidates)

    def test_subdirectories_skipped(self, tmp_path: Path) -> None:
        sub = tmp_path / "nested.so"
        sub.mkdir()
        sub.chmod(0o755)
        _make_file(sub / "inner.so")

        assert executables_or_shared_libraries(tmp_path, "linux") == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_to_library_is_followed(self, tmp_path: Path) -> None:
        _make_file(tmp_path / "libreal.so.1")
        (tmp_path / "libalias.so").symlink_to(tmp_path / "libreal.so.1")

        names = [p.name for p in executables_or_shared_libraries(tmp_path, "linux")]

        assert names == ["libalias.so", "libreal.so.1"]

    def test_windows_uses_dll_suffix(self, tmp_path: Path) -> None:
        _make_file(tmp_path / "chrome.DLL")
        _make_file(tmp_path / "libfoo.so")

        names = [p.name for p in executables_or_shared_libraries(tmp_path, "windows")]

        assert names == ["chrome.DLL"]

    def test_missing_directory_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(CandidateScanError, match="Cannot list directory"):
            executables_or_shared_libraries(tmp_path / "absent", "linux")

    def test_stat_failure_is_fatal(self, tmp_path: Path) -> None:
        _make_file(tmp_path / "app", 0o755)
        with patch("nativedeps.validation.scanner.os.stat", side_effect=PermissionError("denied")):
            with pytest.raises(CandidateScanError, match="Cannot stat"):
                executables_or_shared_libraries(tmp_path, "linux")

    def test_dangling_symlink_is_fatal(self, tmp_path: Path) -> None:
        (tmp_path / "broken.so").symlink_to(tmp_path / "gone.so")
        with pytest.raises(CandidateScanError):
            executables_or_shared_libraries(tmp_path, "linux")
