"""Tests for the runtime-loaded library check."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

from nativedeps.validation.dlopen import LDCONFIG_PATH, check_dlopen_libraries

LDCONFIG_OUTPUT = """\
1234 libs found in cache `/etc/ld.so.cache'
\tlibavcodec.so.58 (libc6,x86-64) => /lib/x86_64-linux-gnu/libavcodec.so.58
\tlibNSS3.so (libc6,x86-64) => /lib/x86_64-linux-gnu/libnss3.so
"""


def _completed(stdout: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([LDCONFIG_PATH, "-p"], returncode, stdout=stdout, stderr="")


class TestCheckDlopenLibraries:
    def test_empty_input_skips_query(self) -> None:
        with patch("nativedeps.validation.dlopen.run_tool") as mock_run:
            result = check_dlopen_libraries([])
        mock_run.assert_not_called()
        assert result.missing == frozenset()
        assert result.present == frozenset()

    def test_queries_cache_once(self) -> None:
        with patch(
            "nativedeps.validation.dlopen.run_tool",
            return_value=_completed(LDCONFIG_OUTPUT),
        ) as mock_run:
            check_dlopen_libraries(["libx264.so", "libavcodec.so"])
        mock_run.assert_called_once_with([LDCONFIG_PATH, "-p"])

    def test_absent_library_missing(self) -> None:
        with patch("nativedeps.validation.dlopen.run_tool", return_value=_completed(LDCONFIG_OUTPUT)):
            result = check_dlopen_libraries(["libx264.so", "libavcodec.so"])
        assert result.missing == frozenset({"libx264.so"})
        assert result.present == frozenset({"libavcodec.so"})

    def test_match_is_case_insensitive(self) -> None:
        with patch("nativedeps.validation.dlopen.run_tool", return_value=_completed(LDCONFIG_OUTPUT)):
            result = check_dlopen_libraries(["libnss3.so"])
        assert result.present == frozenset({"libnss3.so"})

    def test_non_zero_exit_fails_open(self) -> None:
        with patch("nativedeps.validation.dlopen.run_tool", return_value=_completed("", returncode=1)):
            result = check_dlopen_libraries(["libx264.so"])
        assert result.missing == frozenset()
        assert result.present == frozenset()

    def test_spawn_failure_fails_open(self) -> None:
        with patch(
            "nativedeps.validation.dlopen.run_tool",
            side_effect=subprocess.SubprocessError("no ldconfig"),
        ):
            assert check_dlopen_libraries(["libx264.so"]).missing == frozenset()

    def test_timeout_fails_open(self) -> None:
        with patch(
            "nativedeps.validation.dlopen.run_tool",
            side_effect=subprocess.TimeoutExpired("ldconfig", 60),
        ):
            assert check_dlopen_libraries(["libx264.so"]).missing == frozenset()
