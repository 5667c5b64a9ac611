"""Tests for the asyncio process runner (infra/async_process.py).

Mirrors ``test_process.py``: both runners must produce identical
outcomes for the same child behaviour.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest

from ytdl_runner.core.protocols import ProcessResult
from ytdl_runner.exceptions import IOFailureError, ProcessSpawnError, ProcessTimeoutError
from ytdl_runner.infra.async_process import AsyncSubprocessRunner


def _run(executable: str, *lines: str, timeout: float | None = None) -> ProcessResult:
    return asyncio.run(
        AsyncSubprocessRunner().run(executable, ["-c", "\n".join(lines)], timeout=timeout),
    )


class TestAsyncSubprocessRunner:
    def test_captures_stdout_and_exit_code(self, python_exe: str) -> None:
        result = _run(python_exe, "print('hello')")
        assert result.returncode == 0
        assert result.stdout.strip() == b"hello"

    def test_non_zero_exit_keeps_stderr(self, python_exe: str) -> None:
        result = _run(
            python_exe,
            "import sys",
            "sys.stderr.write('ERROR: video unavailable')",
            "sys.exit(3)",
        )
        assert result.returncode == 3
        assert result.stderr == b"ERROR: video unavailable"

    def test_large_output_on_both_streams(self, python_exe: str) -> None:
        result = _run(
            python_exe,
            "import sys",
            "sys.stderr.buffer.write(b'e' * 1_000_000)",
            "sys.stderr.flush()",
            "sys.stdout.buffer.write(b'x' * 5_000_000)",
            timeout=60,
        )
        assert len(result.stdout) == 5_000_000
        assert len(result.stderr) == 1_000_000

    def test_missing_executable(self, tmp_path: Path) -> None:
        with pytest.raises(ProcessSpawnError):
            asyncio.run(AsyncSubprocessRunner().run(str(tmp_path / "missing"), []))

    def test_timeout_raises(self, python_exe: str) -> None:
        with pytest.raises(ProcessTimeoutError) as exc_info:
            _run(python_exe, "import time", "time.sleep(30)", timeout=0.5)
        assert exc_info.value.timeout == 0.5

    @pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX signal 0 probing")
    def test_timeout_kills_and_reaps_child(self, python_exe: str, tmp_path: Path) -> None:
        pid_file = tmp_path / "pid"
        with pytest.raises(ProcessTimeoutError):
            _run(
                python_exe,
                "import os, time",
                f"open({str(pid_file)!r}, 'w').write(str(os.getpid()))",
                "time.sleep(30)",
                timeout=2,
            )
        pid = int(pid_file.read_text())
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    def test_concurrent_runs(self, python_exe: str) -> None:
        runner = AsyncSubprocessRunner()

        async def _many() -> list[ProcessResult]:
            return await asyncio.gather(
                *(runner.run(python_exe, ["-c", f"print({index})"]) for index in range(4)),
            )

        results = asyncio.run(_many())
        assert [r.stdout.strip() for r in results] == [b"0", b"1", b"2", b"3"]

    @pytest.mark.skipif(sys.platform == "win32", reason="relies on POSIX pipe inheritance")
    @pytest.mark.skipif(
        sys.version_info < (3, 12),
        reason="Process.wait() only returns once the pipes close before Python 3.12",
    )
    def test_stream_held_open_by_grandchild(
        self, python_exe: str, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("ytdl_runner.infra.async_process.READER_JOIN_TIMEOUT", 0.5)
        with pytest.raises(IOFailureError, match="stdout stayed open after the process exited"):
            _run(
                python_exe,
                "import subprocess, sys",
                "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(5)'])",
                "print('{}')",
            )
