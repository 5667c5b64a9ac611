"""Blocking implementation of :class:`~ytdl_runner.core.protocols.ProcessRunner`.

Each stream gets a dedicated reader thread, so stdout (which can be
many megabytes for large playlists) is drained while the main thread
waits for the child to exit.  The optional timeout races that wait;
on expiry the child is killed and reaped before the error is raised.

All :class:`OSError` variants are caught here and re-raised as typed
:class:`~ytdl_runner.exceptions.YtdlRunnerError` subclasses.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from collections.abc import Sequence
from typing import IO, Any

from ytdl_runner.core.protocols import ProcessResult
from ytdl_runner.exceptions import IOFailureError, ProcessSpawnError, ProcessTimeoutError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

# Grace period for reader threads once the child has been reaped.  A
# grandchild holding the pipe open must not stall the caller forever.
READER_JOIN_TIMEOUT = 5.0


def popen_kwargs() -> dict[str, Any]:
    """Platform-specific keyword arguments for spawning the tool."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}


class _StreamReader(threading.Thread):
    """Drain one pipe into memory until EOF."""

    def __init__(self, stream: IO[bytes], name: str) -> None:
        super().__init__(name=f"ytdl-runner-{name}", daemon=True)
        self.label = name
        self._stream = stream
        self._chunks: list[bytes] = []
        self.error: OSError | None = None

    def run(self) -> None:
        try:
            while chunk := self._stream.read(_CHUNK_SIZE):
                self._chunks.append(chunk)
        except OSError as exc:
            self.error = exc
        finally:
            self._stream.close()

    @property
    def data(self) -> bytes:
        return b"".join(self._chunks)


class SubprocessRunner:
    """Concrete :class:`ProcessRunner` backed by :mod:`subprocess`.

    Stateless: every call owns its own child process and buffers, so
    one instance can serve concurrent callers.
    """

    def run(
        self,
        executable: str,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run *executable* and capture its output.

        Raises
        ------
        ProcessSpawnError
            When the executable is missing or not runnable.
        ProcessTimeoutError
            When *timeout* elapses before the process exits.
        IOFailureError
            When draining a stream fails.
        """
        try:
            process = subprocess.Popen(
                [executable, *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **popen_kwargs(),
            )
        except OSError as exc:
            raise ProcessSpawnError(
                f"io error: cannot start {executable!r}: {exc}",
                hint="Install yt-dlp or pass the executable path explicitly.",
            ) from exc

        logger.debug("spawned %s (pid %d)", executable, process.pid)
        assert process.stdout is not None and process.stderr is not None
        stdout_reader = _StreamReader(process.stdout, "stdout")
        stderr_reader = _StreamReader(process.stderr, "stderr")
        stdout_reader.start()
        stderr_reader.start()

        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            logger.debug("timeout after %ss; killing pid %d", timeout, process.pid)
            _kill(process)
            _join(stdout_reader, stderr_reader)
            raise ProcessTimeoutError(exc.timeout) from None
        except BaseException:
            # KeyboardInterrupt and friends: never leave the child behind.
            _kill(process)
            raise

        _join(stdout_reader, stderr_reader)
        for reader in (stdout_reader, stderr_reader):
            if reader.error is not None:
                raise IOFailureError(
                    f"io error: reading {reader.label} failed: {reader.error}",
                ) from reader.error
            if reader.is_alive():
                raise IOFailureError(
                    f"io error: {reader.label} stayed open after the process exited",
                )

        logger.debug("pid %d exited with status %d", process.pid, returncode)
        return ProcessResult(
            stdout=stdout_reader.data,
            stderr=stderr_reader.data,
            returncode=returncode,
        )


def _kill(process: subprocess.Popen[bytes]) -> None:
    """Kill *process* and reap it so no zombie is left behind."""
    try:
        process.kill()
    except ProcessLookupError:
        pass
    process.wait()


def _join(*readers: _StreamReader) -> None:
    for reader in readers:
        reader.join(READER_JOIN_TIMEOUT)
