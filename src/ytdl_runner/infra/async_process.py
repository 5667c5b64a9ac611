"""asyncio implementation of :class:`~ytdl_runner.core.protocols.AsyncProcessRunner`.

Both pipes are drained by their own tasks while the exit wait is
bounded by :func:`asyncio.wait_for`.  When the timeout wins the race,
the child is killed and reaped, the drains are cancelled, and
:class:`~ytdl_runner.exceptions.ProcessTimeoutError` is raised.  After
a normal exit the drains get the same grace period as the reader
threads of :class:`~ytdl_runner.infra.process.SubprocessRunner`, so
both runners report identical outcomes.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Sequence

from ytdl_runner.core.protocols import ProcessResult
from ytdl_runner.exceptions import IOFailureError, ProcessSpawnError, ProcessTimeoutError
from ytdl_runner.infra.process import READER_JOIN_TIMEOUT, popen_kwargs

logger = logging.getLogger(__name__)


class AsyncSubprocessRunner:
    """Concrete :class:`AsyncProcessRunner` backed by asyncio subprocesses."""

    async def run(
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
            When draining a stream fails, or a stream stays open after
            the process exited.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **popen_kwargs(),
            )
        except OSError as exc:
            raise ProcessSpawnError(
                f"io error: cannot start {executable!r}: {exc}",
                hint="Install yt-dlp or pass the executable path explicitly.",
            ) from exc

        logger.debug("spawned %s (pid %d)", executable, process.pid)
        assert process.stdout is not None and process.stderr is not None
        drains = {
            "stdout": asyncio.ensure_future(process.stdout.read()),
            "stderr": asyncio.ensure_future(process.stderr.read()),
        }

        try:
            try:
                returncode = await asyncio.wait_for(process.wait(), timeout)
            except asyncio.TimeoutError:
                logger.debug("timeout after %ss; killing pid %d", timeout, process.pid)
                await _kill(process)
                raise ProcessTimeoutError(timeout or 0.0) from None
            except BaseException:
                # Cancellation of the calling task: never leave the child behind.
                await asyncio.shield(_kill(process))
                raise

            await asyncio.wait(drains.values(), timeout=READER_JOIN_TIMEOUT)
            output: dict[str, bytes] = {}
            for name, drain in drains.items():
                if not drain.done():
                    raise IOFailureError(
                        f"io error: {name} stayed open after the process exited",
                    )
                try:
                    output[name] = drain.result()
                except OSError as exc:
                    raise IOFailureError(
                        f"io error: reading {name} failed: {exc}",
                    ) from exc
        finally:
            await _cancel(*drains.values())

        logger.debug("pid %d exited with status %d", process.pid, returncode)
        return ProcessResult(
            stdout=output["stdout"],
            stderr=output["stderr"],
            returncode=returncode,
        )


async def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill *process* and reap it so no zombie is left behind."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


async def _cancel(*drains: asyncio.Future[bytes]) -> None:
    """Cancel unfinished drains and wait for all of them to settle."""
    for drain in drains:
        drain.cancel()
    await asyncio.gather(*drains, return_exceptions=True)
