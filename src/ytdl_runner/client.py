"""Facade clients — run an :class:`Invocation` and return typed results.

:class:`YoutubeDl` blocks the calling thread; :class:`AsyncYoutubeDl`
is its asyncio twin.  Both follow the same pipeline:

1. Render the argument vector for the requested extraction mode.
2. Hand it to the injected process runner (a
   :class:`~ytdl_runner.core.protocols.ProcessRunner` or
   :class:`~ytdl_runner.core.protocols.AsyncProcessRunner`).
3. Classify the exit status (:func:`~ytdl_runner.core.outcome.interpret`).
4. Deserialize stdout (:mod:`ytdl_runner.core.parsing`).

Usage::

    from ytdl_runner import Invocation, YoutubeDl

    result = YoutubeDl().run(
        Invocation("https://www.youtube.com/watch?v=VFbhKZFzbzk")
        .with_socket_timeout("15")
    )
    item = result.into_single_item()

Only :class:`~ytdl_runner.exceptions.YtdlRunnerError` subclasses
escape.  Nothing is retried.
"""

from __future__ import annotations

import os

from ytdl_runner.core.invocation import ExtractionMode, Invocation
from ytdl_runner.core.models import JsonValue, Result
from ytdl_runner.core.outcome import exit_error, interpret
from ytdl_runner.core.parsing import parse_json_lines, parse_json_value, parse_output
from ytdl_runner.core.protocols import AsyncProcessRunner, ProcessResult, ProcessRunner
from ytdl_runner.infra.async_process import AsyncSubprocessRunner
from ytdl_runner.infra.executable_detector import resolve_executable
from ytdl_runner.infra.process import SubprocessRunner


class YoutubeDl:
    """Blocking facade over the yt-dlp executable.

    Parameters
    ----------
    runner:
        Any object satisfying :class:`ProcessRunner`.  Defaults to
        :class:`~ytdl_runner.infra.process.SubprocessRunner`.
    """

    def __init__(self, runner: ProcessRunner | None = None) -> None:
        self._runner: ProcessRunner = runner or SubprocessRunner()

    def run(self, invocation: Invocation) -> Result:
        """Run in single-JSON mode and return a typed :class:`Result`."""
        return parse_output(self._stdout(invocation, ExtractionMode.SINGLE_JSON))

    def run_raw(self, invocation: Invocation) -> JsonValue:
        """Run in single-JSON mode and return the untyped JSON value.

        A fallback for output the typed models cannot represent.
        """
        return parse_json_value(self._stdout(invocation, ExtractionMode.SINGLE_JSON))

    def run_lines(self, invocation: Invocation) -> list[Result]:
        """Run in dump mode: one typed :class:`Result` per output line."""
        return parse_json_lines(self._stdout(invocation, ExtractionMode.JSON_LINES))

    def download_to(self, invocation: Invocation, folder: str | os.PathLike[str]) -> None:
        """Download the media to *folder*."""
        args = invocation.args_for(ExtractionMode.DOWNLOAD, folder=os.fspath(folder))
        _check_download(self._execute(invocation, args), invocation)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stdout(self, invocation: Invocation, mode: ExtractionMode) -> bytes:
        result = self._execute(invocation, invocation.args_for(mode))
        return interpret(result, ignore_errors=invocation.ignore_errors)

    def _execute(self, invocation: Invocation, args: list[str]) -> ProcessResult:
        return self._runner.run(
            resolve_executable(invocation.executable),
            args,
            timeout=invocation.process_timeout,
        )


class AsyncYoutubeDl:
    """asyncio facade over the yt-dlp executable.

    Outcomes and exceptions are identical to :class:`YoutubeDl`.
    """

    def __init__(self, runner: AsyncProcessRunner | None = None) -> None:
        self._runner: AsyncProcessRunner = runner or AsyncSubprocessRunner()

    async def run(self, invocation: Invocation) -> Result:
        return parse_output(await self._stdout(invocation, ExtractionMode.SINGLE_JSON))

    async def run_raw(self, invocation: Invocation) -> JsonValue:
        return parse_json_value(
            await self._stdout(invocation, ExtractionMode.SINGLE_JSON),
        )

    async def run_lines(self, invocation: Invocation) -> list[Result]:
        return parse_json_lines(
            await self._stdout(invocation, ExtractionMode.JSON_LINES),
        )

    async def download_to(
        self,
        invocation: Invocation,
        folder: str | os.PathLike[str],
    ) -> None:
        args = invocation.args_for(ExtractionMode.DOWNLOAD, folder=os.fspath(folder))
        _check_download(await self._execute(invocation, args), invocation)

    async def _stdout(self, invocation: Invocation, mode: ExtractionMode) -> bytes:
        result = await self._execute(invocation, invocation.args_for(mode))
        return interpret(result, ignore_errors=invocation.ignore_errors)

    async def _execute(self, invocation: Invocation, args: list[str]) -> ProcessResult:
        return await self._runner.run(
            resolve_executable(invocation.executable),
            args,
            timeout=invocation.process_timeout,
        )


def _check_download(result: ProcessResult, invocation: Invocation) -> None:
    """Downloads produce no output to decode; only the exit status matters."""
    if not result.success and not invocation.ignore_errors:
        raise exit_error(result)
