"""Exit-status classification shared by the blocking and asyncio clients."""

from __future__ import annotations

import logging

from ytdl_runner.core.protocols import ProcessResult
from ytdl_runner.exceptions import NonZeroExitError, append_ytdlp_upgrade_suggestion

logger = logging.getLogger(__name__)


def decode_stderr(stderr: bytes) -> str:
    """Decode diagnostic output, replacing invalid byte sequences."""
    return stderr.decode("utf-8", errors="replace").strip()


def exit_error(result: ProcessResult) -> NonZeroExitError:
    """Build the :class:`NonZeroExitError` describing *result*."""
    stderr = decode_stderr(result.stderr)
    # A negative return code means the child died from a signal.
    code = result.returncode if result.returncode > 0 else 1
    return NonZeroExitError(
        code,
        stderr,
        hint=append_ytdlp_upgrade_suggestion(
            "Check the URL and the tool's error output above.",
        ),
    )


def interpret(result: ProcessResult, *, ignore_errors: bool) -> bytes:
    """Return the stdout to deserialize, or raise for a failed run.

    With *ignore_errors*, a non-zero exit still yields stdout as long
    as the tool printed something; an empty stdout has nothing to
    deserialize, so the exit error is raised instead.

    Raises
    ------
    NonZeroExitError
        When the process failed and its output cannot be used.
    """
    if result.success:
        return result.stdout

    logger.debug("yt-dlp exited with status %d", result.returncode)
    if ignore_errors and result.stdout.strip():
        logger.debug("ignoring non-zero exit; decoding %d bytes", len(result.stdout))
        return result.stdout
    raise exit_error(result)
