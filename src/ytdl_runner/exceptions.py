"""Custom exception hierarchy for ytdl-runner.

All exceptions that cross layer boundaries must inherit from
:class:`YtdlRunnerError`.  Raw OS, ``json`` and ``requests`` exceptions
must NEVER propagate beyond the infrastructure layer — they are caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
YtdlRunnerError
├── IOFailureError
│   └── ProcessSpawnError
├── MalformedOutputError
│   ├── JsonParseError
│   └── SchemaError
├── NonZeroExitError
├── ProcessTimeoutError
├── TransportError
└── NoReleaseFoundError
"""

from __future__ import annotations


class YtdlRunnerError(Exception):
    """Base exception for all ytdl-runner errors.

    Every failure surfaced to a caller maps to a subclass of this
    exception so that callers (and the CLI error boundary) can handle
    the whole family with a single ``except`` clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Process / filesystem I/O ----------------------------------------------

class IOFailureError(YtdlRunnerError):
    """Raised on process stream or filesystem failures."""


class ProcessSpawnError(IOFailureError):
    """Raised when the external executable cannot be started."""


# --- Output decoding ---------------------------------------------------------

class MalformedOutputError(YtdlRunnerError):
    """Raised when the tool's output cannot be turned into a result."""


class JsonParseError(MalformedOutputError):
    """Raised when stdout is not syntactically valid JSON."""


class SchemaError(MalformedOutputError):
    """Raised when valid JSON lacks a required field (``id``/``title``)."""


# --- Process outcome ---------------------------------------------------------

class NonZeroExitError(YtdlRunnerError):
    """Raised when the external tool exits with a non-zero status."""

    def __init__(
        self,
        code: int,
        stderr: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"non-zero exit code: {code}, stderr: {stderr}",
            hint=hint,
        )
        self.code: int = code
        self.stderr: str = stderr


class ProcessTimeoutError(YtdlRunnerError):
    """Raised when the process-level timeout elapses before exit."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"process timed out after {timeout:g}s",
            hint="Increase the process timeout or check your network.",
        )
        self.timeout: float = timeout


# --- Release fetching --------------------------------------------------------

class TransportError(YtdlRunnerError):
    """Raised when the releases API or asset download fails over HTTP."""


class NoReleaseFoundError(YtdlRunnerError):
    """Raised when the latest release has no asset for this platform."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
