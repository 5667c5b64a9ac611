"""Core layer — pure data models, decoding and invocation rendering.

Rules
-----
* No ``print()`` calls.
* No process, filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
"""

from ytdl_runner.core.invocation import ExtractionMode, Invocation, SearchOptions, SearchType
from ytdl_runner.core.models import MediaItem, Playlist, Protocol, Result
from ytdl_runner.core.protocols import AsyncProcessRunner, ProcessResult, ProcessRunner

__all__: list[str] = [
    "AsyncProcessRunner",
    "ExtractionMode",
    "Invocation",
    "MediaItem",
    "Playlist",
    "ProcessResult",
    "ProcessRunner",
    "Protocol",
    "Result",
    "SearchOptions",
    "SearchType",
]
