"""ytdl-runner — run yt-dlp and decode its JSON output into typed models.

The external tool does all extraction; this package builds the command
line, runs the process without deadlocking on large output, enforces
timeouts, and maps the heterogeneous JSON onto frozen dataclasses.
"""

from ytdl_runner.client import AsyncYoutubeDl, YoutubeDl
from ytdl_runner.core.invocation import ExtractionMode, Invocation, SearchOptions, SearchType
from ytdl_runner.core.models import (
    Chapter,
    CollectionResult,
    Comment,
    Format,
    Fragment,
    MediaItem,
    Playlist,
    Protocol,
    Result,
    SingleItemResult,
    Subtitle,
    Thumbnail,
)
from ytdl_runner.core.parsing import parse_json_lines, parse_output
from ytdl_runner.exceptions import YtdlRunnerError
from ytdl_runner.infra.release_fetcher import download_latest
from ytdl_runner.version import __version__

__all__: list[str] = [
    "AsyncYoutubeDl",
    "Chapter",
    "CollectionResult",
    "Comment",
    "ExtractionMode",
    "Format",
    "Fragment",
    "Invocation",
    "MediaItem",
    "Playlist",
    "Protocol",
    "Result",
    "SearchOptions",
    "SearchType",
    "SingleItemResult",
    "Subtitle",
    "Thumbnail",
    "YoutubeDl",
    "YtdlRunnerError",
    "__version__",
    "download_latest",
    "parse_json_lines",
    "parse_output",
]
