"""Invocation configuration and argument-vector rendering.

An :class:`Invocation` is an immutable record of everything needed to
run the external tool once.  Each ``with_*`` method returns a modified
copy, so a single value can be shared freely between threads and
tasks.  Rendering to an argument vector is a pure function of the
record and an :class:`ExtractionMode`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "yt-dlp"
"""Executable name used when neither the invocation nor the
environment names one."""


# ---------------------------------------------------------------------------
# Search queries
# ---------------------------------------------------------------------------

class SearchType(enum.Enum):
    """Search providers understood by yt-dlp, keyed by query prefix."""

    YOUTUBE = "ytsearch"
    YAHOO = "yvsearch"
    GOOGLE = "gvsearch"
    SOUNDCLOUD = "scsearch"


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Where to search, how many results to fetch, and the query.

    ``provider`` is either a :class:`SearchType` or a raw prefix string,
    for providers this library does not know about yet.
    """

    provider: SearchType | str
    query: str
    count: int = 1

    @classmethod
    def youtube(cls, query: str) -> SearchOptions:
        return cls(SearchType.YOUTUBE, query)

    @classmethod
    def google(cls, query: str) -> SearchOptions:
        return cls(SearchType.GOOGLE, query)

    @classmethod
    def yahoo(cls, query: str) -> SearchOptions:
        return cls(SearchType.YAHOO, query)

    @classmethod
    def soundcloud(cls, query: str) -> SearchOptions:
        return cls(SearchType.SOUNDCLOUD, query)

    @classmethod
    def custom(cls, prefix: str, query: str) -> SearchOptions:
        return cls(prefix, query)

    def with_count(self, count: int) -> SearchOptions:
        """Set how many results to retrieve at most."""
        return replace(self, count=count)

    @property
    def prefix(self) -> str:
        if isinstance(self.provider, SearchType):
            return self.provider.value
        return self.provider

    def __str__(self) -> str:
        return f"{self.prefix}{self.count}:{self.query}"


# ---------------------------------------------------------------------------
# Extraction mode
# ---------------------------------------------------------------------------

class ExtractionMode(enum.Enum):
    """Which kind of output the tool is asked to produce."""

    SINGLE_JSON = "single-json"
    """One JSON document for the whole URL (``-J``)."""

    JSON_LINES = "json-lines"
    """One JSON document per resolved item (``-j``)."""

    DOWNLOAD = "download"
    """Download media to a folder; stdout is not parsed."""


# ---------------------------------------------------------------------------
# Invocation record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Invocation:
    """Immutable settings for one run of the external tool.

    Usage::

        invocation = (
            Invocation("https://www.youtube.com/watch?v=VFbhKZFzbzk")
            .with_socket_timeout("15")
            .with_process_timeout(30)
        )
    """

    url: str
    executable: str | None = None
    format: str | None = None
    flat_playlist: bool = False
    socket_timeout: str | None = None
    all_formats: bool = False
    auth: tuple[str, str] | None = None
    cookies: str | None = None
    user_agent: str | None = None
    referer: str | None = None
    process_timeout: float | None = None
    date: str | None = None
    date_before: str | None = None
    date_after: str | None = None
    playlist_reverse: bool = False
    extract_audio: bool = False
    playlist_items: str | None = None
    output_template: str | None = None
    output_directory: str | None = None
    extra_args: tuple[str, ...] = field(default=())
    ignore_errors: bool = False

    @classmethod
    def search_for(cls, options: SearchOptions) -> Invocation:
        """Create an invocation that runs the search described by *options*."""
        return cls(str(options))

    # ------------------------------------------------------------------
    # with-option transformations
    # ------------------------------------------------------------------

    def with_executable(self, path: str) -> Invocation:
        """Set the path to the ``yt-dlp`` or ``youtube-dl`` executable."""
        return replace(self, executable=str(path))

    def with_format(self, selector: str) -> Invocation:
        """Set the ``-f`` format selector."""
        return replace(self, format=selector)

    def with_flat_playlist(self, enabled: bool = True) -> Invocation:
        return replace(self, flat_playlist=enabled)

    def with_socket_timeout(self, timeout: str) -> Invocation:
        return replace(self, socket_timeout=str(timeout))

    def with_all_formats(self, enabled: bool = True) -> Invocation:
        return replace(self, all_formats=enabled)

    def with_auth(self, username: str, password: str) -> Invocation:
        return replace(self, auth=(username, password))

    def with_cookies(self, cookie_path: str) -> Invocation:
        """Use a Netscape-format cookie file."""
        return replace(self, cookies=str(cookie_path))

    def with_user_agent(self, user_agent: str) -> Invocation:
        return replace(self, user_agent=user_agent)

    def with_referer(self, referer: str) -> Invocation:
        return replace(self, referer=referer)

    def with_process_timeout(self, seconds: float) -> Invocation:
        """Bound the wall-clock run time of the whole process."""
        return replace(self, process_timeout=float(seconds))

    def with_date(self, date: str) -> Invocation:
        return replace(self, date=date)

    def with_date_before(self, date: str) -> Invocation:
        return replace(self, date_before=date)

    def with_date_after(self, date: str) -> Invocation:
        return replace(self, date_after=date)

    def with_playlist_reverse(self, enabled: bool = True) -> Invocation:
        return replace(self, playlist_reverse=enabled)

    def with_extract_audio(self, enabled: bool = True) -> Invocation:
        return replace(self, extract_audio=enabled)

    def with_playlist_items(self, items: int | str) -> Invocation:
        """Set ``--playlist-items`` (an index or a range spec like ``1-3,7``)."""
        return replace(self, playlist_items=str(items))

    def with_output_template(self, template: str) -> Invocation:
        return replace(self, output_template=template)

    def with_output_directory(self, directory: str) -> Invocation:
        return replace(self, output_directory=str(directory))

    def with_extra_arg(self, arg: str) -> Invocation:
        """Append a raw argument not covered by the other settings."""
        return replace(self, extra_args=(*self.extra_args, arg))

    def with_ignore_errors(self, enabled: bool = True) -> Invocation:
        return replace(self, ignore_errors=enabled)

    # ------------------------------------------------------------------
    # Rendering (pure)
    # ------------------------------------------------------------------

    def common_args(self) -> list[str]:
        """Render the settings shared by every extraction mode."""
        args: list[str] = []
        if self.format is not None:
            args += ["-f", self.format]
        if self.flat_playlist:
            args.append("--flat-playlist")
        if self.socket_timeout is not None:
            args += ["--socket-timeout", self.socket_timeout]
        if self.all_formats:
            args.append("--all-formats")
        if self.auth is not None:
            username, password = self.auth
            args += ["-u", username, "-p", password]
        if self.cookies is not None:
            args += ["--cookies", self.cookies]
        if self.user_agent is not None:
            args += ["--user-agent", self.user_agent]
        if self.referer is not None:
            args += ["--referer", self.referer]
        if self.playlist_reverse:
            args.append("--playlist-reverse")
        if self.extract_audio:
            args.append("--extract-audio")
        if self.playlist_items is not None:
            args += ["--playlist-items", self.playlist_items]
        if self.output_template is not None:
            args += ["-o", self.output_template]
        if self.date is not None:
            args += ["--date", self.date]
        if self.date_after is not None:
            args += ["--dateafter", self.date_after]
        if self.date_before is not None:
            args += ["--datebefore", self.date_before]
        if self.ignore_errors:
            args.append("--ignore-errors")
        args.extend(self.extra_args)
        return args

    def args_for(
        self,
        mode: ExtractionMode,
        *,
        folder: str | None = None,
    ) -> list[str]:
        """Render the full argument vector for *mode*.

        ``folder`` is required for :attr:`ExtractionMode.DOWNLOAD` and
        takes precedence over :attr:`output_directory`.
        """
        args = self.common_args()
        if mode is ExtractionMode.DOWNLOAD:
            if folder is None:
                raise ValueError("download mode requires a destination folder")
            args += ["-P", folder, "--no-simulate", "--no-progress"]
        else:
            if self.output_directory is not None:
                args += ["-P", self.output_directory]
            args.append("-J" if mode is ExtractionMode.SINGLE_JSON else "-j")
        args.append(self.url)
        logger.debug("yt-dlp arguments: %s", _redact(args))
        return args


def _redact(args: list[str]) -> list[str]:
    """Mask the password following ``-p`` for logging."""
    redacted = list(args)
    for index, arg in enumerate(redacted[:-1]):
        if arg == "-p":
            redacted[index + 1] = "***"
    return redacted
