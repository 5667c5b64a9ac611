"""Domain models for ytdl-runner.

All models are **frozen** dataclasses — immutable value objects built
in one step from a single JSON document and never mutated afterwards.
They carry zero I/O and zero dependencies on external packages.

The field sets mirror the yt-dlp ``--dump-single-json`` schema.  Every
field except :attr:`MediaItem.id` and :attr:`MediaItem.title` is
optional, because extractors populate the schema very unevenly.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, TypeAlias

JsonValue: TypeAlias = "None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]"
"""A loosely-typed JSON value, passed through exactly as parsed."""


# ---------------------------------------------------------------------------
# Delivery protocol
# ---------------------------------------------------------------------------

class Protocol(enum.Enum):
    """Transport/delivery scheme reported for an item or format.

    Extractors introduce new protocol tags over time, so lookup never
    fails: any unrecognized value resolves to :attr:`UNKNOWN`.
    """

    HTTP = "http"
    HTTPS = "https"
    RTSP = "rtsp"
    RTMP = "rtmp"
    RTMPE = "rtmpe"
    MMS = "mms"
    F4M = "f4m"
    ISM = "ism"
    M3U8 = "m3u8"
    M3U8_NATIVE = "m3u8_native"
    HTTP_DASH_SEGMENTS = "http_dash_segments"
    MHTML = "mhtml"
    HTTPS_HTTPS = "https+https"
    HTTP_DASH_SEGMENTS_HTTPS = "http_dash_segments+https"
    HTTP_DASH_SEGMENTS_HTTP_DASH_SEGMENTS = "http_dash_segments+http_dash_segments"
    M3U8_NATIVE_M3U8_NATIVE = "m3u8_native+m3u8_native"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> Protocol:
        return cls.UNKNOWN

    @classmethod
    def parse(cls, value: object) -> Protocol:
        """Resolve *value* to a member, falling back to :attr:`UNKNOWN`."""
        if not isinstance(value, str):
            return cls.UNKNOWN
        return cls(value)


# ---------------------------------------------------------------------------
# Auxiliary records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Fragment:
    """One segment of a segmented-delivery format."""

    url: str | None = None
    path: str | None = None
    filesize: int | None = None
    duration: JsonValue = None


@dataclass(frozen=True, slots=True)
class Thumbnail:
    id: str | None = None
    url: str | None = None
    width: float | None = None
    height: float | None = None
    filesize: int | None = None
    preference: int | None = None


@dataclass(frozen=True, slots=True)
class Subtitle:
    url: str | None = None
    ext: str | None = None
    name: str | None = None
    data: str | None = None


@dataclass(frozen=True, slots=True)
class Chapter:
    title: str | None = None
    start_time: float | None = None
    end_time: float | None = None


@dataclass(frozen=True, slots=True)
class Comment:
    id: str | None = None
    parent: str | None = None
    author: str | None = None
    author_id: str | None = None
    text: str | None = None
    html: str | None = None
    timestamp: float | None = None


# ---------------------------------------------------------------------------
# Individual format descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Format:
    """One concrete download alternative for a media item.

    ``acodec``/``vcodec`` are ``None`` when the stream carries no
    audio/video track; the tool's ``"none"`` sentinel never survives
    deserialization.
    """

    format_id: str | None = None
    format: str | None = None
    format_note: str | None = None
    url: str | None = None
    manifest_url: str | None = None
    fragment_base_url: str | None = None
    player_url: str | None = None
    ext: str | None = None
    container: str | None = None
    acodec: str | None = None
    vcodec: str | None = None
    abr: float | None = None
    vbr: float | None = None
    tbr: float | None = None
    asr: float | None = None
    width: float | None = None
    height: float | None = None
    resolution: str | None = None
    fps: float | None = None
    stretched_ratio: float | None = None
    filesize: float | None = None
    filesize_approx: float | None = None
    quality: float | None = None
    preference: JsonValue = None
    source_preference: int | None = None
    language: str | None = None
    language_preference: int | None = None
    no_resume: bool | None = None
    protocol: Protocol | None = None
    fragments: tuple[Fragment, ...] | None = None
    http_headers: dict[str, str | None] | None = None
    downloader_options: dict[str, JsonValue] | None = None


# ---------------------------------------------------------------------------
# Media item
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MediaItem:
    """One resolvable audio/video resource.

    ``id`` and ``title`` are required; everything else defaults to
    ``None`` when the extractor did not report it.
    """

    id: str
    title: str

    # Identity / description
    display_id: str | None = None
    alt_title: str | None = None
    description: str | None = None
    categories: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None
    license: str | None = None
    location: str | None = None
    genre: str | None = None
    creator: str | None = None
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    album_type: str | None = None
    track: str | None = None
    track_id: str | None = None
    track_number: JsonValue = None
    disc_number: int | None = None
    release_year: int | None = None
    series: str | None = None
    season: str | None = None
    season_id: str | None = None
    season_number: int | None = None
    episode: str | None = None
    episode_id: str | None = None
    episode_number: int | None = None
    chapter: str | None = None
    chapter_id: str | None = None
    chapter_number: JsonValue = None

    # Uploader / channel
    uploader: str | None = None
    uploader_id: str | None = None
    uploader_url: str | None = None
    channel: str | None = None
    channel_id: str | None = None
    channel_url: str | None = None

    # Playlist context
    playlist: str | None = None
    playlist_id: str | None = None
    playlist_index: JsonValue = None
    playlist_title: str | None = None
    playlist_uploader: str | None = None
    playlist_uploader_id: str | None = None

    # Timing
    duration: JsonValue = None
    duration_string: str | None = None
    timestamp: float | None = None
    upload_date: str | None = None
    release_date: str | None = None
    start_time: JsonValue = None
    end_time: JsonValue = None
    epoch: int | None = None

    # Engagement
    view_count: int | None = None
    like_count: int | None = None
    dislike_count: int | None = None
    repost_count: int | None = None
    comment_count: int | None = None
    average_rating: JsonValue = None
    age_limit: int | None = None
    is_live: bool | None = None

    # Selected / default format
    url: str | None = None
    ext: str | None = None
    format: str | None = None
    format_id: str | None = None
    format_note: str | None = None
    width: float | None = None
    height: float | None = None
    resolution: str | None = None
    fps: float | None = None
    tbr: float | None = None
    abr: float | None = None
    vbr: float | None = None
    asr: float | None = None
    acodec: str | None = None
    vcodec: str | None = None
    container: str | None = None
    filesize: int | None = None
    filesize_approx: float | None = None
    protocol: Protocol | None = None
    quality: float | None = None
    preference: JsonValue = None
    source_preference: int | None = None
    language: str | None = None
    language_preference: int | None = None
    stretched_ratio: float | None = None
    manifest_url: str | None = None
    fragment_base_url: str | None = None
    player_url: str | None = None
    no_resume: bool | None = None
    http_headers: dict[str, str | None] | None = None
    downloader_options: dict[str, JsonValue] | None = None
    fragments: tuple[Fragment, ...] | None = None

    # Nested collections
    formats: tuple[Format, ...] | None = None
    thumbnail: str | None = None
    thumbnails: tuple[Thumbnail, ...] | None = None
    subtitles: dict[str, tuple[Subtitle, ...]] | None = None
    automatic_captions: dict[str, tuple[Subtitle, ...]] | None = None
    requested_subtitles: dict[str, Subtitle] | None = None
    chapters: tuple[Chapter, ...] | None = None
    comments: tuple[Comment, ...] | None = None

    # Extractor
    extractor: str | None = None
    extractor_key: str | None = None
    webpage_url: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        """``duration`` as a float when it is numeric or a numeric string."""
        value: Any = self.duration
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return None
        return None


# ---------------------------------------------------------------------------
# Playlist
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Playlist:
    """A named, ordered group of media items (playlist or search results)."""

    id: str | None = None
    title: str | None = None
    uploader: str | None = None
    uploader_id: str | None = None
    uploader_url: str | None = None
    webpage_url: str | None = None
    webpage_url_basename: str | None = None
    extractor: str | None = None
    extractor_key: str | None = None
    entries: tuple[MediaItem, ...] | None = None
    thumbnails: tuple[Thumbnail, ...] | None = None

    def __len__(self) -> int:
        return len(self.entries) if self.entries else 0


# ---------------------------------------------------------------------------
# Top-level result (discriminated union)
# ---------------------------------------------------------------------------

class Result:
    """Output of one invocation: either a single item or a collection.

    The projections are total — they return ``None`` for the other
    variant, so callers can branch without checking the type first.
    """

    __slots__ = ()

    @property
    def is_playlist(self) -> bool:
        return False

    def into_single_item(self) -> MediaItem | None:
        return None

    def into_playlist(self) -> Playlist | None:
        return None


@dataclass(frozen=True, slots=True)
class SingleItemResult(Result):
    item: MediaItem

    def into_single_item(self) -> MediaItem | None:
        return self.item


@dataclass(frozen=True, slots=True)
class CollectionResult(Result):
    playlist: Playlist

    @property
    def is_playlist(self) -> bool:
        return True

    def into_playlist(self) -> Playlist | None:
        return self.playlist
