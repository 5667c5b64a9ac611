"""Discriminating deserializer — raw tool output to typed results.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Decoding is always two passes:

1. **Generic** — the bytes are parsed into plain JSON values.
2. **Typed** — the ``_type`` field is inspected and the same value is
   mapped onto :class:`Playlist` (``_type == "playlist"``) or
   :class:`MediaItem` (anything else, including a missing tag).

The typed pass tolerates missing, ``null`` and wrongly-typed fields by
defaulting them to ``None``.  Only the required ``id``/``title`` of a
media item are enforced, raising :class:`SchemaError`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ytdl_runner.core.models import (
    Chapter,
    CollectionResult,
    Comment,
    Format,
    Fragment,
    JsonValue,
    MediaItem,
    Playlist,
    Protocol,
    Result,
    SingleItemResult,
    Subtitle,
    Thumbnail,
)
from ytdl_runner.exceptions import (
    JsonParseError,
    SchemaError,
    append_ytdlp_upgrade_suggestion,
)

_T = TypeVar("_T")

PLAYLIST_TYPE = "playlist"
"""Value of the ``_type`` discriminant that marks a collection."""


# ---------------------------------------------------------------------------
# Pass 1 — generic JSON
# ---------------------------------------------------------------------------

def parse_json_value(data: bytes | str) -> JsonValue:
    """Parse *data* into a generic JSON value.

    Raises
    ------
    JsonParseError
        When *data* is not a single well-formed JSON document.
    """
    try:
        return json.loads(data)
    except UnicodeDecodeError as exc:
        raise JsonParseError(f"output is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise JsonParseError(
            f"json error: {exc}",
            hint="The tool may have printed diagnostics to stdout.",
        ) from exc


# ---------------------------------------------------------------------------
# Pass 2 — typed
# ---------------------------------------------------------------------------

def parse_output(data: bytes | str) -> Result:
    """Decode one JSON document into a :class:`Result` variant.

    Raises
    ------
    JsonParseError
        On malformed JSON syntax.
    SchemaError
        When the document is not an object, or a media item lacks
        ``id`` or ``title``.
    """
    return parse_value(parse_json_value(data))


def parse_value(value: JsonValue) -> Result:
    """Branch on the ``_type`` discriminant of an already-parsed value."""
    raw = _require_object(value, "top-level output")
    if raw.get("_type") == PLAYLIST_TYPE:
        return CollectionResult(playlist=parse_playlist(raw))
    return SingleItemResult(item=parse_item(raw))


def parse_json_lines(data: bytes | str) -> list[Result]:
    """Decode dump-mode output: one JSON document per non-blank line.

    Lines are split on ``\\n`` and each is decoded strictly, so invalid
    UTF-8 raises :class:`JsonParseError` exactly as in :func:`parse_output`.
    """
    lines = data.split(b"\n") if isinstance(data, bytes) else data.split("\n")
    return [parse_output(line) for line in lines if line.strip()]


def parse_playlist(value: JsonValue) -> Playlist:
    """Map a generic value onto :class:`Playlist`.

    ``null`` entries are skipped; any other entry must satisfy the
    media item schema.  Source order is preserved.
    """
    raw = _require_object(value, "playlist")
    entries: tuple[MediaItem, ...] | None = None
    raw_entries = raw.get("entries")
    if isinstance(raw_entries, list):
        entries = tuple(
            parse_item(entry) for entry in raw_entries if entry is not None
        )

    return Playlist(
        entries=entries,
        thumbnails=_records(raw.get("thumbnails"), _parse_thumbnail),
        **_scalars(
            raw,
            strings=(
                "id",
                "title",
                "uploader",
                "uploader_id",
                "uploader_url",
                "webpage_url",
                "webpage_url_basename",
                "extractor",
                "extractor_key",
            ),
        ),
    )


_ITEM_STRINGS: tuple[str, ...] = (
    "display_id", "alt_title", "description", "license", "location",
    "genre", "creator", "artist", "album", "album_artist", "album_type",
    "track", "track_id", "series", "season", "season_id",
    "episode", "episode_id", "chapter", "chapter_id",
    "uploader", "uploader_id", "uploader_url", "channel", "channel_id",
    "channel_url", "playlist", "playlist_id", "playlist_title",
    "playlist_uploader", "playlist_uploader_id", "duration_string",
    "upload_date", "release_date", "url", "ext",
    "format", "format_id", "format_note", "resolution", "container",
    "language", "manifest_url", "fragment_base_url", "player_url",
    "thumbnail", "extractor", "extractor_key", "webpage_url",
)
_ITEM_FLOATS: tuple[str, ...] = (
    "timestamp", "width", "height", "fps", "tbr", "abr", "vbr", "asr",
    "filesize_approx", "quality", "stretched_ratio",
)
_ITEM_INTS: tuple[str, ...] = (
    "disc_number", "release_year", "season_number", "episode_number",
    "epoch", "view_count", "like_count", "dislike_count", "repost_count",
    "comment_count", "age_limit", "filesize", "source_preference",
    "language_preference",
)
_ITEM_BOOLS: tuple[str, ...] = ("is_live", "no_resume")
_ITEM_VALUES: tuple[str, ...] = (
    "playlist_index", "duration", "average_rating", "preference",
    "track_number", "chapter_number", "start_time", "end_time",
)


def parse_item(value: JsonValue) -> MediaItem:
    """Map a generic value onto :class:`MediaItem`.

    Raises
    ------
    SchemaError
        When ``id`` or ``title`` is missing or not a string.
    """
    raw = _require_object(value, "media item")
    item_id = _required_string(raw, "id")
    title = _required_string(raw, "title")

    return MediaItem(
        id=item_id,
        title=title,
        categories=_string_tuple(raw.get("categories")),
        tags=_string_tuple(raw.get("tags")),
        acodec=_codec(raw.get("acodec")),
        vcodec=_codec(raw.get("vcodec")),
        protocol=_protocol(raw.get("protocol")),
        http_headers=_headers(raw.get("http_headers")),
        downloader_options=_object(raw.get("downloader_options")),
        fragments=_records(raw.get("fragments"), _parse_fragment),
        formats=_records(raw.get("formats"), _parse_format),
        thumbnails=_records(raw.get("thumbnails"), _parse_thumbnail),
        subtitles=_subtitle_tracks(raw.get("subtitles")),
        automatic_captions=_subtitle_tracks(raw.get("automatic_captions")),
        requested_subtitles=_requested_subtitles(raw.get("requested_subtitles")),
        chapters=_records(raw.get("chapters"), _parse_chapter),
        comments=_records(raw.get("comments"), _parse_comment),
        **_scalars(
            raw,
            strings=_ITEM_STRINGS,
            floats=_ITEM_FLOATS,
            ints=_ITEM_INTS,
            bools=_ITEM_BOOLS,
            values=_ITEM_VALUES,
        ),
    )


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------

def _parse_format(raw: Mapping[str, Any]) -> Format:
    """Convert one raw format dict to a :class:`Format`."""
    return Format(
        acodec=_codec(raw.get("acodec")),
        vcodec=_codec(raw.get("vcodec")),
        protocol=_protocol(raw.get("protocol")),
        fragments=_records(raw.get("fragments"), _parse_fragment),
        http_headers=_headers(raw.get("http_headers")),
        downloader_options=_object(raw.get("downloader_options")),
        **_scalars(
            raw,
            strings=(
                "format_id", "format", "format_note", "url", "manifest_url",
                "fragment_base_url", "player_url", "ext", "container",
                "resolution", "language",
            ),
            floats=(
                "abr", "vbr", "tbr", "asr", "width", "height", "fps",
                "stretched_ratio", "filesize", "filesize_approx", "quality",
            ),
            ints=("source_preference", "language_preference"),
            bools=("no_resume",),
            values=("preference",),
        ),
    )


def _parse_fragment(raw: Mapping[str, Any]) -> Fragment:
    return Fragment(
        **_scalars(
            raw,
            strings=("url", "path"),
            ints=("filesize",),
            values=("duration",),
        ),
    )


def _parse_thumbnail(raw: Mapping[str, Any]) -> Thumbnail:
    return Thumbnail(
        **_scalars(
            raw,
            strings=("id", "url"),
            floats=("width", "height"),
            ints=("filesize", "preference"),
        ),
    )


def _parse_subtitle(raw: Mapping[str, Any]) -> Subtitle:
    return Subtitle(**_scalars(raw, strings=("url", "ext", "name", "data")))


def _parse_chapter(raw: Mapping[str, Any]) -> Chapter:
    return Chapter(
        **_scalars(raw, strings=("title",), floats=("start_time", "end_time")),
    )


def _parse_comment(raw: Mapping[str, Any]) -> Comment:
    return Comment(
        **_scalars(
            raw,
            strings=("id", "parent", "author", "author_id", "text", "html"),
            floats=("timestamp",),
        ),
    )


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------

def _require_object(value: JsonValue, what: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(
            f"expected a JSON object for {what}, got {type(value).__name__}",
        )
    return value


def _required_string(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        problem = "missing" if value is None else f"not a string ({type(value).__name__})"
        raise SchemaError(
            f"media item field '{key}' is {problem}",
            hint=append_ytdlp_upgrade_suggestion(
                "The extractor output does not match the expected schema.",
            ),
        )
    return value


def _scalars(
    raw: Mapping[str, Any],
    *,
    strings: tuple[str, ...] = (),
    floats: tuple[str, ...] = (),
    ints: tuple[str, ...] = (),
    bools: tuple[str, ...] = (),
    values: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Collect scalar fields by kind; wrong-typed values become ``None``."""
    fields: dict[str, Any] = {}
    for key in strings:
        fields[key] = _string(raw.get(key))
    for key in floats:
        fields[key] = _float(raw.get(key))
    for key in ints:
        fields[key] = _int(raw.get(key))
    for key in bools:
        value = raw.get(key)
        fields[key] = value if isinstance(value, bool) else None
    for key in values:
        fields[key] = raw.get(key)
    return fields


def _string(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _float(value: object) -> float | None:
    # bool is an int subclass; never accept it as a number.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _codec(value: object) -> str | None:
    """Codec string, with the tool's ``"none"`` sentinel mapped to ``None``."""
    codec = _string(value)
    if codec == "none":
        return None
    return codec


def _protocol(value: object) -> Protocol | None:
    if value is None:
        return None
    return Protocol.parse(value)


def _string_tuple(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(entry for entry in value if isinstance(entry, str))


def _object(value: object) -> dict[str, JsonValue] | None:
    return dict(value) if isinstance(value, dict) else None


def _headers(value: object) -> dict[str, str | None] | None:
    if not isinstance(value, dict):
        return None
    return {
        str(name): header if isinstance(header, str) else None
        for name, header in value.items()
    }


def _records(
    value: object,
    parse: Callable[[Mapping[str, Any]], _T],
) -> tuple[_T, ...] | None:
    """Parse a list of objects, skipping entries that are not objects."""
    if not isinstance(value, list):
        return None
    return tuple(parse(entry) for entry in value if isinstance(entry, dict))


def _subtitle_tracks(value: object) -> dict[str, tuple[Subtitle, ...]] | None:
    if not isinstance(value, dict):
        return None
    tracks: dict[str, tuple[Subtitle, ...]] = {}
    for language, entries in value.items():
        parsed = _records(entries, _parse_subtitle)
        if parsed is not None:
            tracks[str(language)] = parsed
    return tracks


def _requested_subtitles(value: object) -> dict[str, Subtitle] | None:
    if not isinstance(value, dict):
        return None
    return {
        str(language): _parse_subtitle(entry)
        for language, entry in value.items()
        if isinstance(entry, dict)
    }
