"""Rich rendering of typed results for the CLI.

Pure presentation: functions take domain models and return Rich
renderables.  No I/O happens here — callers decide where to print.
"""

from __future__ import annotations

from rich.table import Table

from ytdl_runner.core.models import Format, MediaItem, Playlist, Result


def _dash(value: object) -> str:
    return "-" if value is None else str(value)


def _format_duration(item: MediaItem) -> str:
    seconds = item.duration_seconds
    if seconds is None:
        return item.duration_string or "-"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _resolution(fmt: Format) -> str:
    if fmt.resolution:
        return fmt.resolution
    if fmt.width and fmt.height:
        return f"{int(fmt.width)}x{int(fmt.height)}"
    return "audio only" if fmt.vcodec is None else "-"


def item_table(item: MediaItem) -> Table:
    """Key/value summary of a single media item."""
    table = Table(title=item.title, show_header=False, border_style="dim")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    rows = (
        ("id", item.id),
        ("uploader", item.uploader or item.channel),
        ("duration", _format_duration(item)),
        ("views", item.view_count),
        ("upload date", item.upload_date),
        ("extractor", item.extractor_key or item.extractor),
        ("protocol", item.protocol.value if item.protocol else None),
        ("formats", len(item.formats) if item.formats is not None else None),
        ("url", item.webpage_url),
    )
    for label, value in rows:
        table.add_row(label, _dash(value))
    return table


def formats_table(formats: tuple[Format, ...]) -> Table:
    """One row per download alternative, in the tool's order."""
    table = Table(title="Formats", header_style="bold cyan", border_style="dim")
    for column in ("id", "ext", "resolution", "vcodec", "acodec", "protocol"):
        table.add_column(column)
    for fmt in formats:
        table.add_row(
            _dash(fmt.format_id),
            _dash(fmt.ext),
            _resolution(fmt),
            _dash(fmt.vcodec),
            _dash(fmt.acodec),
            fmt.protocol.value if fmt.protocol else "-",
        )
    return table


def playlist_table(playlist: Playlist) -> Table:
    """One row per entry, in source order."""
    table = Table(
        title=playlist.title or playlist.id or "Playlist",
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("#", justify="right")
    table.add_column("id")
    table.add_column("title")
    table.add_column("duration", justify="right")
    for index, entry in enumerate(playlist.entries or (), start=1):
        table.add_row(str(index), entry.id, entry.title, _format_duration(entry))
    return table


def result_tables(result: Result, *, show_formats: bool = False) -> list[Table]:
    """Render whichever variant *result* holds."""
    playlist = result.into_playlist()
    if playlist is not None:
        return [playlist_table(playlist)]

    item = result.into_single_item()
    assert item is not None
    tables = [item_table(item)]
    if show_formats and item.formats:
        tables.append(formats_table(item.formats))
    return tables
