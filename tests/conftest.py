"""Shared pytest fixtures and configuration for the ytdl-runner test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp itself is never spawned: process tests drive a stand-in
  child through ``sys.executable -c <script>``.
* Core tests must be pure — no side effects.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import pytest

from ytdl_runner.core.protocols import ProcessResult


def sample_item(**overrides: Any) -> dict[str, Any]:
    """Minimal valid single-item document, shaped like yt-dlp output."""
    item: dict[str, Any] = {
        "id": "dQw4w9WgXcQ",
        "title": "Sample Video",
        "duration": 212,
        "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "extractor": "youtube",
        "extractor_key": "Youtube",
        "formats": [
            {
                "format_id": "140",
                "ext": "m4a",
                "acodec": "mp4a.40.2",
                "vcodec": "none",
                "protocol": "https",
                "abr": 129.5,
            },
            {
                "format_id": "137",
                "ext": "mp4",
                "acodec": "none",
                "vcodec": "avc1.640028",
                "protocol": "https",
                "width": 1920,
                "height": 1080,
                "fps": 30,
            },
        ],
    }
    item.update(overrides)
    return item


def sample_playlist(entries: list[Any] | None = None, **overrides: Any) -> dict[str, Any]:
    playlist: dict[str, Any] = {
        "_type": "playlist",
        "id": "PL123",
        "title": "Sample Playlist",
        "uploader": "Someone",
        "extractor": "youtube:tab",
        "entries": entries if entries is not None else [
            sample_item(id="a", title="First"),
            sample_item(id="b", title="Second"),
            sample_item(id="c", title="Third"),
        ],
    }
    playlist.update(overrides)
    return playlist


def encode(document: Any) -> bytes:
    return json.dumps(document).encode("utf-8")


def completed(
    stdout: bytes = b"",
    stderr: bytes = b"",
    returncode: int = 0,
) -> ProcessResult:
    return ProcessResult(stdout=stdout, stderr=stderr, returncode=returncode)


@pytest.fixture
def python_exe() -> str:
    """Interpreter used as a stand-in for the external tool."""
    return sys.executable
