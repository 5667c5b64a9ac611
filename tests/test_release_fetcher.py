"""Tests for the GitHub release fetcher (infra/release_fetcher.py).

A mocked ``requests.Session`` stands in for the network.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from ytdl_runner.exceptions import IOFailureError, NoReleaseFoundError, TransportError
from ytdl_runner.infra.release_fetcher import (
    ReleaseAsset,
    download_asset,
    download_latest,
    expected_asset_name,
    find_latest_asset,
)

_ASSET_URL = "https://github.com/yt-dlp/yt-dlp/releases/download/2024.08.06/yt-dlp"


def _release(*names: str) -> dict[str, Any]:
    return {
        "tag_name": "2024.08.06",
        "assets": [
            {
                "name": name,
                "browser_download_url": f"https://github.com/yt-dlp/yt-dlp/releases/download/2024.08.06/{name}",
            }
            for name in names
        ],
    }


def _api_response(body: Any) -> MagicMock:
    response = MagicMock()
    response.json.return_value = body
    return response


def _download_response(*chunks: bytes) -> MagicMock:
    response = MagicMock()
    response.iter_content.return_value = list(chunks)
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def _make_session(*responses: MagicMock) -> MagicMock:
    session = MagicMock()
    session.get.side_effect = list(responses)
    return session


# ---------------------------------------------------------------------------
# Asset naming
# ---------------------------------------------------------------------------

class TestExpectedAssetName:
    @pytest.mark.parametrize(
        ("system", "expected"),
        [
            ("Windows", "yt-dlp.exe"),
            ("Darwin", "yt-dlp_macos"),
            ("Linux", "yt-dlp"),
            ("FreeBSD", "yt-dlp"),
        ],
    )
    def test_per_platform(self, system: str, expected: str) -> None:
        assert expected_asset_name(system) == expected


# ---------------------------------------------------------------------------
# Release lookup
# ---------------------------------------------------------------------------

class TestFindLatestAsset:
    def test_matches_asset_by_name(self) -> None:
        session = _make_session(
            _api_response(_release("yt-dlp.exe", "yt-dlp_macos", "yt-dlp")),
        )
        asset = find_latest_asset(asset_name="yt-dlp", session=session)
        assert asset == ReleaseAsset("yt-dlp", _ASSET_URL, "2024.08.06")
        url = session.get.call_args.args[0]
        assert url == "https://api.github.com/repos/yt-dlp/yt-dlp/releases/latest"

    def test_custom_repo_and_api_base(self) -> None:
        session = _make_session(_api_response(_release("youtube-dl")))
        find_latest_asset(
            "ytdl-org",
            "youtube-dl",
            asset_name="youtube-dl",
            session=session,
            api_base="https://ghe.example.com/api/v3/",
        )
        assert session.get.call_args.args[0] == (
            "https://ghe.example.com/api/v3/repos/ytdl-org/youtube-dl/releases/latest"
        )

    def test_no_matching_asset(self) -> None:
        session = _make_session(_api_response(_release("yt-dlp.exe")))
        with pytest.raises(NoReleaseFoundError, match="yt-dlp_macos"):
            find_latest_asset(asset_name="yt-dlp_macos", session=session)

    def test_non_list_assets(self) -> None:
        session = _make_session(_api_response({"tag_name": "x", "assets": 5}))
        with pytest.raises(TransportError, match="not a list"):
            find_latest_asset(asset_name="yt-dlp", session=session)

    def test_release_without_assets(self) -> None:
        session = _make_session(_api_response({"tag_name": "x"}))
        with pytest.raises(NoReleaseFoundError):
            find_latest_asset(asset_name="yt-dlp", session=session)

    def test_http_error(self) -> None:
        response = _api_response({})
        response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        with pytest.raises(TransportError, match="404"):
            find_latest_asset(asset_name="yt-dlp", session=_make_session(response))

    def test_connection_error(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("no route")
        with pytest.raises(TransportError):
            find_latest_asset(asset_name="yt-dlp", session=session)

    def test_invalid_json(self) -> None:
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")
        with pytest.raises(TransportError):
            find_latest_asset(asset_name="yt-dlp", session=_make_session(response))

    def test_non_object_body(self) -> None:
        session = _make_session(_api_response(["not", "a", "release"]))
        with pytest.raises(TransportError):
            find_latest_asset(asset_name="yt-dlp", session=session)


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------

class TestDownloadAsset:
    _ASSET = ReleaseAsset("yt-dlp", _ASSET_URL, "2024.08.06")

    def test_writes_into_directory(self, tmp_path: Path) -> None:
        session = _make_session(_download_response(b"#!/bin/sh\n", b"echo hi\n"))
        path = download_asset(self._ASSET, tmp_path, session=session)
        assert path == tmp_path / "yt-dlp"
        assert path.read_bytes() == b"#!/bin/sh\necho hi\n"
        assert session.get.call_args.args[0] == _ASSET_URL
        assert session.get.call_args.kwargs["stream"] is True

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "bin" / "yt"
        session = _make_session(_download_response(b"data"))
        path = download_asset(self._ASSET, target, session=session)
        assert path == target
        assert target.read_bytes() == b"data"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_marks_executable(self, tmp_path: Path) -> None:
        session = _make_session(_download_response(b"data"))
        path = download_asset(self._ASSET, tmp_path, session=session)
        assert path.stat().st_mode & stat.S_IXUSR

    def test_http_error(self, tmp_path: Path) -> None:
        response = _download_response()
        response.raise_for_status.side_effect = requests.HTTPError("500")
        with pytest.raises(TransportError):
            download_asset(self._ASSET, tmp_path, session=_make_session(response))

    def test_write_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        session = _make_session(_download_response(b"data"))
        with pytest.raises(IOFailureError):
            download_asset(self._ASSET, blocker / "yt-dlp", session=session)

    def test_interrupted_download_keeps_existing_binary(self, tmp_path: Path) -> None:
        existing = tmp_path / "yt-dlp"
        existing.write_bytes(b"WORKING-BINARY")

        def _interrupted(chunk_size: int):
            yield b"partial"
            raise requests.ConnectionError("connection reset")

        response = _download_response()
        response.iter_content.side_effect = _interrupted
        with pytest.raises(TransportError):
            download_asset(self._ASSET, tmp_path, session=_make_session(response))
        assert existing.read_bytes() == b"WORKING-BINARY"
        assert list(tmp_path.iterdir()) == [existing]

    def test_replaces_existing_binary(self, tmp_path: Path) -> None:
        existing = tmp_path / "yt-dlp"
        existing.write_bytes(b"OLD")
        session = _make_session(_download_response(b"NEW"))
        download_asset(self._ASSET, tmp_path, session=session)
        assert existing.read_bytes() == b"NEW"
        assert list(tmp_path.iterdir()) == [existing]


class TestDownloadLatest:
    def test_lookup_then_download(self, tmp_path: Path) -> None:
        session = _make_session(
            _api_response(_release("yt-dlp")),
            _download_response(b"binary"),
        )
        path = download_latest(tmp_path, asset_name="yt-dlp", session=session)
        assert path == tmp_path / "yt-dlp"
        assert path.read_bytes() == b"binary"
        assert session.get.call_count == 2

    def test_missing_asset_downloads_nothing(self, tmp_path: Path) -> None:
        session = _make_session(_api_response(_release("other")))
        with pytest.raises(NoReleaseFoundError):
            download_latest(tmp_path, asset_name="yt-dlp", session=session)
        assert session.get.call_count == 1
        assert list(tmp_path.iterdir()) == []
