"""Tests for yt-dlp executable discovery (infra/executable_detector.py)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from ytdl_runner.infra.executable_detector import (
    EXECUTABLE_ENV_VAR,
    detect_executable,
    resolve_executable,
)

_WHICH = "ytdl_runner.infra.executable_detector.shutil.which"
_SYSTEM = "ytdl_runner.infra.executable_detector.platform.system"


@pytest.fixture(autouse=True)
def _no_executable_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(EXECUTABLE_ENV_VAR, raising=False)


class TestResolveExecutable:
    def test_default(self) -> None:
        assert resolve_executable() == "yt-dlp"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(EXECUTABLE_ENV_VAR, "youtube-dl")
        assert resolve_executable() == "youtube-dl"

    def test_empty_environment_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(EXECUTABLE_ENV_VAR, "")
        assert resolve_executable() == "yt-dlp"

    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(EXECUTABLE_ENV_VAR, "youtube-dl")
        assert resolve_executable("/opt/yt-dlp") == "/opt/yt-dlp"


class TestDetectExecutable:
    def test_found(self, tmp_path: Path) -> None:
        binary = tmp_path / "yt-dlp"
        with patch(_WHICH, return_value=str(binary)):
            status = detect_executable()
        assert status.found is True
        assert status.path == binary.resolve()
        assert status.install_commands == ()

    def test_missing_on_linux(self) -> None:
        with patch(_WHICH, return_value=None), patch(_SYSTEM, return_value="Linux"):
            status = detect_executable()
        assert status.found is False
        assert status.path is None
        assert status.install_commands[0] == "pip install yt-dlp"

    @pytest.mark.parametrize(
        ("system", "first"),
        [("Windows", "winget install yt-dlp"), ("Darwin", "brew install yt-dlp")],
    )
    def test_missing_platform_hints(self, system: str, first: str) -> None:
        with patch(_WHICH, return_value=None), patch(_SYSTEM, return_value=system):
            status = detect_executable()
        assert status.install_commands[0] == first
        assert "ytdl-runner fetch <directory>" in status.install_commands

    def test_probes_resolved_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(EXECUTABLE_ENV_VAR, "youtube-dl")
        with patch(_WHICH, return_value=None) as which:
            status = detect_executable()
        which.assert_called_once_with("youtube-dl")
        assert status.name == "youtube-dl"

