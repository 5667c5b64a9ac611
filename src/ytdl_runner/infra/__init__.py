"""Infrastructure layer — external system integration.

This layer wraps all interaction with child processes, the operating
system and the GitHub releases API.  Every raw OS or ``requests``
exception is caught here and re-raised as a
:class:`~ytdl_runner.exceptions.YtdlRunnerError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from ytdl_runner.infra.async_process import AsyncSubprocessRunner
from ytdl_runner.infra.executable_detector import (
    ExecutableStatus,
    detect_executable,
    resolve_executable,
)
from ytdl_runner.infra.process import SubprocessRunner
from ytdl_runner.infra.release_fetcher import (
    ReleaseAsset,
    download_asset,
    download_latest,
    expected_asset_name,
    find_latest_asset,
)

__all__: list[str] = [
    "AsyncSubprocessRunner",
    "ExecutableStatus",
    "ReleaseAsset",
    "SubprocessRunner",
    "detect_executable",
    "download_asset",
    "download_latest",
    "expected_asset_name",
    "find_latest_asset",
    "resolve_executable",
]
