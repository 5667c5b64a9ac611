"""Infrastructure: yt-dlp executable discovery and platform guidance.

Resolution order for the executable used by an invocation:

1. An explicit path on the :class:`~ytdl_runner.core.invocation.Invocation`.
2. The ``YTDL_RUNNER_EXECUTABLE`` environment variable.
3. :data:`~ytdl_runner.core.invocation.DEFAULT_EXECUTABLE`, looked up
   on ``PATH`` by the operating system at spawn time.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No permanent PATH modification.
"""

from __future__ import annotations

import os
import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from ytdl_runner.core.invocation import DEFAULT_EXECUTABLE

EXECUTABLE_ENV_VAR = "YTDL_RUNNER_EXECUTABLE"


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecutableStatus:
    """Result of an executable detection probe.

    Attributes
    ----------
    name : str
        The name or path that was probed.
    found : bool
        Whether the executable could be located.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested shell commands for installing yt-dlp on the current
        platform.  Empty when the executable is already present.
    """

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Resolution / detection logic
# ---------------------------------------------------------------------------

def resolve_executable(explicit: str | None = None) -> str:
    """Return the executable name or path an invocation should spawn."""
    if explicit:
        return explicit
    return os.environ.get(EXECUTABLE_ENV_VAR) or DEFAULT_EXECUTABLE


def detect_executable(explicit: str | None = None) -> ExecutableStatus:
    """Probe the system for the yt-dlp executable.

    Returns an :class:`ExecutableStatus` regardless of whether the
    binary is present — the caller decides whether to abort or warn.
    """
    name = resolve_executable(explicit)
    result = shutil.which(name)

    if result is not None:
        return ExecutableStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )

    return ExecutableStatus(
        name=name,
        found=False,
        path=None,
        install_commands=_platform_install_commands(),
    )


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    fetch = "ytdl-runner fetch <directory>"
    if system == "windows":
        return ("winget install yt-dlp", "pip install yt-dlp", fetch)
    if system == "darwin":
        return ("brew install yt-dlp", "pip install yt-dlp", fetch)
    return ("pip install yt-dlp", fetch)
