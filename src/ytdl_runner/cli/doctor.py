"""``ytdl-runner doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can run yt-dlp.

No business logic resides here; it purely collects and displays
diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from rich.table import Table

from ytdl_runner.cli import exit_codes
from ytdl_runner.cli.console import console
from ytdl_runner.infra.executable_detector import detect_executable
from ytdl_runner.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _executable_check() -> Check:
    """Return (label, value, status) for the yt-dlp executable row."""
    status_obj = detect_executable()
    if status_obj.found:
        return "executable", str(status_obj.path), "[green]OK[/green]"
    return "executable", f"{status_obj.name} not found", "[red]FAIL[/red]"


def _ytdlp_package_check() -> Check:
    """Return (label, value, status) for the yt-dlp Python package row.

    The package is what ships the default executable; a missing package
    is only a warning when another executable is configured.
    """
    try:
        from yt_dlp.version import __version__ as ydl_ver
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "[yellow]WARN[/yellow]"
    return "yt-dlp", ydl_ver, "[green]OK[/green]"


def _os_check() -> Check:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _version_check() -> Check:
    return "ytdl-runner", __version__, "[green]OK[/green]"


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = [
        _version_check(),
        _python_version_check(),
        _executable_check(),
        _ytdlp_package_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    table = Table(
        title="ytdl-runner doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    executable = detect_executable()
    if not executable.found and executable.install_commands:
        console.print(f"[yellow]{executable.name} was not found.[/yellow]")
        console.print("Install using one of the following commands:\n")
        for cmd in executable.install_commands:
            console.print(f"  [bold]{cmd}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
