"""Shared Rich consoles for the CLI layer.

Results go to stdout; diagnostics, errors and hints go to stderr so
that ``ytdl-runner info ... > out.txt`` captures only the data.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True)
"""Diagnostics and errors."""

output = Console()
"""Command results."""
