"""CLI application entry point and command routing for ytdl-runner.

This module is the **sole error boundary** for the command-line front
end.  It catches :class:`~ytdl_runner.exceptions.YtdlRunnerError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Commands
--------
* ``ytdl-runner info URL``       — run yt-dlp and summarise the result
* ``ytdl-runner search QUERY``   — run a provider search
* ``ytdl-runner download URL``   — download media into a folder
* ``ytdl-runner fetch DEST``     — install the latest yt-dlp release
* ``ytdl-runner doctor``         — environment diagnostics
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from rich.markup import escape

from ytdl_runner.cli import exit_codes
from ytdl_runner.cli.console import console, output
from ytdl_runner.core.invocation import Invocation, SearchOptions, SearchType
from ytdl_runner.exceptions import ProcessTimeoutError, YtdlRunnerError
from ytdl_runner.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_run_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that spawns yt-dlp."""
    parser.add_argument("--executable", help="Path to the yt-dlp executable.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Kill yt-dlp after this many seconds.",
    )
    parser.add_argument("--socket-timeout", help="Forwarded to yt-dlp.")
    parser.add_argument("-f", "--format", dest="format_selector", help="Format selector.")
    parser.add_argument("--cookies", help="Netscape-format cookie file.")
    parser.add_argument(
        "--ignore-errors",
        action="store_true",
        help="Decode whatever yt-dlp printed even if it exits non-zero.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ytdl-runner",
        description="Run yt-dlp and inspect its output as typed data.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output (argument vectors, exit codes) to stderr.",
    )
    commands = parser.add_subparsers(dest="command")

    info = commands.add_parser("info", help="Summarise the item or playlist at URL.")
    info.add_argument("url")
    info.add_argument("--flat", action="store_true", help="Do not resolve playlist entries.")
    info.add_argument("--formats", action="store_true", help="List download formats.")
    info.add_argument("--raw", action="store_true", help="Print the untyped JSON.")
    _add_run_options(info)

    search = commands.add_parser("search", help="Search a provider for QUERY.")
    search.add_argument("query")
    search.add_argument("-n", "--count", type=int, default=5)
    search.add_argument(
        "--provider",
        default="youtube",
        help="youtube, google, yahoo, soundcloud, or a raw search prefix.",
    )
    _add_run_options(search)

    download = commands.add_parser("download", help="Download media into a folder.")
    download.add_argument("url")
    download.add_argument("folder", nargs="?", default=".")
    download.add_argument("-o", "--output", dest="output_template")
    _add_run_options(download)

    fetch = commands.add_parser("fetch", help="Download the latest yt-dlp release.")
    fetch.add_argument("destination", help="Target directory or file path.")
    fetch.add_argument("--repo", default="yt-dlp/yt-dlp", help="OWNER/REPO on GitHub.")

    commands.add_parser("doctor", help="Check the runtime environment.")
    return parser


def _invocation(url: str, args: argparse.Namespace) -> Invocation:
    """Translate shared CLI options into an :class:`Invocation`."""
    invocation = Invocation(url)
    if args.executable:
        invocation = invocation.with_executable(args.executable)
    if args.timeout is not None:
        invocation = invocation.with_process_timeout(args.timeout)
    if args.socket_timeout:
        invocation = invocation.with_socket_timeout(args.socket_timeout)
    if args.format_selector:
        invocation = invocation.with_format(args.format_selector)
    if args.cookies:
        invocation = invocation.with_cookies(args.cookies)
    if args.ignore_errors:
        invocation = invocation.with_ignore_errors()
    return invocation


def _search_options(provider: str, query: str, count: int) -> SearchOptions:
    try:
        search_type = SearchType[provider.upper()]
    except KeyError:
        return SearchOptions.custom(provider, query).with_count(count)
    return SearchOptions(search_type, query, count)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _print_result(invocation: Invocation, *, show_formats: bool = False) -> int:
    from ytdl_runner.cli.render import result_tables
    from ytdl_runner.client import YoutubeDl

    result = YoutubeDl().run(invocation)
    for table in result_tables(result, show_formats=show_formats):
        output.print(table)
    return exit_codes.SUCCESS


def _handle_info(args: argparse.Namespace) -> int:
    from ytdl_runner.client import YoutubeDl

    invocation = _invocation(args.url, args)
    if args.flat:
        invocation = invocation.with_flat_playlist()
    if args.raw:
        output.print_json(json.dumps(YoutubeDl().run_raw(invocation)))
        return exit_codes.SUCCESS
    return _print_result(invocation, show_formats=args.formats)


def _handle_search(args: argparse.Namespace) -> int:
    options = _search_options(args.provider, args.query, args.count)
    invocation = _invocation(str(options), args).with_flat_playlist()
    return _print_result(invocation)


def _handle_download(args: argparse.Namespace) -> int:
    from ytdl_runner.client import YoutubeDl

    invocation = _invocation(args.url, args)
    if args.output_template:
        invocation = invocation.with_output_template(args.output_template)
    console.print(f"[bold]Downloading…[/bold]  {args.url}")
    YoutubeDl().download_to(invocation, args.folder)
    console.print("[bold green]Download complete.[/bold green]")
    return exit_codes.SUCCESS


def _handle_fetch(args: argparse.Namespace) -> int:
    from ytdl_runner.infra.release_fetcher import download_latest

    owner, _, repo = args.repo.partition("/")
    if not owner or not repo:
        console.print(f"[bold red]Error:[/bold red] expected OWNER/REPO, got {args.repo!r}")
        return exit_codes.GENERAL_ERROR
    console.print(f"[bold]Fetching latest release of {owner}/{repo}…[/bold]")
    path = download_latest(args.destination, owner, repo)
    console.print(f"[bold green]Saved[/bold green] {path}")
    return exit_codes.SUCCESS


def _handle_doctor(args: argparse.Namespace) -> int:
    from ytdl_runner.cli.doctor import run_doctor

    return run_doctor()


_HANDLERS = {
    "info": _handle_info,
    "search": _handle_search,
    "download": _handle_download,
    "fetch": _handle_fetch,
    "doctor": _handle_doctor,
}


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytdl-runner CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    return _HANDLERS[args.command](args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a
    raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except YtdlRunnerError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        if isinstance(exc, ProcessTimeoutError):
            sys.exit(exit_codes.TIMEOUT)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
