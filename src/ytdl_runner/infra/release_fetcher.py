"""Fetch the latest yt-dlp build from the GitHub releases API.

This module is the **only** place in the codebase that imports
``requests``.  Transport failures are re-raised as
:class:`~ytdl_runner.exceptions.TransportError` and filesystem failures
as :class:`~ytdl_runner.exceptions.IOFailureError`.
"""

from __future__ import annotations

import logging
import os
import platform
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from ytdl_runner.exceptions import IOFailureError, NoReleaseFoundError, TransportError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
DEFAULT_OWNER = "yt-dlp"
DEFAULT_REPO = "yt-dlp"

_CHUNK_SIZE = 1024 * 1024
_TIMEOUT = (10, 60)
_EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """A downloadable binary attached to a tagged release."""

    name: str
    download_url: str
    tag_name: str | None = None


def expected_asset_name(system: str | None = None) -> str:
    """Return the release asset name for *system* (default: this host)."""
    system = (system or platform.system()).lower()
    if system == "windows":
        return "yt-dlp.exe"
    if system == "darwin":
        return "yt-dlp_macos"
    return "yt-dlp"


def find_latest_asset(
    owner: str = DEFAULT_OWNER,
    repo: str = DEFAULT_REPO,
    *,
    asset_name: str | None = None,
    session: requests.Session | None = None,
    api_base: str = GITHUB_API,
) -> ReleaseAsset:
    """Look up the asset named *asset_name* in the latest release.

    Raises
    ------
    TransportError
        When the API request fails or returns an unusable body.
    NoReleaseFoundError
        When the latest release has no matching asset.
    """
    wanted = asset_name or expected_asset_name()
    url = f"{api_base.rstrip('/')}/repos/{owner}/{repo}/releases/latest"
    get = session.get if session is not None else requests.get
    logger.debug("looking up %s in %s", wanted, url)

    try:
        response = get(
            url,
            headers={"Accept": "application/vnd.github+json"},
            timeout=_TIMEOUT,
        )
        response.raise_for_status()
        release: Any = response.json()
    except requests.RequestException as exc:
        raise TransportError(f"http error: {exc}") from exc
    except ValueError as exc:
        raise TransportError(f"http error: invalid JSON from {url}: {exc}") from exc

    if not isinstance(release, dict):
        raise TransportError(f"http error: unexpected release body from {url}")

    assets = release.get("assets")
    if assets is None:
        assets = []
    elif not isinstance(assets, list):
        raise TransportError(f"http error: release assets from {url} are not a list")

    tag_name = release.get("tag_name")
    for asset in assets:
        if not isinstance(asset, dict) or asset.get("name") != wanted:
            continue
        download_url = asset.get("browser_download_url")
        if isinstance(download_url, str):
            return ReleaseAsset(
                name=wanted,
                download_url=download_url,
                tag_name=tag_name if isinstance(tag_name, str) else None,
            )

    raise NoReleaseFoundError(
        f"no github release found for {wanted} in {owner}/{repo}",
        hint="The release may not ship a build for this platform.",
    )


def download_asset(
    asset: ReleaseAsset,
    destination: str | os.PathLike[str],
    *,
    session: requests.Session | None = None,
) -> Path:
    """Stream *asset* to *destination* and return the written path.

    A *destination* that is an existing directory receives the asset
    under its own name.  Parent directories are created as needed and
    the file is marked executable on POSIX systems.  The download lands
    in a temporary file beside the target and replaces it only once
    complete, so a failed transfer leaves any existing binary intact.

    Raises
    ------
    TransportError
        When the download fails.
    IOFailureError
        When the file cannot be written.
    """
    target = Path(destination)
    if target.is_dir():
        target = target / asset.name
    get = session.get if session is not None else requests.get
    logger.debug("downloading %s to %s", asset.download_url, target)

    partial: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with get(asset.download_url, stream=True, timeout=_TIMEOUT) as response:
            response.raise_for_status()
            with tempfile.NamedTemporaryFile(
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".part",
                delete=False,
            ) as handle:
                partial = Path(handle.name)
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
        if os.name == "posix":
            partial.chmod(_EXECUTABLE_MODE)
        os.replace(partial, target)
        partial = None
    except requests.RequestException as exc:
        raise TransportError(f"http error: {exc}") from exc
    except OSError as exc:
        raise IOFailureError(f"io error: cannot write {target}: {exc}") from exc
    finally:
        if partial is not None:
            partial.unlink(missing_ok=True)

    return target


def download_latest(
    destination: str | os.PathLike[str],
    owner: str = DEFAULT_OWNER,
    repo: str = DEFAULT_REPO,
    *,
    asset_name: str | None = None,
    session: requests.Session | None = None,
    api_base: str = GITHUB_API,
) -> Path:
    """Fetch the latest release asset for this platform into *destination*."""
    asset = find_latest_asset(
        owner,
        repo,
        asset_name=asset_name,
        session=session,
        api_base=api_base,
    )
    return download_asset(asset, destination, session=session)
