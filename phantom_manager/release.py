# phantom_manager/release.py
# -*- coding: utf-8 -*-
"""
Resolves and downloads Phantom Tunnel release assets from GitHub.

This module maps the host architecture to a release asset name, looks up the
newest release tag through the GitHub releases API, builds the asset download
URL and streams the asset to disk.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from common.command_utils import log_phantom
from phantom_manager.config_models import AppSettings
from phantom_manager.exceptions import (
    DownloadError,
    ReleaseLookupError,
    UnsupportedArchitectureError,
)

module_logger = logging.getLogger(__name__)

USER_AGENT = "phantom-manager"
CHUNK_SIZE = 8192


def resolve_asset_name(architecture: str, app_settings: AppSettings) -> str:
    """
    Map a `uname -m` value to its release asset name.

    Raises:
        UnsupportedArchitectureError: No asset is published for the architecture.
    """
    asset_name = app_settings.architecture_assets.get(architecture)
    if not asset_name:
        raise UnsupportedArchitectureError(architecture or "unknown")
    return asset_name


def latest_release_api_url(app_settings: AppSettings) -> str:
    return (
        f"{app_settings.github_api_url.rstrip('/')}/repos/"
        f"{app_settings.github_repo}/releases/latest"
    )


def build_download_url(
    app_settings: AppSettings, tag: str, asset_name: str
) -> str:
    return (
        f"{app_settings.github_download_url.rstrip('/')}/"
        f"{app_settings.github_repo}/releases/download/{tag}/{asset_name}"
    )


def fetch_latest_tag(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Return the tag name of the newest release.

    Raises:
        ReleaseLookupError: The request failed, the response was not JSON, or
            it carried no tag name.
    """
    logger_to_use = current_logger if current_logger else module_logger
    url = latest_release_api_url(app_settings)
    log_phantom(
        "Fetching the latest version from GitHub...",
        "info",
        logger_to_use,
        app_settings,
    )
    log_phantom(f"GET {url}", "debug", logger_to_use, app_settings)

    try:
        response = requests.get(
            url,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            },
            timeout=app_settings.http_timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.RequestException as req_err:
        raise ReleaseLookupError(
            f"Failed to fetch the latest release tag from GitHub: {req_err}",
            original_error=req_err,
        ) from req_err
    except ValueError as json_err:
        raise ReleaseLookupError(
            "Failed to fetch the latest release tag from GitHub: response was not valid JSON.",
            original_error=json_err,
        ) from json_err

    tag = payload.get("tag_name") if isinstance(payload, dict) else None
    if not tag or not str(tag).strip():
        raise ReleaseLookupError(
            "Failed to fetch the latest release tag from GitHub."
        )

    tag = str(tag).strip()
    log_phantom(
        f"Latest version is {tag}.", "info", logger_to_use, app_settings
    )
    return tag


def download_asset(
    url: str,
    destination: Union[str, Path],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Stream ``url`` into ``destination``.

    Raises:
        DownloadError: On HTTP, connection, timeout or file I/O errors, or when
            the file is missing or empty afterwards.
    """
    logger_to_use = current_logger if current_logger else module_logger
    download_path = Path(destination)
    log_phantom(f"GET {url}", "debug", logger_to_use, app_settings)

    try:
        with requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            stream=True,
            timeout=app_settings.http_timeout,
            allow_redirects=True,
        ) as response:
            response.raise_for_status()
            with open(download_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.exceptions.HTTPError as http_err:
        raise DownloadError(
            f"Download failed. HTTP error: {http_err}",
            original_error=http_err,
        ) from http_err
    except requests.exceptions.ConnectionError as conn_err:
        raise DownloadError(
            f"Download failed. Connection error: {conn_err}",
            original_error=conn_err,
        ) from conn_err
    except requests.exceptions.Timeout as timeout_err:
        raise DownloadError(
            f"Download failed. Timed out: {timeout_err}",
            original_error=timeout_err,
        ) from timeout_err
    except requests.exceptions.RequestException as req_err:
        raise DownloadError(
            f"Download failed: {req_err}", original_error=req_err
        ) from req_err
    except OSError as io_err:
        raise DownloadError(
            f"Download failed. Could not write {download_path}: {io_err}",
            original_error=io_err,
        ) from io_err

    if not download_path.is_file() or download_path.stat().st_size == 0:
        raise DownloadError(
            "Download failed. The downloaded file is missing or empty."
        )
    return download_path
