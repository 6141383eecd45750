"""Archive transport and codec: download a zip to disk, extract it into a tree."""

from __future__ import annotations

import logging
import os
import zipfile

import requests

from common.http_client import stream_to_file
from common.logging_utils import safe_url
from errors import DownloadFailed, ExtractFailed

logger = logging.getLogger(__name__)


def download_file(url: str, dest_path: str) -> None:
    """Download ``url`` into ``dest_path``.

    Raises:
        DownloadFailed: On transport errors, non-2xx statuses or write errors.
    """
    logger.info("Downloading %s to %s...", safe_url(url), dest_path)
    try:
        status = stream_to_file(url, dest_path, context="download")
    except requests.RequestException as exc:
        raise DownloadFailed(url, reason=str(exc)) from exc
    except OSError as exc:
        raise DownloadFailed(url, reason=f"cannot write {dest_path}: {exc}") from exc
    if not 200 <= status < 300:
        raise DownloadFailed(url, status=status)


def extract_archive(archive_path: str, dest_dir: str) -> None:
    """Extract the zip at ``archive_path`` into ``dest_dir``.

    Raises:
        ExtractFailed: When the archive is corrupt or unreadable, or the
            destination cannot be written.
    """
    logger.info("Extracting %s into %s...", archive_path, dest_dir)
    try:
        os.makedirs(dest_dir, exist_ok=True)
        with zipfile.ZipFile(archive_path) as zf:
            zf.extractall(dest_dir)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as exc:
        raise ExtractFailed(archive_path, dest_dir, reason=str(exc)) from exc
