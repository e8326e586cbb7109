"""Downloading and unpacking of resolved artifacts."""

from __future__ import annotations

import tempfile
from pathlib import Path
from urllib.parse import urlparse

import requests
from py_app_dev.core.logging import logger

from nativefetch.exceptions import DownloadError
from nativefetch.extractor import extract_archive
from nativefetch.progress import ProgressCallback, RichProgressHandler

_CHUNK_SIZE = 8192
_DOWNLOAD_TIMEOUT = 60


def download_file(
    url: str,
    dest: Path,
    artifact_name: str = "",
    progress_callback: ProgressCallback | None = None,
) -> Path:
    """
    Stream the file at the http(s) *url* to *dest*.

    Args:
        url: URL to download from.
        dest: Local file path to write to.
        artifact_name: Artifact name passed to the progress callback.
        progress_callback: Optional callback invoked on each chunk.

    Returns:
        The *dest* path.

    Raises:
        DownloadError: On HTTP or network failures and when *dest* cannot be written.

    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with requests.get(url, stream=True, timeout=_DOWNLOAD_TIMEOUT) as response:
            response.raise_for_status()
            content_length = response.headers.get("Content-Length")
            total: int | None = int(content_length) if content_length else None
            downloaded = 0
            with dest.open("wb") as fh:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    fh.write(chunk)
                    downloaded += len(chunk)
                    if progress_callback:
                        progress_callback(artifact_name, downloaded, total)
    except requests.RequestException as exc:
        raise DownloadError(f"Failed to download {url}: {exc}") from exc
    except OSError as exc:
        raise DownloadError(f"Failed to write {url} to {dest}: {exc}") from exc
    return dest


def archive_filename(url: str, archive_format: str | None = None) -> str:
    """Pick a local file name for the downloaded archive inside the temporary directory."""
    if archive_format:
        return f"artifact.{archive_format}"
    name = Path(urlparse(url).path.rstrip("/")).name
    return name or "artifact"


def download_and_extract_file(
    url: str,
    work_dir: Path,
    show_progress: bool = True,
    archive_format: str | None = None,
    artifact_name: str | None = None,
) -> Path:
    """
    Download the archive at *url* and unpack it into *work_dir*.

    The archive itself is kept in a temporary directory that is removed
    afterwards; nothing is cached between runs.

    Returns:
        The *work_dir* path.

    """
    label = artifact_name or url
    handler = RichProgressHandler() if show_progress else None
    try:
        with tempfile.TemporaryDirectory(prefix="nativefetch-") as tmp:
            archive_path = Path(tmp) / archive_filename(url, archive_format)
            download_file(url, archive_path, label, handler.on_download if handler else None)
            logger.debug(f"Downloaded {url} to {archive_path}")
            extract_archive(archive_path, work_dir, archive_format, progress_callback=handler.on_extract if handler else None, artifact_name=label)
    finally:
        if handler:
            handler.close()
    return work_dir
