"""Unpacking of downloaded native artifacts into the package directory."""

from __future__ import annotations

import tarfile
import zipfile
from collections.abc import Callable
from pathlib import Path

import py7zr
from py_app_dev.core.logging import logger

from nativefetch.exceptions import ExtractionError
from nativefetch.progress import ProgressCallback

#: File name suffix -> archive format, used when no format hint is given
ARCHIVE_SUFFIXES: dict[str, str] = {
    ".zip": "zip",
    ".tar.gz": "tar.gz",
    ".tgz": "tar.gz",
    ".tar.xz": "tar.xz",
    ".tar.bz2": "tar.bz2",
    ".7z": "7z",
}

# Called with (entries_done, entries_total)
_Report = Callable[[int, int], None]


def detect_archive_format(archive_path: Path, archive_format: str | None = None) -> str:
    """
    Decide how to unpack *archive_path*.

    An explicit *archive_format* wins, since CI artifact downloads carry no
    suffix. Otherwise the file name suffix decides.
    """
    if archive_format:
        fmt = ARCHIVE_SUFFIXES.get(f".{archive_format.lower().lstrip('.')}")
        if fmt is None:
            raise ExtractionError(f"Unsupported archive format '{archive_format}' for '{archive_path.name}'")
        return fmt
    name = archive_path.name.lower()
    for suffix, fmt in ARCHIVE_SUFFIXES.items():
        if name.endswith(suffix):
            return fmt
    raise ExtractionError(f"Cannot tell the archive format of '{archive_path.name}', expected one of {', '.join(ARCHIVE_SUFFIXES)}")


def _ensure_inside(dest_dir: Path, entry_names: list[str]) -> None:
    root = dest_dir.resolve()
    for entry in entry_names:
        if not (dest_dir / entry).resolve().is_relative_to(root):
            raise ExtractionError(f"Archive entry {entry!r} points outside {dest_dir}")


def _unpack_zip(archive_path: Path, dest_dir: Path, report: _Report) -> None:
    with zipfile.ZipFile(archive_path) as archive:
        members = archive.infolist()
        _ensure_inside(dest_dir, [member.filename for member in members])
        for done, member in enumerate(members, 1):
            archive.extract(member, dest_dir)
            report(done, len(members))


def _unpack_tar(archive_path: Path, dest_dir: Path, report: _Report) -> None:
    # Mode "r" detects gz, xz and bz2 compression on its own
    extra = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}
    with tarfile.open(archive_path) as archive:
        members = archive.getmembers()
        _ensure_inside(dest_dir, [member.name for member in members])
        for done, member in enumerate(members, 1):
            archive.extract(member, dest_dir, **extra)
            report(done, len(members))


def _unpack_7z(archive_path: Path, dest_dir: Path, report: _Report) -> None:
    with py7zr.SevenZipFile(archive_path, mode="r") as archive:
        names = archive.getnames()
        _ensure_inside(dest_dir, names)
        archive.extractall(path=dest_dir)  # noqa: S202
    report(len(names), len(names))


_UNPACKERS: dict[str, Callable[[Path, Path, _Report], None]] = {
    "zip": _unpack_zip,
    "tar.gz": _unpack_tar,
    "tar.xz": _unpack_tar,
    "tar.bz2": _unpack_tar,
    "7z": _unpack_7z,
}


def extract_archive(
    archive_path: Path,
    dest_dir: Path,
    archive_format: str | None = None,
    progress_callback: ProgressCallback | None = None,
    artifact_name: str = "",
) -> Path:
    """
    Unpack *archive_path* into *dest_dir*, keeping the archive's own layout.

    Existing files in *dest_dir* are left in place or overwritten by entries
    of the same name.

    Raises:
        ExtractionError: For unknown formats, corrupt archives, entries that
            escape *dest_dir* and file system errors while writing.

    """
    fmt = detect_archive_format(archive_path, archive_format)
    label = artifact_name or archive_path.name

    def report(done: int, total: int) -> None:
        if progress_callback:
            progress_callback(label, done, total)

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        _UNPACKERS[fmt](archive_path, dest_dir, report)
    except (zipfile.BadZipFile, tarfile.TarError, py7zr.exceptions.Bad7zFile, py7zr.exceptions.UnsupportedCompressionMethodError) as exc:
        raise ExtractionError(f"Cannot extract {fmt} archive '{label}': {exc}") from exc
    except OSError as exc:
        raise ExtractionError(f"Cannot extract '{label}' into {dest_dir}: {exc}") from exc
    logger.debug(f"Extracted {fmt} archive '{label}' into {dest_dir}")
    return dest_dir
