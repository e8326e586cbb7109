"""Reusable test helpers for simulated hosts, archives and downloads."""

from __future__ import annotations

import tarfile
import zipfile
from collections.abc import Callable
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any

from nativefetch.domain import RuntimeFacts


def make_facts(platform: str = "linux", arch: str = "x64", libc: str = "glibc", libraries: set[str] | None = None) -> RuntimeFacts:
    """Build runtime facts for a simulated host with the given shared libraries installed."""
    installed = libraries or set()
    return RuntimeFacts(platform=platform, arch=arch, libc=libc, library_exists=lambda name: name in installed)


@dataclass
class RecordingDownloader:
    """Stands in for the download-and-extract collaborator and records its calls."""

    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, url: str, work_dir: Path, show_progress: bool, archive_format: str | None, artifact_name: str | None) -> Path:
        self.calls.append(
            {
                "url": url,
                "work_dir": work_dir,
                "show_progress": show_progress,
                "archive_format": archive_format,
                "name": artifact_name,
            }
        )
        return work_dir

    @property
    def urls(self) -> list[str]:
        return [call["url"] for call in self.calls]


def create_archive(
    base_dir: Path,
    files: dict[str, str],
    fmt: str = "tar.gz",
    top_dir: str | None = None,
) -> Path:
    """
    Create an archive with the given files and return its path.

    Args:
        base_dir: Directory where the archive file will be written.
        files: Mapping of filename → text content.
        fmt: Archive format, ``"tar.gz"`` or ``"zip"``.
        top_dir: Optional top-level directory inside the archive.

    """
    creators: dict[str, Callable[..., Path]] = {"tar.gz": _create_tar_gz, "zip": _create_zip}
    creator = creators.get(fmt)
    if creator is None:
        raise ValueError(f"Unsupported test archive format: {fmt!r}. Use 'tar.gz' or 'zip'.")
    return creator(base_dir, files, top_dir)


def _create_tar_gz(base_dir: Path, files: dict[str, str], top_dir: str | None) -> Path:
    archive_path = base_dir / "archive.tar.gz"
    with tarfile.open(archive_path, "w:gz") as tf:
        for name, content in files.items():
            entry_name = f"{top_dir}/{name}" if top_dir else name
            data = content.encode()
            info = tarfile.TarInfo(name=entry_name)
            info.size = len(data)
            tf.addfile(info, BytesIO(data))
    return archive_path


def _create_zip(base_dir: Path, files: dict[str, str], top_dir: str | None) -> Path:
    archive_path = base_dir / "archive.zip"
    with zipfile.ZipFile(archive_path, "w") as zf:
        for name, content in files.items():
            entry_name = f"{top_dir}/{name}" if top_dir else name
            zf.writestr(entry_name, content)
    return archive_path
