"""Shared pytest fixtures for nativefetch tests."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from nativefetch.domain import RuntimeFacts
from nativefetch.fetcher import FetchSettings, NativeFetcher
from tests.helpers import RecordingDownloader, make_facts


@dataclass
class FetchEnv:
    """A fetcher wired to a temporary work directory and a recording downloader."""

    work_dir: Path
    downloader: RecordingDownloader

    def write_manifest(self, content: dict[str, Any]) -> Path:
        """Write a ``package.json`` into the work directory."""
        manifest_path = self.work_dir / "package.json"
        manifest_path.write_text(json.dumps(content))
        return manifest_path

    def fetcher(self, facts: RuntimeFacts | None = None, **settings: Any) -> NativeFetcher:
        return NativeFetcher(
            FetchSettings(work_dir=self.work_dir, show_progress=False, **settings),
            facts=facts or make_facts(),
            download=self.downloader,
        )


@pytest.fixture
def linux_facts() -> RuntimeFacts:
    return make_facts()


@pytest.fixture
def windows_facts() -> RuntimeFacts:
    return make_facts(platform="win32", arch="x64", libc="unknown")


@pytest.fixture
def fetch_env(tmp_path: Path) -> FetchEnv:
    """Provide a work directory and a downloader that records instead of downloading."""
    work_dir = tmp_path / "package"
    work_dir.mkdir()
    return FetchEnv(work_dir=work_dir, downloader=RecordingDownloader())
