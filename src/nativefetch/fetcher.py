"""Orchestration of a single resolve-then-fetch pass over a manifest."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mashumaro.exceptions import InvalidFieldValue, MissingField
from py_app_dev.core.logging import logger

from nativefetch.constraints import check_constraints
from nativefetch.domain import NativeManifest, ResolvedArtifact, Resources, RuntimeFacts
from nativefetch.downloader import download_and_extract_file
from nativefetch.exceptions import ManifestError, MissingResourcesSectionError
from nativefetch.github import DEFAULT_API_URL, GithubActionsClient
from nativefetch.locator import ArtifactLocator, GithubArtifactLocator, HttpLocator, locate_artifact
from nativefetch.platform import get_runtime_facts
from nativefetch.resolver import PathResolver
from nativefetch.variables import resolve_variables

DEFAULT_MANIFEST_NAME = "package.json"

#: Signature: (url, work_dir, show_progress, archive_format, artifact_name)
DownloadFunction = Callable[[str, Path, bool, str | None, str | None], object]


@dataclass
class FetchSettings:
    """Run configuration, usually assembled from CLI options and the environment."""

    #: Directory the artifacts are extracted into
    work_dir: Path = field(default_factory=Path.cwd)
    #: Manifest file; defaults to ``package.json`` inside *work_dir*
    manifest_path: Path | None = None
    #: GitHub Actions run id used for ``github_artifact://`` hosts
    run_id: str | None = None
    #: GitHub token used for ``github_artifact://`` hosts
    github_token: str | None = None
    github_api_url: str = DEFAULT_API_URL
    show_progress: bool = True

    @property
    def manifest_file(self) -> Path:
        return self.manifest_path or self.work_dir / DEFAULT_MANIFEST_NAME


@dataclass(frozen=True)
class FileResolution:
    """Outcome of resolving one file entry."""

    artifact: ResolvedArtifact
    selected: bool


def load_manifest(manifest_path: Path) -> NativeManifest:
    """
    Load a manifest from a JSON file.

    Raises:
        ManifestError: If the file is missing or not a valid manifest.

    """
    if not manifest_path.is_file():
        raise ManifestError(f"Manifest file {manifest_path} does not exist")
    try:
        data = json.loads(manifest_path.read_text())
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Manifest file {manifest_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest file {manifest_path} must contain a JSON object")
    try:
        return NativeManifest.from_dict(data)
    except (MissingField, InvalidFieldValue) as exc:
        raise ManifestError(f"Manifest file {manifest_path} is invalid: {exc}") from exc


class NativeFetcher:
    """Resolves the native artifacts of a manifest and downloads the ones matching this host."""

    def __init__(
        self,
        settings: FetchSettings | None = None,
        facts: RuntimeFacts | None = None,
        locators: Sequence[ArtifactLocator] | None = None,
        download: DownloadFunction | None = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            settings: Run configuration, defaults to the current directory.
            facts: Runtime facts, detected from the current process when omitted.
            locators: Artifact locators tried in order, HTTP and GitHub artifacts by default.
            download: Download-and-extract function, the real downloader by default.

        """
        self.settings = settings or FetchSettings()
        self.facts = facts or get_runtime_facts()
        self.locators = list(locators) if locators is not None else self._default_locators()
        self.download = download or download_and_extract_file

    def _default_locators(self) -> list[ArtifactLocator]:
        settings = self.settings
        return [
            GithubArtifactLocator(
                client_factory=lambda: GithubActionsClient(token=settings.github_token, api_url=settings.github_api_url),
                run_id=settings.run_id,
            ),
            HttpLocator(),
        ]

    def _require_resources(self, manifest: NativeManifest) -> Resources:
        if manifest.resources is None:
            raise MissingResourcesSectionError("Please define a resources section in the package.json file of the corresponding package")
        return manifest.resources

    def _iter_resolutions(self, manifest: NativeManifest) -> Iterator[FileResolution]:
        resources = self._require_resources(manifest)
        substituters = resolve_variables(resources.vars, self.facts)
        resolver = PathResolver(version=manifest.version, facts=self.facts, substituters=tuple(substituters))
        for file_spec in resources.files:
            artifact = locate_artifact(file_spec, resolver, self.locators)
            yield FileResolution(artifact=artifact, selected=check_constraints(file_spec.constraints, self.facts))

    def resolve(self, manifest: NativeManifest) -> list[FileResolution]:
        """Resolve every file entry without downloading anything."""
        return list(self._iter_resolutions(manifest))

    def run(self, manifest: NativeManifest) -> list[ResolvedArtifact]:
        """
        Download and extract every file entry whose constraints pass.

        Entries are processed in manifest order and the first error aborts
        the run.

        Returns:
            The artifacts that were downloaded.

        """
        downloaded: list[ResolvedArtifact] = []
        for resolution in self._iter_resolutions(manifest):
            artifact = resolution.artifact
            if not resolution.selected:
                logger.info(f"Skipping download for {artifact.name}: constraints failed")
                continue
            logger.info(f"Downloading: {artifact.name}")
            self.download(artifact.url, self.settings.work_dir, self.settings.show_progress, artifact.archive_format, artifact.name)
            downloaded.append(artifact)
        return downloaded

    def install(self) -> list[ResolvedArtifact]:
        """Load the configured manifest and run it."""
        return self.run(load_manifest(self.settings.manifest_file))
