"""Determine the concrete download location of a manifest file entry."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from py_app_dev.core.logging import logger

from nativefetch.domain import FileSpec, ResolvedArtifact
from nativefetch.exceptions import ArtifactNotFoundError, MalformedArtifactUrlError, MissingRunIdError, UnsupportedProtocolError
from nativefetch.github import GithubActionsClient
from nativefetch.resolver import PathResolver

GITHUB_ARTIFACT_SCHEME = "github_artifact://"

_GITHUB_ARTIFACT_PATTERN = re.compile(r"github_artifact://(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)/actions/(?P<workflow>[A-Za-z0-9_.${}-]+)")


class ArtifactLocator(ABC):
    """Turns a file entry into a :class:`ResolvedArtifact` for one kind of host."""

    @abstractmethod
    def supports(self, host: str) -> bool: ...

    @abstractmethod
    def locate(self, file_spec: FileSpec, resolver: PathResolver) -> ResolvedArtifact: ...


class HttpLocator(ArtifactLocator):
    """Plain ``http://`` and ``https://`` hosts: the URL is ``host + path``."""

    def supports(self, host: str) -> bool:
        return host.startswith(("http://", "https://"))

    def locate(self, file_spec: FileSpec, resolver: PathResolver) -> ResolvedArtifact:
        url = resolver.resolve(file_spec.host + file_spec.path)
        return ResolvedArtifact(url=url, name=url)


class GithubArtifactLocator(ArtifactLocator):
    """
    ``github_artifact://owner/repo/actions/workflow`` hosts.

    The artifact is looked up by its resolved ``name`` among the artifacts of
    the current workflow run, then exchanged for a zip download URL.
    """

    def __init__(self, client_factory: Callable[[], GithubActionsClient], run_id: str | None) -> None:
        self._client_factory = client_factory
        self._client: GithubActionsClient | None = None
        self.run_id = run_id

    @property
    def client(self) -> GithubActionsClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def supports(self, host: str) -> bool:
        return host.startswith(GITHUB_ARTIFACT_SCHEME)

    def locate(self, file_spec: FileSpec, resolver: PathResolver) -> ResolvedArtifact:
        match = _GITHUB_ARTIFACT_PATTERN.match(file_spec.host)
        if not match:
            raise MalformedArtifactUrlError(f"Unable to decode url from github_artifact protocol: {file_spec.host}")
        if not self.run_id:
            raise MissingRunIdError(f"Cannot resolve {file_spec.host} without a GitHub Actions run id (GITHUB_RUN_ID)")
        if not file_spec.name:
            raise MalformedArtifactUrlError(f"File entry for {file_spec.host} has no artifact name")

        owner, repo = match.group("owner"), match.group("repo")
        artifacts = self.client.list_workflow_run_artifacts(owner, repo, self.run_id)

        resolved_name = resolver.resolve(file_spec.name)
        artifact = next((a for a in artifacts if a.name == resolved_name), None)
        if artifact is None:
            raise ArtifactNotFoundError(f"Artifact '{resolved_name}' doesn't exist")
        if artifact.expired:
            logger.warning(f"Artifact '{resolved_name}' has expired, download will likely fail")

        url = self.client.get_artifact_download_url(owner, repo, artifact.id, archive_format="zip")
        return ResolvedArtifact(url=url, name=resolved_name, archive_format="zip")


def locate_artifact(file_spec: FileSpec, resolver: PathResolver, locators: Sequence[ArtifactLocator]) -> ResolvedArtifact:
    """
    Locate *file_spec* with the first locator supporting its host.

    Raises:
        UnsupportedProtocolError: If no locator supports the host.

    """
    for locator in locators:
        if locator.supports(file_spec.host):
            return locator.locate(file_spec, resolver)
    raise UnsupportedProtocolError(f"Unsupported protocol in host: {file_spec.host}")
