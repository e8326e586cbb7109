"""Minimal GitHub Actions REST client for workflow run artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests
from py_app_dev.core.logging import logger

from nativefetch import __version__
from nativefetch.exceptions import GithubApiError

DEFAULT_API_URL = "https://api.github.com"
_API_TIMEOUT = 60
_PAGE_SIZE = 100


@dataclass(frozen=True)
class WorkflowArtifact:
    """An artifact uploaded by a workflow run."""

    id: int
    name: str
    expired: bool = False


class GithubActionsClient:
    """Lists and downloads workflow run artifacts through the GitHub REST API."""

    def __init__(self, token: str | None = None, api_url: str = DEFAULT_API_URL, session: requests.Session | None = None) -> None:
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": f"nativefetch/{__version__}",
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: dict[str, Any] | None = None, allow_redirects: bool = True) -> requests.Response:
        url = f"{self.api_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=_API_TIMEOUT, allow_redirects=allow_redirects)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise GithubApiError(f"GitHub API request {url} failed: {exc}") from exc
        return response

    def list_workflow_run_artifacts(self, owner: str, repo: str, run_id: str) -> list[WorkflowArtifact]:
        """Return every artifact of the workflow run, following pagination."""
        artifacts: list[WorkflowArtifact] = []
        page = 1
        while True:
            response = self._get(
                f"/repos/{owner}/{repo}/actions/runs/{run_id}/artifacts",
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            data = response.json()
            batch = data.get("artifacts", [])
            artifacts.extend(WorkflowArtifact(id=item["id"], name=item["name"], expired=item.get("expired", False)) for item in batch)
            total = data.get("total_count", len(artifacts))
            if not batch or len(artifacts) >= total:
                break
            page += 1
        logger.debug(f"Workflow run {run_id} of {owner}/{repo} has {len(artifacts)} artifacts")
        return artifacts

    def get_artifact_download_url(self, owner: str, repo: str, artifact_id: int, archive_format: str = "zip") -> str:
        """
        Return a short-lived URL for the artifact archive.

        GitHub answers with a redirect to pre-signed storage; the ``Location``
        header is the URL to download, no credentials needed.
        """
        response = self._get(
            f"/repos/{owner}/{repo}/actions/artifacts/{artifact_id}/{archive_format}",
            allow_redirects=False,
        )
        location = response.headers.get("Location")
        if not location:
            raise GithubApiError(f"GitHub did not return a download location for artifact {artifact_id}")
        return location
