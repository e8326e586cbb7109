"""Errors that abort a native artifact installation."""

from py_app_dev.core.exceptions import UserNotificationException


class NativeFetchError(UserNotificationException):
    """Base class for all fatal installer errors."""


class ManifestError(NativeFetchError):
    """Raised when the manifest file is missing or cannot be parsed."""


class MissingResourcesSectionError(NativeFetchError):
    """Raised when the manifest has no ``resources`` section."""


class UnresolvableVariableError(NativeFetchError):
    """Raised when a variable has neither a resolvable value nor a default."""


class UnsupportedProtocolError(NativeFetchError):
    """Raised when a file host uses a scheme no locator understands."""


class MalformedArtifactUrlError(NativeFetchError):
    """Raised when a ``github_artifact://`` host cannot be decoded."""


class MissingRunIdError(NativeFetchError):
    """Raised when a CI artifact is requested outside of a CI run."""


class ArtifactNotFoundError(NativeFetchError):
    """Raised when the CI run has no artifact with the requested name."""


class GithubApiError(NativeFetchError):
    """Raised when a GitHub API request fails."""


class DownloadError(NativeFetchError):
    """Raised when a file download fails."""


class ExtractionError(NativeFetchError):
    """Raised when a downloaded archive cannot be extracted."""
