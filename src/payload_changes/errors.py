"""Custom exception types for the payload change report."""


class ChangeReportError(Exception):
    """Base exception for all recoverable change report errors."""


class ConfigurationError(ChangeReportError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(ChangeReportError):
    """Raised when GitHub authentication credentials are unavailable."""


class PayloadFetchError(ChangeReportError):
    """Raised when the repositories of a release payload cannot be resolved."""


class RepositoryResolutionError(ChangeReportError):
    """Raised when a repository reference cannot be split into organization and name."""


class ApiError(ChangeReportError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class CommitFetchError(ApiError):
    """Raised when the commit listing of a single repository fails."""


class SchedulerError(ChangeReportError):
    """Raised when the concurrent repository processing itself fails."""
