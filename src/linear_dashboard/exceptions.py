"""Exception hierarchy for the Linear dashboard."""


class DashboardError(Exception):
    """Base exception for dashboard errors."""

    pass


class ConfigNotFoundError(DashboardError):
    """Configuration file not found."""

    pass


class InvalidConfigError(DashboardError):
    """Configuration is invalid."""

    pass


class LinearAuthError(DashboardError):
    """Linear (or the proxy in front of it) rejected the credentials."""

    pass


class LinearConnectionError(DashboardError):
    """Cannot connect to the Linear API or the proxy."""

    pass


class LinearRateLimitError(DashboardError):
    """Linear rate limit exceeded."""

    pass


class LinearApiError(DashboardError):
    """Linear answered, but not with usable GraphQL data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
