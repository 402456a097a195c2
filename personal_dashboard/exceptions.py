"""Custom exceptions for the personal dashboard."""

import enum


class FetchErrorKind(str, enum.Enum):
    """Why a remote fetch did not produce data."""

    NETWORK = "network"
    DECODE = "decode"
    UNAUTHORIZED = "unauthorized"
    UNKNOWN = "unknown"
    # Missing credentials; logged, never raised
    SKIPPED = "skipped"


class DashboardError(Exception):
    """Base exception for dashboard errors."""

    pass


class FetchError(DashboardError):
    """Raised when a remote fetch fails."""

    kind = FetchErrorKind.UNKNOWN

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(FetchError):
    """Raised on transport failures and timeouts."""

    kind = FetchErrorKind.NETWORK


class DecodeError(FetchError):
    """Raised when a response body has an unexpected shape."""

    kind = FetchErrorKind.DECODE


class UnauthorizedError(FetchError):
    """Raised when GitHub rejects the configured token."""

    kind = FetchErrorKind.UNAUTHORIZED


class LauncherValidationError(DashboardError, ValueError):
    """Raised when an app launcher entry is invalid."""

    pass
