"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so handlers can read it without parsing
    # str(exception). Don't raise this directly - use a specific subclass so callers can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(DomainException):
    """Raised when input data fails validation rules.

    Example: a negative track count in a fill request, an empty playlist name.

    HTTP Status: 422
    """

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when required configuration is missing or invalid.

    HTTP Status: 503 (Service Unavailable)

    Example:
        raise ConfigurationError("SPOTIFY_CLIENT_ID is not configured")
    """

    pass


class AuthenticationError(DomainException):
    """User is not authenticated or token expired.

    HTTP Status: 401

    Example:
        raise AuthenticationError("Not authenticated")
        raise AuthenticationError("Token expired")
    """

    pass


class TokenRefreshException(DomainException):
    """Raised when token refresh fails and re-authentication is required.

    Hey future me - Spotify rejects a refresh token when the user revoked app access
    or the app credentials changed. The session is useless after this, the user
    has to go through /auth/login again. The scheduled job just logs and exits.
    """

    def __init__(
        self,
        message: str = "Token refresh failed. Please re-authenticate with Spotify.",
        error_code: str | None = None,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code  # e.g., "invalid_grant"
        self.http_status = http_status  # e.g., 400, 401

    @property
    def requires_reauth(self) -> bool:
        """Check if error requires user re-authentication."""
        return self.error_code == "invalid_grant" or self.http_status in (400, 401, 403)


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DomainException",
    "TokenRefreshException",
    "ValidationException",
]
