"""Exception handlers that turn domain and upstream errors into JSON responses.

Hey future me - routes just raise. ValidationException -> 422, auth -> 401,
missing configuration -> 503, Spotify failures (httpx.HTTPStatusError or a
transport error bubbling out of SpotifyClient) -> 502. Every error body
is {"detail": ...}. The fill endpoint never lands here: it returns its
FillResult even on failure.
"""

import logging
from typing import Any

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from spotmix.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DomainException,
    TokenRefreshException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Make pydantic error dicts JSON-safe (raw bodies come back as bytes)."""

    def _sanitize_value(value: Any) -> Any:
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, dict):
            return {k: _sanitize_value(v) for k, v in value.items()}
        if isinstance(value, list | tuple):
            return [_sanitize_value(item) for item in value]
        if isinstance(value, BaseException):
            return str(value)
        return value

    return [_sanitize_value(error) for error in errors]


def _error_response(
    request: Request, status_code: int, message: str, level: int = logging.WARNING
) -> JSONResponse:
    logger.log(
        level,
        "%d at %s: %s",
        status_code,
        request.url.path,
        message,
        extra={"path": request.url.path, "status_code": status_code, "error": message},
    )
    return JSONResponse(status_code=status_code, content={"detail": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain, validation and upstream errors.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = _sanitize_validation_errors(list(exc.errors()))
        logger.warning(
            "Request validation error at %s: %s",
            request.url.path,
            errors,
            extra={"path": request.url.path, "errors": errors},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return _error_response(request, status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(TokenRefreshException)
    async def token_refresh_error_handler(
        request: Request, exc: TokenRefreshException
    ) -> JSONResponse:
        return _error_response(request, status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        return _error_response(
            request, status.HTTP_503_SERVICE_UNAVAILABLE, exc.message, logging.ERROR
        )

    @app.exception_handler(httpx.HTTPStatusError)
    async def spotify_status_error_handler(
        request: Request, exc: httpx.HTTPStatusError
    ) -> JSONResponse:
        return _error_response(
            request,
            status.HTTP_502_BAD_GATEWAY,
            f"Spotify API error: {exc.response.status_code}",
            logging.ERROR,
        )

    @app.exception_handler(httpx.TransportError)
    async def spotify_transport_error_handler(
        request: Request, exc: httpx.TransportError
    ) -> JSONResponse:
        return _error_response(
            request,
            status.HTTP_502_BAD_GATEWAY,
            f"Spotify API unreachable: {type(exc).__name__}",
            logging.ERROR,
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        return _error_response(request, status.HTTP_400_BAD_REQUEST, exc.message)
