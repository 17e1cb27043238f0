"""Mapping of gateway errors to JSON responses."""

from __future__ import annotations

import logging

from fastapi.responses import JSONResponse

from speaches_ui.backend.base import (
    BackendError,
    BackendUnavailableError,
    GatewayError,
    InvalidInputError,
    MalformedBackendResponseError,
)

log = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "speaches.ai server is not available"


def error_response(exc: GatewayError, **extra: object) -> JSONResponse:
    if isinstance(exc, InvalidInputError):
        return JSONResponse(
            {"error": exc.kind, "detail": str(exc), **extra}, status_code=400
        )
    if isinstance(exc, BackendUnavailableError):
        log.error("Cannot reach speaches backend: %s", exc)
        return JSONResponse(
            {"error": exc.kind, "detail": UNAVAILABLE_DETAIL, **extra},
            status_code=503,
        )
    if isinstance(exc, BackendError):
        return JSONResponse(
            {"error": exc.kind, "detail": exc.body, **extra},
            status_code=exc.status_code,
        )
    if isinstance(exc, MalformedBackendResponseError):
        log.error("Malformed backend response: %s", exc)
        return JSONResponse(
            {"error": exc.kind, "detail": str(exc), **extra}, status_code=500
        )
    log.error("Gateway error: %s", exc)
    return JSONResponse({"error": exc.kind, "detail": str(exc), **extra}, status_code=502)
