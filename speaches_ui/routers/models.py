"""Model listing and installation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from speaches_ui import catalog
from speaches_ui.backend.base import (
    BackendError,
    BackendUnavailableError,
    InvalidInputError,
)
from speaches_ui.gateway import SpeechGateway
from speaches_ui.routers.errors import error_response
from speaches_ui.schemas import InstallRequest, InstallResult

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/models")
async def installed_models(request: Request) -> JSONResponse:
    """Installed models grouped into ``tts`` and ``stt``."""
    gateway: SpeechGateway = request.app.state.gateway
    try:
        grouped = await catalog.list_installed(gateway.backend)
    except BackendUnavailableError as exc:
        return error_response(exc, tts=[], stt=[])
    return JSONResponse(grouped)


@router.get("/api/models/registry")
async def registry_models(request: Request) -> JSONResponse:
    gateway: SpeechGateway = request.app.state.gateway
    return JSONResponse(await catalog.list_registry(gateway.backend))


@router.post("/api/models/install", response_model=InstallResult)
async def install_model(
    req: InstallRequest, request: Request
) -> InstallResult | JSONResponse:
    """Ask the backend to download a model and wait for its answer."""
    if not req.model_id.strip():
        return error_response(InvalidInputError("model_id is required"))

    gateway: SpeechGateway = request.app.state.gateway
    log.info("Installing model %s", req.model_id)
    try:
        resp = await gateway.backend.install_model(req.model_id)
    except BackendUnavailableError as exc:
        return error_response(exc)

    if resp.status_code not in (200, 201):
        log.warning(
            "Install of %s failed with %d: %s",
            req.model_id,
            resp.status_code,
            resp.text[:200],
        )
        return error_response(
            BackendError(resp.status_code, f"Failed to install model: {resp.text}")
        )

    log.info("Model %s installed", req.model_id)
    return InstallResult()
