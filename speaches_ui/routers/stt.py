"""POST /api/stt: speech-to-text through the speaches backend."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from speaches_ui.backend.base import GatewayError, InvalidInputError
from speaches_ui.gateway import SpeechGateway
from speaches_ui.routers.errors import error_response
from speaches_ui.schemas import TranscriptionResult

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/stt", response_model=TranscriptionResult)
async def transcribe_audio(
    request: Request,
    audio: UploadFile | None = File(default=None),
    language: str = Form(default="en"),
    model: str = Form(default="standard"),
) -> TranscriptionResult | JSONResponse:
    """Transcribe an uploaded recording.

    ``model`` is the quality tier selected in the UI (fast, standard,
    accurate).
    """
    if audio is None:
        return error_response(InvalidInputError("audio file is required"))

    gateway: SpeechGateway = request.app.state.gateway
    try:
        data = await audio.read()
        text = await gateway.transcribe(data, audio.filename, language, model)
    except GatewayError as exc:
        return error_response(exc)
    finally:
        await audio.close()

    return TranscriptionResult(text=text)
