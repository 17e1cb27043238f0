"""POST /api/tts: text-to-speech through the speaches backend."""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from speaches_ui.backend.base import GatewayError
from speaches_ui.gateway import SpeechGateway
from speaches_ui.routers.errors import error_response
from speaches_ui.schemas import SynthesisRequest

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/tts", response_model=None)
async def synthesize_speech(
    req: SynthesisRequest, request: Request
) -> StreamingResponse | JSONResponse:
    """Stream synthesized audio back to the browser.

    A missing Piper voice is downloaded and the request replayed once
    before an error is returned.
    """
    gateway: SpeechGateway = request.app.state.gateway
    try:
        speech = await gateway.synthesize(req.text, req.model, req.voice)
    except GatewayError as exc:
        return error_response(exc)

    async def audio_stream() -> AsyncGenerator[bytes, None]:
        sent = 0
        completed = False
        try:
            async with aclosing(speech.iter_bytes()) as chunks:
                async for chunk in chunks:
                    sent += len(chunk)
                    yield chunk
            completed = True
        finally:
            if not completed:
                log.info("Client stopped reading audio after %d bytes", sent)
            await speech.aclose()

    # Closes the backend response even when the body is never iterated.
    return StreamingResponse(
        audio_stream(),
        media_type=speech.media_type,
        headers=speech.headers,
        background=BackgroundTask(speech.aclose),
    )
