"""Request translation and missing-model recovery for speaches.ai calls.

Both pipelines follow the same fixed sequence:

    attempt #1 -> [install trigger -> attempt #2] -> resolve

The bracketed step only runs when attempt #1 failed with the
missing-model signature for a family the backend can download on demand.
If it does not produce a success, the caller sees attempt #1's error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

import httpx

from speaches_ui.backend.base import (
    BackendError,
    BackendUnavailableError,
    InvalidInputError,
    MalformedBackendResponseError,
    SpeechBackend,
)
from speaches_ui.voices import (
    WHISPER_MODEL_ID,
    normalize_language,
    normalize_quality,
    resolve_speech_model,
)

log = logging.getLogger(__name__)

SPEECH_MEDIA_TYPE = "audio/mpeg"

_NOT_INSTALLED_MARKER = "is not installed locally"


def is_missing_model_signature(body: str | bytes) -> bool:
    """Return True if a backend error body reports a model missing on disk."""
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    if _NOT_INSTALLED_MARKER in text:
        return True
    return "Model" in text and "not found" in text


@dataclass(slots=True)
class BackendOutcome:
    """Result of a single backend attempt."""

    success: bool
    status_code: int
    body: bytes
    is_missing_model_error: bool
    response: httpx.Response | None = None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def to_error(self) -> BackendError:
        return BackendError(self.status_code, self.text)


class SpeechStream:
    """Pass-through copy of a successful /v1/audio/speech response."""

    media_type = SPEECH_MEDIA_TYPE

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Disposition": "inline"}

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as exc:
            log.warning("Audio stream from backend interrupted: %s", exc)
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Release the backend connection. Safe to call more than once."""
        await self._response.aclose()


async def _read_outcome(response: httpx.Response, *, keep_open: bool) -> BackendOutcome:
    """Classify a backend response; error bodies are always read and closed."""
    if response.status_code == 200 and keep_open:
        return BackendOutcome(
            success=True,
            status_code=200,
            body=b"",
            is_missing_model_error=False,
            response=response,
        )
    try:
        body = await response.aread()
    except httpx.HTTPError as exc:
        await response.aclose()
        raise BackendUnavailableError(f"failed reading backend response: {exc}") from exc
    await response.aclose()
    success = response.status_code == 200
    return BackendOutcome(
        success=success,
        status_code=response.status_code,
        body=body,
        is_missing_model_error=(not success and is_missing_model_signature(body)),
        response=response if success else None,
    )


class SpeechGateway:
    """Synthesis and transcription entry points over a ``SpeechBackend``."""

    def __init__(self, backend: SpeechBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> SpeechBackend:
        return self._backend

    async def synthesize(
        self,
        text: str,
        model: str | None = None,
        voice: str | None = None,
    ) -> SpeechStream:
        """Synthesize ``text`` and return a stream of the backend's audio.

        Raises:
            InvalidInputError: if ``text`` is empty or whitespace.
            BackendUnavailableError: if the backend cannot be reached.
            BackendError: if the backend rejects the request.
        """
        if not text or not text.strip():
            raise InvalidInputError("text cannot be empty")

        resolved = resolve_speech_model(model, voice)
        payload = {
            "model": resolved.model_id,
            "input": text,
            "voice": resolved.voice,
        }
        log.info(
            "Synthesizing %d chars with %s (voice=%s)",
            len(text),
            resolved.model_id,
            resolved.voice,
        )

        async def attempt() -> BackendOutcome:
            resp = await self._backend.open_speech(payload)
            return await _read_outcome(resp, keep_open=True)

        outcome = await self._call_with_install(
            attempt,
            model_id=resolved.model_id,
            auto_install=resolved.auto_installable,
        )
        assert outcome.response is not None
        return SpeechStream(outcome.response)

    async def transcribe(
        self,
        audio: bytes | None,
        filename: str | None,
        language: str | None = None,
        quality: str | None = None,
    ) -> str:
        """Transcribe a fully buffered audio upload and return its text.

        ``quality`` is validated but not forwarded; the backend always
        receives the fixed Whisper model id.
        """
        if not audio:
            raise InvalidInputError("audio file is required")

        lang = normalize_language(language)
        tier = normalize_quality(quality)
        name = filename or "audio"
        log.info(
            "Transcribing %d bytes from %s (language=%s, quality=%s)",
            len(audio),
            name,
            lang,
            tier,
        )

        async def attempt() -> BackendOutcome:
            resp = await self._backend.post_transcription(
                audio=audio,
                filename=name,
                language=lang,
                model=WHISPER_MODEL_ID,
            )
            return await _read_outcome(resp, keep_open=False)

        outcome = await self._call_with_install(
            attempt, model_id=WHISPER_MODEL_ID, auto_install=True
        )
        return _decode_transcript(outcome.body)

    async def _call_with_install(
        self,
        attempt: Callable[[], Awaitable[BackendOutcome]],
        *,
        model_id: str,
        auto_install: bool,
    ) -> BackendOutcome:
        first = await attempt()
        if first.success:
            return first

        if not (auto_install and first.is_missing_model_error):
            log.warning(
                "speaches returned %d for %s: %s",
                first.status_code,
                model_id,
                first.text[:200],
            )
            raise first.to_error()

        log.warning("Model %s not installed; requesting download", model_id)
        retried = await self._install_and_retry(attempt, model_id)
        if retried is not None:
            log.info("Retry after installing %s succeeded", model_id)
            return retried

        log.error("Retry after installing %s failed; returning original error", model_id)
        raise first.to_error()

    async def _install_and_retry(
        self,
        attempt: Callable[[], Awaitable[BackendOutcome]],
        model_id: str,
    ) -> BackendOutcome | None:
        try:
            install = await self._backend.install_model(model_id)
        except BackendUnavailableError:
            log.warning("Install request for %s could not reach speaches", model_id)
            return None
        # The install status is not inspected; the retry decides.
        log.debug("Install request for %s returned %d", model_id, install.status_code)

        try:
            second = await attempt()
        except BackendUnavailableError:
            log.warning("Retry for %s could not reach speaches", model_id)
            return None

        if not second.success:
            log.warning(
                "Retry for %s returned %d: %s",
                model_id,
                second.status_code,
                second.text[:200],
            )
            return None
        return second


def _decode_transcript(body: bytes) -> str:
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise MalformedBackendResponseError(
            "failed to decode transcription response"
        ) from exc
    text = data.get("text") if isinstance(data, dict) else None
    if not isinstance(text, str):
        raise MalformedBackendResponseError("transcription response has no text field")
    return text
