"""httpx-backed client for a speaches.ai inference server."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from speaches_ui.backend.base import BackendUnavailableError, SpeechBackend
from speaches_ui.config import settings

log = logging.getLogger(__name__)


class SpeachesClient(SpeechBackend):
    """Thin async wrapper around the speaches.ai OpenAI-compatible API."""

    def __init__(
        self,
        base_url: str = settings.speaches_url,
        timeout_s: float | None = settings.speaches_timeout_s,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_s)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def start(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def health_check(self) -> bool:
        """Return True if the speaches server answers /v1/models."""
        if self._client is None:
            return False
        try:
            resp = await self._client.get("/v1/models")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def open_speech(self, payload: dict[str, str]) -> httpx.Response:
        client = self._require_client()
        request = client.build_request("POST", "/v1/audio/speech", json=payload)
        try:
            return await client.send(request, stream=True)
        except httpx.TransportError as exc:
            log.error("speaches unreachable at %s: %s", self._base_url, exc)
            raise BackendUnavailableError("speaches_unreachable") from exc

    async def post_transcription(
        self,
        *,
        audio: bytes,
        filename: str,
        language: str,
        model: str,
    ) -> httpx.Response:
        # httpx encodes a fresh multipart body per call, so retries can
        # reuse the same buffered bytes.
        return await self._post(
            "/v1/audio/transcriptions",
            files={"file": (filename, audio)},
            data={"language": language, "model": model},
        )

    async def install_model(self, model_id: str) -> httpx.Response:
        return await self._post(f"/v1/models/{quote(model_id, safe='')}")

    async def list_models(self) -> httpx.Response:
        return await self._get("/v1/models")

    async def list_registry(self) -> httpx.Response:
        return await self._get("/v1/registry")

    def debug_snapshot(self) -> dict:
        return {
            "base_url": self._base_url,
            "loaded": self._client is not None,
        }

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise BackendUnavailableError("speaches client not started")
        return self._client

    async def _get(self, path: str) -> httpx.Response:
        client = self._require_client()
        try:
            return await client.get(path)
        except httpx.TransportError as exc:
            log.error("speaches unreachable at %s: %s", self._base_url, exc)
            raise BackendUnavailableError("speaches_unreachable") from exc

    async def _post(self, path: str, **kwargs) -> httpx.Response:
        client = self._require_client()
        try:
            return await client.post(path, **kwargs)
        except httpx.TransportError as exc:
            log.error("speaches unreachable at %s: %s", self._base_url, exc)
            raise BackendUnavailableError("speaches_unreachable") from exc
