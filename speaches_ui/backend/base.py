"""Backend abstraction and error taxonomy for the inference gateway."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class GatewayError(RuntimeError):
    """Base error for gateway failures surfaced to API callers."""

    kind = "gateway_error"


class InvalidInputError(GatewayError):
    """Raised when client input is rejected before any backend call."""

    kind = "invalid_input"


class BackendUnavailableError(GatewayError):
    """Raised when the inference server cannot be reached."""

    kind = "backend_unavailable"


class BackendError(GatewayError):
    """Raised when the inference server answers with a non-success status."""

    kind = "backend_error"

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"backend returned {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class MalformedBackendResponseError(GatewayError):
    """Raised when a success response from the backend cannot be decoded."""

    kind = "malformed_backend_response"


class SpeechBackend(ABC):
    """Async capability for the OpenAI-shaped speaches.ai endpoints.

    Every method raises ``BackendUnavailableError`` when the server cannot
    be reached and otherwise returns the raw response, whatever its status.
    """

    @property
    @abstractmethod
    def base_url(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def open_speech(self, payload: dict[str, str]) -> httpx.Response:
        """POST /v1/audio/speech with the body left unread.

        The caller owns the returned response and must ``aclose()`` it.
        """
        raise NotImplementedError

    @abstractmethod
    async def post_transcription(
        self,
        *,
        audio: bytes,
        filename: str,
        language: str,
        model: str,
    ) -> httpx.Response:
        raise NotImplementedError

    @abstractmethod
    async def install_model(self, model_id: str) -> httpx.Response:
        raise NotImplementedError

    @abstractmethod
    async def list_models(self) -> httpx.Response:
        raise NotImplementedError

    @abstractmethod
    async def list_registry(self) -> httpx.Response:
        raise NotImplementedError

    def debug_snapshot(self) -> dict:
        return {"base_url": self.base_url, "loaded": False}
