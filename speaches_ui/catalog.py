"""Installed-model and registry listings for the models API."""

from __future__ import annotations

import logging
from typing import Any, Final

import httpx

from speaches_ui.backend.base import BackendUnavailableError, SpeechBackend

log = logging.getLogger(__name__)

_STT_MARKERS: Final[tuple[str, ...]] = ("whisper", "speech", "transcription")

_DISPLAY_NAMES: Final[dict[str, str]] = {
    "tts-1": "Kokoro (Neural TTS)",
    "speaches-ai/piper-en_US-ryan-medium": "Piper - Ryan (TTS)",
    "speaches-ai/piper-en_US-ryan-high": "Piper - Ryan (TTS)",
    "speaches-ai/piper-en_US-ryan-low": "Piper - Ryan (TTS)",
    "whisper-1": "Whisper v1 (Speech to Text)",
}

# Served when the backend registry is unreachable or empty.
FALLBACK_REGISTRY: Final[tuple[dict[str, str], ...]] = (
    {
        "id": "tts-1",
        "name": "Kokoro (Neural TTS)",
        "description": "High-quality neural text-to-speech synthesis",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-ryan-high",
        "name": "Piper - Ryan (High Quality)",
        "description": "Fast, high-quality TTS with Ryan voice",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-ryan-medium",
        "name": "Piper - Ryan (Medium Quality)",
        "description": "Fast TTS with Ryan voice - balanced quality and speed",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-ryan-low",
        "name": "Piper - Ryan (Low Latency)",
        "description": "Fast TTS with Ryan voice - optimized for speed",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-amy-medium",
        "name": "Piper - Amy (Female Voice)",
        "description": "TTS with female voice - Amy variant",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-hfc_female-medium",
        "name": "Piper - HFC Female (Female Voice)",
        "description": "High-quality female voice TTS",
        "type": "tts",
    },
    {
        "id": "speaches-ai/piper-en_US-lessac-high",
        "name": "Piper - Lessac (High Quality)",
        "description": "High-quality male voice TTS",
        "type": "tts",
    },
    {
        "id": "whisper-1",
        "name": "Whisper v1 (Speech to Text)",
        "description": "OpenAI's Whisper model for accurate speech transcription",
        "type": "stt",
    },
)


def is_stt_model(model_id: str) -> bool:
    return any(marker in model_id for marker in _STT_MARKERS)


def format_model_name(model_id: str) -> str:
    """Human-readable name for a backend model id."""
    name = model_id[1:] if model_id.startswith("/") else model_id
    known = _DISPLAY_NAMES.get(name)
    if known is not None:
        return known
    words = name.replace("_", " ").replace("-", " ").split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def _data_entries(resp: httpx.Response) -> list[dict[str, Any]]:
    """Return the ``data`` list of an OpenAI-style listing, or [] if unusable."""
    if resp.status_code != 200:
        return []
    try:
        payload = resp.json()
    except ValueError:
        return []
    if not isinstance(payload, dict):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [
        item
        for item in data
        if isinstance(item, dict) and isinstance(item.get("id"), str)
    ]


async def list_installed(backend: SpeechBackend) -> dict[str, list[dict[str, Any]]]:
    """Installed models split into ``tts`` and ``stt`` lists.

    Raises:
        BackendUnavailableError: if the backend cannot be reached.
    """
    resp = await backend.list_models()
    tts: list[dict[str, Any]] = []
    stt: list[dict[str, Any]] = []
    for item in _data_entries(resp):
        model_id = item["id"]
        info = {
            "id": model_id,
            "name": format_model_name(model_id),
            "installed": True,
            "type": item.get("owned_by", ""),
        }
        (stt if is_stt_model(model_id) else tts).append(info)
    return {"tts": tts, "stt": stt}


async def list_registry(backend: SpeechBackend) -> dict[str, list[Any]]:
    """Registry models typed tts/stt plus the ids already installed.

    Never raises for backend failures; an unreachable registry yields the
    fallback catalog and an empty installed list.
    """
    installed: list[str] = []
    try:
        installed = sorted({item["id"] for item in _data_entries(await backend.list_models())})
    except BackendUnavailableError:
        log.warning("Could not list installed models for registry view")

    models: list[dict[str, str]] = []
    try:
        entries = _data_entries(await backend.list_registry())
    except BackendUnavailableError:
        log.warning("Could not fetch model registry from speaches")
        entries = []

    for item in entries:
        model_id = item["id"]
        model_type = item.get("type") or ("stt" if is_stt_model(model_id) else "tts")
        models.append(
            {
                "id": model_id,
                "name": item.get("name") or "",
                "description": item.get("description") or "",
                "type": model_type,
            }
        )

    if not models:
        log.info("Registry empty or unavailable; serving fallback catalog")
        models = [dict(entry) for entry in FALLBACK_REGISTRY]

    return {"models": models, "installed": installed}
