"""Request/response models for the gateway API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SynthesisRequest(BaseModel):
    """Text-to-speech request from the web UI."""

    text: str = ""
    model: str | None = Field(default=None, description="tts-1 (Kokoro) or tts-1-piper")
    voice: str | None = None


class TranscriptionResult(BaseModel):
    text: str


class InstallRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str = ""


class InstallResult(BaseModel):
    success: bool = True
    message: str = "Model installed successfully"
