"""Inference backend package exports."""

from speaches_ui.backend.base import (
    BackendError,
    BackendUnavailableError,
    GatewayError,
    InvalidInputError,
    MalformedBackendResponseError,
    SpeechBackend,
)
from speaches_ui.backend.factory import create_backend

__all__ = [
    "SpeechBackend",
    "GatewayError",
    "InvalidInputError",
    "BackendUnavailableError",
    "BackendError",
    "MalformedBackendResponseError",
    "create_backend",
]
