"""Factory for the configured inference backend."""

from __future__ import annotations

from speaches_ui.backend.base import SpeechBackend
from speaches_ui.backend.speaches import SpeachesClient
from speaches_ui.config import settings


def create_backend() -> SpeechBackend:
    return SpeachesClient(
        base_url=settings.speaches_url,
        timeout_s=settings.speaches_timeout_s,
    )
