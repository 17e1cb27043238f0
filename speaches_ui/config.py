"""Gateway configuration with environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_optional_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(slots=True)
class Settings:
    """Gateway settings. Override any field via environment variable."""

    speaches_url: str = os.environ.get("SPEACHES_URL", "http://localhost:8000")
    # None leaves connection-level timeouts to the hosting server.
    speaches_timeout_s: float | None = _env_optional_float("SPEACHES_TIMEOUT_S")
    host: str = os.environ.get("SERVER_HOST", "0.0.0.0")
    port: int = int(os.environ.get("SERVER_PORT", "5420"))
    log_level: str = os.environ.get("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        self.speaches_url = self.speaches_url.strip().rstrip("/")
        self.log_level = self.log_level.strip().upper()
        if not self.speaches_url:
            raise ValueError("SPEACHES_URL must not be empty")
        if not self.speaches_url.startswith(("http://", "https://")):
            raise ValueError("SPEACHES_URL must start with http:// or https://")
        if self.speaches_timeout_s is not None and self.speaches_timeout_s <= 0.0:
            raise ValueError("SPEACHES_TIMEOUT_S must be > 0")
        if not (1 <= self.port <= 65535):
            raise ValueError("SERVER_PORT must be in [1, 65535]")
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(
                "LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )


settings = Settings()
