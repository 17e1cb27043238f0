"""Configuration validation tests."""

from __future__ import annotations

import pytest

from speaches_ui.config import Settings


def test_settings_strip_trailing_slash_from_backend_url() -> None:
    settings = Settings(speaches_url="http://gpu-box:8000/ ")
    assert settings.speaches_url == "http://gpu-box:8000"


def test_settings_default_has_no_backend_timeout() -> None:
    assert Settings(speaches_timeout_s=None).speaches_timeout_s is None


@pytest.mark.parametrize("url", ["", "localhost:8000", "ftp://speaches"])
def test_settings_reject_bad_backend_url(url: str) -> None:
    with pytest.raises(ValueError, match="SPEACHES_URL"):
        Settings(speaches_url=url)


def test_settings_reject_non_positive_timeout() -> None:
    with pytest.raises(ValueError, match="SPEACHES_TIMEOUT_S must be > 0"):
        Settings(speaches_timeout_s=0.0)


def test_settings_reject_bad_port() -> None:
    with pytest.raises(ValueError, match="SERVER_PORT"):
        Settings(port=70000)


def test_settings_reject_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings(log_level="LOUD")
