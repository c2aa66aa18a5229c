from __future__ import annotations

import pytest
from pydantic import ValidationError

from vanguard_sync.config import Settings


def test_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.host == "0.0.0.0"
    assert settings.port == 3001
    assert settings.log_level == "INFO"
    assert settings.outbound_queue_size == 256
    assert settings.cors_origins == ["*"]


def test_values_from_environment() -> None:
    settings = Settings.from_env(
        {
            "VANGUARD_PORT": "8080",
            "VANGUARD_LOG_LEVEL": "debug",
            "VANGUARD_OUTBOUND_QUEUE_SIZE": "16",
            "VANGUARD_CORS_ORIGINS": "https://a.example, https://b.example",
            "UNRELATED": "x",
        }
    )
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.outbound_queue_size == 16
    assert settings.cors_origins == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize(
    "env",
    [
        {"VANGUARD_PORT": "not-a-port"},
        {"VANGUARD_PORT": "70000"},
        {"VANGUARD_LOG_LEVEL": "loud"},
        {"VANGUARD_OUTBOUND_QUEUE_SIZE": "0"},
    ],
)
def test_invalid_values_rejected(env) -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(env)
