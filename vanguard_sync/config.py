"""Service settings read from ``VANGUARD_*`` environment variables."""
from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "VANGUARD_"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    log_level: str = "INFO"
    # Events buffered per connection before new ones are dropped
    outbound_queue_size: int = Field(default=256, ge=1)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from *environ* (defaults to ``os.environ``)."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls.model_validate(values)


__all__ = ["Settings", "ENV_PREFIX"]
