"""Centralised settings for intentbus, loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IntentBusSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INTENTBUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- general ---
    app_name: str = "intentbus"
    env: str = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # --- HTTP ---
    host: str = "0.0.0.0"
    port: int = 8080
    api_key: str = ""  # empty → every /intents request is rejected

    # --- definition sources ---
    data_dir: Path = Field(default_factory=lambda: Path.cwd() / "data")
    intent_file: Path | None = None  # default: <data_dir>/intent_mappings.json
    response_file: Path | None = None  # default: <data_dir>/response_mappings.json
    recompute_tokens: bool = False  # True → ignore tokens shipped in the intent file
    extra_aliases: dict[str, str] = Field(default_factory=dict)

    # --- dispatch tuning ---
    dispatch_poll_ms: int = Field(default=15, ge=1)
    default_priority: int = Field(default=5, ge=0, le=9)
    route_priority: int = Field(default=4, ge=0, le=9)

    # --- devices ---
    printer_queue: str = "zebra1"

    @property
    def intent_path(self) -> Path:
        return self.intent_file or self.data_dir / "intent_mappings.json"

    @property
    def response_path(self) -> Path:
        return self.response_file or self.data_dir / "response_mappings.json"


@lru_cache
def get_settings() -> IntentBusSettings:
    return IntentBusSettings()
