from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the guide server.

    Values are loaded from environment variables (and ``.env``) by default and
    may be overridden via CLI flags by the application entrypoint.
    """

    # Upstream backend selection
    backend: Literal["openai", "azure"] = "openai"

    # OpenAI
    # Allowed empty so the CLI and tests run without a key; the transport
    # only needs it when actually contacting the API.
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-realtime-preview"
    openai_realtime_url: str = "wss://api.openai.com/v1/realtime"

    # Azure OpenAI
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str | None = None
    azure_openai_api_version: str = "2024-10-01-preview"
    azure_openai_deployment: str = "gpt-4o-realtime-preview"

    # Conversation
    transcribe_model: str = "whisper-1"
    voice_name: str = "verse"

    # Data
    sculpture_data_path: Path = Path("data/sculptures.json")
    prompts_path: Path | None = None

    # Server
    host: str = "0.0.0.0"
    port: PositiveInt = 8080

    # Logging
    log_level: str = "DEBUG"
    log_format: Literal["plain", "json"] = "plain"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
