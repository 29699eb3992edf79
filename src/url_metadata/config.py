from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; UrlMetadataBot/1.0)"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    timeout_s: float = Field(default=10.0, gt=0, alias="URL_METADATA_TIMEOUT_S")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="URL_METADATA_USER_AGENT")
    max_body_bytes: int | None = Field(default=None, gt=0, alias="URL_METADATA_MAX_BODY_BYTES")

    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")


def load_settings() -> Settings:
    return Settings()
