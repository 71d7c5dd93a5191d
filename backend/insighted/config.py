"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    environment: str = "development"
    app_url: str = "http://localhost:5173"
    backend_port: int = 8000
    log_level: str = "INFO"

    # Storage — empty URL keeps the registry in process memory
    database_url: str = ""

    # Advisory client — Anthropic
    anthropic_api_key: str = ""
    advisory_model: str = "haiku"
    advisory_max_tokens: int = 1024
    advisory_timeout_seconds: float = 30.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
