"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - data_dir holds calculations.json and users.json

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box locally
    - static_identities is a JSON object in the environment
      (STATIC_IDENTITIES='{"token": {"user_id": "u1"}}')
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    data_dir: str = "data"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # API
    cors_origins: list[str] = ["*"]
    max_payload_bytes: int = 1_048_576

    # Identifiers
    id_max_attempts: int = 10

    @field_validator("id_max_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("id_max_attempts must be >= 1")
        return v

    # Auth (development stand-in for the external identity provider)
    static_identities: dict[str, dict[str, str]] = {}

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
