"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from the environment and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./library.db"

    # Response cache
    cache_enabled: bool = True
    cache_ttl_seconds: int = 60

    # Pagination defaults
    default_page: int = 1
    default_limit: int = 3

    # Version used when the Accept header carries none
    default_api_version: str = "1.0"

    # Bearer token -> granted roles, e.g. API_TOKENS='{"s3cret": ["ROLE_ADMIN"]}'
    api_tokens: dict[str, list[str]] = {}

    # OpenTelemetry
    otel_enabled: bool = False
    otel_service_name: str = "library-api"
    otel_exporter_otlp_endpoint: str = "http://localhost:4318/v1/traces"
    otel_exporter_otlp_protocol: str = "http/protobuf"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
