"""Pydantic Settings: loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    fetch_timeout_seconds: float = 5.0
    fetch_max_redirects: int = 5
    user_agent: str = "ai-readiness-diagnostics/0.1.0"

    max_pages: int = 10
    max_concurrent_pages: int = 4
    critical_weight_threshold: float = 2.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
