"""Runtime settings read from the environment (and an optional .env file)."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Plan Coach Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://coach@localhost:5432/plan_coach"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "plan-coach"
    feedback_window_weeks: int = 2
    conversation_state_ttl_seconds: int = 3600


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()


settings = get_settings()
