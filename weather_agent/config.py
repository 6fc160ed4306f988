"""Application configuration pulled from environment variables via pydantic."""
import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather agent service."""
    model_config = SettingsConfigDict(env_prefix="WEATHER_AGENT_", extra="ignore")

    data_source: str = "open_meteo"  # options: open_meteo
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    http_timeout_seconds: float = 10.0
    default_forecast_days: int = Field(default=3, ge=1, le=7)
    api_key: str | None = None
    memory_redis_url: str | None = None
    memory_ttl_seconds: int = 3600
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    judge_model: str = "llama3.1"
    max_tool_rounds: int = 4
    max_user_message_chars: int = 4000
    ollama_options: dict = Field(
        default_factory=lambda: {
            "temperature": float(os.getenv("WEATHER_AGENT_OLLAMA_TEMPERATURE", 0.2)),
            "top_p": float(os.getenv("WEATHER_AGENT_OLLAMA_TOP_P", 0.9)),
        }
    )

    @field_validator("ollama_base_url", "geocoding_url", "forecast_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
