"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Text-generation backend (OpenAI-compatible, Ollama by default)
    llm_base_url: str = "http://localhost:11434/v1"
    llm_api_key: str = "ollama"
    llm_model: str = "gemma3"

    # Bounded wait per backend call, in seconds
    question_timeout_seconds: float = 60.0
    cover_letter_timeout_seconds: float = 90.0

    # Question batch sizes
    questions_requested: int = 10
    questions_minimum: int = 5

    # Cover letter length bounds (characters)
    cover_letter_min_length: int = 100
    cover_letter_max_length: int = 5000

    # App
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    debug: bool = True

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
