from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_title: str = "Riichi Hand Scoring API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    decompose_step_limit: int = 20000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
