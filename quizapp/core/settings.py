# quizapp/core/settings.py
from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "wellness-quiz"
    VERSION: str = "1.0.0"
    APP_ENV: str = "dev"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///quizapp.db"

    # admin routes (x-api-key)
    API_KEY: str = "change-me"

    LOG_LEVEL: str = "INFO"

    # CORS / deployment
    ALLOW_ALL_CORS: bool = False
    CORS_ORIGINS: List[str] = [
        "http://127.0.0.1:5173", "http://localhost:5173",
        "http://127.0.0.1:3000", "http://localhost:3000",
    ]
    ROOT_PATH: str = ""      # e.g. "/prod" behind API Gateway
    BUILD_TAG: str = "dev"


settings = Settings()
