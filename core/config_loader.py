from __future__ import annotations
import json
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./agency.db"
    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = []

    # edit locks
    LOCK_TTL_SECONDS: int = 300
    LOCK_RENEW_SECONDS: int = 120

    AUTOSAVE_DEBOUNCE_SECONDS: float = 0.8
    LOG_LEVEL: str = "INFO"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, str):
            return json.loads(v)
        return v


settings = Settings()
