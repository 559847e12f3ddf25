from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    DOCPORTAL_ENV: str = "development"
    DOCPORTAL_MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    DOCPORTAL_ACCEPTED_CONTENT_TYPE: str = "application/pdf"
    DOCPORTAL_UPLOAD_PREFIX: str = "uploads"
    DOCPORTAL_BUILD_VERSION: Optional[str] = None
    WEB_ORIGIN: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _validate_limits(self) -> "Settings":
        if self.DOCPORTAL_MAX_UPLOAD_BYTES <= 0:
            raise ValueError("DOCPORTAL_MAX_UPLOAD_BYTES must be positive")
        if not self.DOCPORTAL_UPLOAD_PREFIX.strip("/"):
            raise ValueError("DOCPORTAL_UPLOAD_PREFIX cannot be empty")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
