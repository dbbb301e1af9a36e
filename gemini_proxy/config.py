from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, validator
from pydantic_settings import BaseSettings

from .secrets import get_secret_from_manager, should_use_secret_manager

logger = logging.getLogger("gemini-proxy.config")

API_KEY_ENV_VAR = "GEMINI_API_KEY"
FALLBACK_API_KEY_ENV_VAR = "GENERATIVE_API_KEY"


class Settings(BaseSettings):
    app_name: str = "gemini-proxy"

    # Read from GEMINI_API_KEY first, then GENERATIVE_API_KEY (no prefix).
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(API_KEY_ENV_VAR, FALLBACK_API_KEY_ENV_VAR),
        repr=False,
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    gemini_model: str = "gemini-2.5-flash-preview-09-2025"

    allowed_origin: str = Field(
        default="*",
        description="Value of Access-Control-Allow-Origin. Restrict to the calling site in production.",
    )
    request_timeout_seconds: float = Field(default=90, gt=0)
    log_level: str = "INFO"

    # Secret Manager configuration
    gcp_project_id: Optional[str] = None
    secret_api_key_name: str = "gemini-api-key"

    class Config:
        env_prefix = "GEMINI_PROXY_"
        env_file = ".env"
        env_ignore_empty = True
        populate_by_name = True

    @validator("gemini_api_key", pre=True, always=True)
    def _load_api_key(cls, value: object) -> Optional[str]:
        if value:
            return value
        if should_use_secret_manager():
            logger.info("Loading Gemini API key from Secret Manager")
            project_id = os.environ.get("GEMINI_PROXY_GCP_PROJECT_ID")
            secret_name = os.environ.get("GEMINI_PROXY_SECRET_API_KEY_NAME", "gemini-api-key")
            try:
                return get_secret_from_manager(secret_name, project_id)
            except Exception as e:
                logger.error(f"Failed to load Gemini API key from Secret Manager: {e}")
                raise
        return None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
