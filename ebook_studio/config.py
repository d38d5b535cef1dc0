# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration.

    - Loads .env automatically (non-fatal if missing).
    - Tolerates legacy lowercase env keys via AliasChoices.
    """

    # Flask
    FLASK_HOST: str = "0.0.0.0"
    FLASK_PORT: int = 5000
    FLASK_DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ENABLE: bool = True
    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_CREDENTIALS: bool = False

    # Export
    DEFAULT_TEMPLATE_ID: str = "minimal-professional"
    PDF_PAGE_MARGIN_MM: float = Field(default=15.0, ge=0.0, le=50.0)
    PDF_IMAGE_TIMEOUT: float = Field(default=5.0, gt=0.0)
    EPUB_LANGUAGE: str = "en"
    EPUB_CREATOR: str = "Created with eBook Studio"

    # Text generation (Mistral, OpenAI-compatible endpoint)
    MISTRAL_API_KEY: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MISTRAL_API_KEY", "mistral_api_key")
    )
    MISTRAL_API_BASE: str = "https://api.mistral.ai/v1"
    MISTRAL_MODEL: str = "mistral-small-latest"
    MISTRAL_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    REQUEST_TIMEOUT: float = Field(default=120.0, gt=0.0)

    # Image generation (Stability AI)
    STABILITY_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STABILITY_API_KEY", "STABILITY_AI_API_KEY", "stability_api_key"),
    )
    STABILITY_API_URL: str = "https://api.stability.ai/v2beta/stable-image/generate/core"
    STABILITY_TIMEOUT: float = Field(default=120.0, gt=0.0)

    # Settings behavior
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Validators ----------------------------------------------------------

    @field_validator("DEFAULT_TEMPLATE_ID", "EPUB_LANGUAGE", "MISTRAL_MODEL")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("MISTRAL_API_BASE", "STABILITY_API_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")
