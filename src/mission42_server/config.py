from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the Mission42 chat server."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Inference provider
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")
    model_base_url: str | None = Field(default=None, alias="MODEL_BASE_URL")
    max_output_tokens: int = Field(default=512, alias="MAX_OUTPUT_TOKENS")
    model_timeout_seconds: float = Field(default=60.0, alias="MODEL_TIMEOUT_SECONDS")

    # Constellation creation API
    constellation_api_url: str = Field(
        default="http://localhost:8000/api/constellations", alias="CONSTELLATION_API_URL"
    )
    creation_timeout_seconds: float = Field(default=30.0, alias="CREATION_TIMEOUT_SECONDS")
    # "per_plane" sends altitudesPerPlane as an array, "single" as one number
    altitude_payload: Literal["per_plane", "single"] = Field(
        default="per_plane", alias="ALTITUDE_PAYLOAD"
    )

    # How the resolver recovers parameters from the model output
    extraction_strategy: Literal["structured", "pattern"] = Field(
        default="structured", alias="EXTRACTION_STRATEGY"
    )
    readiness_window: int = Field(default=6, alias="READINESS_WINDOW")

    # Optional full override of the composed system prompt
    system_prompt: str | None = Field(default=None, alias="SYSTEM_PROMPT")

    # FastAPI configuration
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    debug: bool = Field(default=False, alias="DEBUG")
    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings so multiple imports share a single instance."""

    return Settings()  # type: ignore[arg-type]
