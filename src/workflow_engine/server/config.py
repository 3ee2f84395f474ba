"""Configuration for the REST server.

Loaded from environment variables and a local `.env` file (if present).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_engine.engine.service import DEFAULT_MAX_TRANSITION_RETRIES


class ServerSettings(BaseSettings):
    """Settings for the workflow REST API.

    Environment variables:
    - LOG_LEVEL                                (optional)
    - WORKFLOW_ENGINE_HOST                     (optional)
    - WORKFLOW_ENGINE_PORT                     (optional)
    - WORKFLOW_ENGINE_MAX_TRANSITION_RETRIES   (optional)
    - WORKFLOW_ENGINE_CORS_ORIGINS             (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ServerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    host: str = Field(default="127.0.0.1", validation_alias="WORKFLOW_ENGINE_HOST")
    port: int = Field(default=8000, validation_alias="WORKFLOW_ENGINE_PORT", ge=1, le=65535)

    max_transition_retries: int = Field(
        default=DEFAULT_MAX_TRANSITION_RETRIES,
        validation_alias="WORKFLOW_ENGINE_MAX_TRANSITION_RETRIES",
        description=(
            "How many read/compute/swap cycles an action execution may attempt when the "
            "same instance is being advanced concurrently."
        ),
        ge=1,
        le=1000,
    )

    cors_origins: str = Field(
        default="",
        validation_alias="WORKFLOW_ENGINE_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins (empty disables CORS).",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
