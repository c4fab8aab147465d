"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from campusforms.core.types import StalePolicy


class GatewayConfig(BaseSettings):
    """Backend submission gateway configuration."""

    model_config = {"env_prefix": "CAMPUSFORMS_GATEWAY_"}

    base_url: str = "http://localhost:6000"
    timeout_seconds: float = 10.0


class FormsConfig(BaseSettings):
    """Form definitions and the choice sets they draw on."""

    model_config = {"env_prefix": "CAMPUSFORMS_FORMS_"}

    definitions_dir: str | None = None
    departments: list[str] = Field(
        default_factory=lambda: [
            "CSE", "IT", "ECE", "EEE", "EIE", "MECH", "CIVIL", "AE", "CSBS", "AIML", "DS",
        ]
    )
    stale_policy: StalePolicy = StalePolicy.RETAIN


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "CAMPUSFORMS_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    forms: FormsConfig = Field(default_factory=FormsConfig)
