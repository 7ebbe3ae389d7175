"""Centralized installer settings using pydantic-settings.

This module provides a single source of truth for configuration loaded from
environment variables. The Azure credential defaults read here are handed to
the options model explicitly; nothing else in the package reads the process
environment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Installer configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Azure credential defaults
    azure_client_secret: str = Field(
        default="",
        description="Default for --azure.client-secret",
        validation_alias="AZURE_CLIENT_SECRET",
    )
    azure_client_assertion: str = Field(
        default="",
        description="Default for --azure.client-assertion",
        validation_alias="AZURE_CLIENT_ASSERTION",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=False,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
