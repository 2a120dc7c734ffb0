"""Configuration management for Alterevo.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the ALTEREVO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (ALTEREVO_* prefix)
2. .env file in the project root
3. Default values defined in AlterevoConfig

Example .env file:
    ALTEREVO_GEMINI_API_KEY=your-key
    ALTEREVO_DATA_DIR=data
    ALTEREVO_HISTORY_CAPACITY=20
    ALTEREVO_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The API lifespan reads it to build the workflow controller; tests construct
their own instances instead.

Usage Example
-------------
    from alterevo.core.config import config

    print(config.history_key)
    print(config.data_dir)
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

HISTORY_CAPACITY = 20
HISTORY_STORAGE_KEY = "alterevo-history"


class AlterevoConfig(BaseSettings):
    """Main configuration for Alterevo.

    Attributes
    ----------
    History Settings:
        data_dir : Path
            Directory holding the key-value store files
        history_key : str
            Storage key under which the serialized history is kept
        history_capacity : int
            Maximum number of creations kept in history

    Gateway Settings:
        gateway : str
            Name of the registered generation gateway to use
        gemini_api_key : str | None
            API key for the Gemini gateway
        image_model : str
            Model used to restyle the user image
        caption_model : str
            Model used to write the caption
        request_timeout_ms : int
            Per-request timeout handed to the gateway client

    Catalog:
        styles_file : Path | None
            Optional JSON style catalog replacing the packaged one

    Server Settings:
        server_host : str
            Server bind address
        server_port : int
            Server port (1024-65535)
        log_level : str
            Root logging level for the CLI entry point

    Examples
    --------
        >>> custom_config = AlterevoConfig(
        ...     data_dir="/tmp/alterevo",
        ...     history_capacity=5,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ALTEREVO_",
        case_sensitive=False,
    )

    # History
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the persisted key-value records",
    )
    history_key: str = Field(
        default=HISTORY_STORAGE_KEY,
        description="Storage key for the serialized creation history",
    )
    history_capacity: int = Field(
        default=HISTORY_CAPACITY,
        description="Maximum number of creations kept (oldest are evicted)",
        ge=1,
        le=100,
    )

    # Generation gateway
    gateway: str = Field(
        default="Gemini",
        description="Registered generation gateway name",
    )
    gemini_api_key: str | None = Field(
        default=None,
        description="API key for the Gemini generation gateway",
    )
    image_model: str = Field(
        default="gemini-2.5-flash-image-preview",
        description="Model used for the image transform",
    )
    caption_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used for caption generation",
    )
    request_timeout_ms: int = Field(
        default=120_000,
        description="Timeout for a single gateway request in milliseconds",
        ge=1_000,
    )

    # Style catalog
    styles_file: Path | None = Field(
        default=None,
        description="JSON style catalog overriding the packaged default",
    )

    # Server
    server_host: str = Field(
        default="127.0.0.1",
        description="Server bind address",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level used by the CLI entry point",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the data directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
config = AlterevoConfig()
