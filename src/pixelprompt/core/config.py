"""Configuration management for PixelPrompt.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PIXELPROMPT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PIXELPROMPT_* prefix)
2. .env file in the project root
3. Default values defined in PixelPromptConfig

Example .env file:
    PIXELPROMPT_ENDPOINT_URL=https://oi-server.onrender.com/chat/completions
    PIXELPROMPT_MODEL_ID=replicate/black-forest-labs/flux-1.1-pro
    PIXELPROMPT_API_KEY=sk-...
    PIXELPROMPT_REQUEST_TIMEOUT=120

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from pixelprompt.core.config import config

    print(config.model_id)
    print(config.history_path)
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class PixelPromptConfig(BaseSettings):
    """Main configuration for PixelPrompt.

    Values are loaded from environment variables with the PIXELPROMPT_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Remote Model Settings:
        endpoint_url : str
            Chat-completions style endpoint of the hosted image model
        model_id : str
            Model identifier sent in every outbound request body
        api_key : str | None
            Bearer token for the endpoint (header omitted when unset)
        customer_id : str | None
            Value of the ``CustomerId`` header (omitted when unset)
        request_timeout : float
            Outbound request timeout in seconds, 0 disables the timeout

    History Settings:
        history_limit : int
            Maximum number of persisted history entries (oldest evicted first)
        data_dir : Path
            Directory holding the history file
        history_file : str
            History file name inside data_dir

    Server Settings:
        templates_dir : Path
            Directory containing index.html
        server_host : str
            Server bind address
        server_port : int
            Server port (1024-65535)
        log_level : str
            Root logging level used by the CLI entry point

    Notes
    -----
    - data_dir is created automatically if it doesn't exist
    - To modify config, set environment variables and restart the application
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PIXELPROMPT_",
        case_sensitive=False,
    )

    # Remote model settings
    endpoint_url: str = Field(
        default="https://oi-server.onrender.com/chat/completions",
        description="Chat-completions endpoint of the hosted image model",
    )
    model_id: str = Field(
        default="replicate/black-forest-labs/flux-1.1-pro",
        description="Model identifier sent in the outbound request body",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer token for the hosted model endpoint",
    )
    customer_id: str | None = Field(
        default=None,
        description="CustomerId header value expected by the endpoint",
    )
    request_timeout: float = Field(
        default=120.0,
        description="Outbound request timeout in seconds (0 disables the timeout)",
        ge=0.0,
    )

    # History settings
    history_limit: int = Field(
        default=50,
        description="Maximum number of persisted history entries",
        ge=1,
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the persisted history",
    )
    history_file: str = Field(
        default="history.json",
        description="History file name inside data_dir",
    )

    # Server settings
    templates_dir: Path = Field(
        default=_PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the CLI entry point",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the data directory."""
        super().__init__(**kwargs)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def history_path(self) -> Path:
        """Absolute location of the persisted history file."""
        return self.data_dir / self.history_file

    @property
    def timeout_seconds(self) -> float | None:
        """Timeout to hand to httpx, ``None`` when disabled."""
        return self.request_timeout or None


# Global configuration instance
# Loads values from environment variables (PIXELPROMPT_* prefix) and .env file.
config = PixelPromptConfig()
