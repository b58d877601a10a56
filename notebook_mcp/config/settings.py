"""Centralized configuration management for the Notebook MCP system.

This module provides a single source of truth for serialization, preview,
kernel, logging and server settings. Values come from the environment or a
``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Centralized settings for the Notebook MCP system."""

    # === Notebook Serialization ===
    json_indent: int = Field(default=1, description="Indent used when writing notebook JSON")
    preview_length: int = Field(default=100, description="Characters shown per cell by list_cells")
    assign_cell_ids: bool = Field(
        default=True, description="Give new cells an id when the notebook format supports ids"
    )

    # === Execution Backend ===
    kernel_name: str = Field(default="python3", description="Fallback kernel spec name")
    kernel_startup_timeout: float = Field(default=30.0, description="Seconds to wait for a kernel to be ready")

    # === HTTP SSE Server Configuration ===
    sse_host: str = Field(default="localhost", description="SSE server host")
    sse_port: int = Field(default=3001, description="SSE server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str | None = Field(default=None, description="Directory for log files (package dir if unset)")
    structured_logging: bool = Field(default=True, description="Enable structured JSON error logging")

    # === Metrics ===
    enable_metrics: bool = Field(default=True, description="Enable metrics collection")

    # === Test Environment Detection ===
    pytest_current_test: str | None = Field(default=None, description="Test mode indicator")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTEBOOK_MCP_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("json_indent", "preview_length")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_test_environment(self) -> bool:
        """Check if running in test environment."""
        return "PYTEST_CURRENT_TEST" in os.environ or self.pytest_current_test is not None

    @property
    def log_path(self) -> Path:
        """Directory that receives the rotating log files."""
        if self.log_dir:
            path = Path(self.log_dir).expanduser().resolve()
        else:
            path = Path(__file__).resolve().parent.parent
        path.mkdir(parents=True, exist_ok=True)
        return path


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
