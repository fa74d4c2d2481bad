"""
ScanShelf Backend: Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory and by services for their defaults.
When:  Loaded once at module import time; validated before the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for a single-user local deployment.
    Attributes are grouped by concern.
    """

    # ── Inventory Storage ─────────────────────────────────────────────────
    # What: The JSON file holding the whole inventory
    # Format: {"<code>": {"title": "...", "des": "..."}}
    data_file: str = Field(
        default="./data/scanData.json",
        description="Path of the JSON file that persists the inventory",
    )

    # What: Indentation used when writing the data file and exports
    # 0 writes compact JSON on a single line
    json_indent: int = Field(default=2, ge=0, le=8)

    # ── Import Uploads ────────────────────────────────────────────────────
    # What: Maximum accepted size of an imported inventory file in bytes
    # Default: 5MB = 5 * 1024 * 1024 = 5242880
    # Valid range: 1KB to 50MB
    max_import_size: int = Field(default=5_242_880, ge=1_024, le=52_428_800)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("data_file")
    @classmethod
    def validate_data_file(cls, v: str) -> str:
        """Rejects an empty data file path."""
        if not v.strip():
            raise ValueError("data_file must not be empty")
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_FILE and data_file both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
