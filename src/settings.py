#!/usr/bin/env python3
"""
Settings module for the Clicksign client and MCP tool server.
Handles environment variable loading.
"""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


class Settings:
    """Configuration settings loaded from environment variables."""

    # Clicksign Configuration
    CLICKSIGN_TOKEN: Optional[str] = os.getenv("CLICKSIGN_TOKEN")
    CLICKSIGN_BASE_URL: str = os.getenv("CLICKSIGN_BASE_URL", "https://api.clicksign.com")
    CLICKSIGN_API_VERSION: str = os.getenv("CLICKSIGN_API_VERSION", "v1")
    CLICKSIGN_TIMEOUT: Optional[float] = _env_float("CLICKSIGN_TIMEOUT")
    CLICKSIGN_MAX_WORKERS: int = int(os.getenv("CLICKSIGN_MAX_WORKERS", "4"))
    CLICKSIGN_RAISE_FOR_STATUS: bool = _env_flag("CLICKSIGN_RAISE_FOR_STATUS")

    # Server Configuration
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate_clicksign_config(cls) -> bool:
        """Check that the Clicksign access token is set."""
        return cls.CLICKSIGN_TOKEN is not None and cls.CLICKSIGN_TOKEN.strip() != ""

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def get_clicksign_config(cls) -> dict:
        """
        Get Clicksign configuration as a dictionary.

        A missing token is passed through as None; the API rejects the
        unauthenticated calls that follow.
        """
        return {
            "access_token": cls.CLICKSIGN_TOKEN,
            "base_url": cls.CLICKSIGN_BASE_URL,
            "api_version": cls.CLICKSIGN_API_VERSION,
            "timeout": cls.CLICKSIGN_TIMEOUT,
            "max_workers": cls.CLICKSIGN_MAX_WORKERS,
            "raise_for_status": cls.CLICKSIGN_RAISE_FOR_STATUS,
        }

# Global settings instance
settings = Settings()
