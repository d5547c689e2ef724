"""
mcstat Configuration Settings

This module contains the configuration defaults for the stats monitor.
Every value can be overridden from the environment or the command line.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Monitor configuration settings."""

    # Connection target
    HOST: str = os.environ.get("MCSTAT_HOST", "localhost")
    PORT: int = int(os.environ.get("MCSTAT_PORT", "11211"))

    # Polling schedule
    INTERVAL: float = float(os.environ.get("MCSTAT_INTERVAL", "60"))
    SAMPLES: int = int(os.environ.get("MCSTAT_SAMPLES", "5"))  # After the baseline

    # Connection settings
    CONNECT_TIMEOUT: float = float(os.environ.get("MCSTAT_CONNECT_TIMEOUT", "30"))
    READ_TIMEOUT: float = float(os.environ.get("MCSTAT_READ_TIMEOUT", "30"))  # 0 disables
    READ_LIMIT: int = 1024 * 1024  # Longest accepted response line, in bytes

    # Logging settings
    DEBUG: bool = os.environ.get("MCSTAT_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("MCSTAT_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
