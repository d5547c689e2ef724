"""Configuration module for mcstat."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
