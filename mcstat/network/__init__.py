"""Network module for mcstat."""

from .stats_client import StatsClient, StatsConnectionError

__all__ = ["StatsClient", "StatsConnectionError"]
