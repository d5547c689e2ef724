"""Protocol module for mcstat."""

from .commands import ProtocolError, StatSample, StatsCommand
from .parser import StatsParser

__all__ = [
    "ProtocolError",
    "StatSample",
    "StatsCommand",
    "StatsParser",
]
