"""Report module for mcstat."""

from .delta import HEADER, DeltaReport, format_timestamp

__all__ = ["HEADER", "DeltaReport", "format_timestamp"]
