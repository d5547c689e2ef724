"""
Delta Report Module

Computes the hit/miss figures shown for each poll and formats them as
fixed-width table rows.
"""

import time
from dataclasses import dataclass

from ..protocol.commands import ProtocolError, StatSample

HEADER = "time      cnct        gets        hits        miss      hit%       miss%"
ROW_FORMAT = "%s  %4d  %10d  %10d  %10d  %8.2f  %8.2f"


def format_timestamp(sample: StatSample) -> str:
    """
    Convert the sample's ``time`` stat into local wall-clock ``HH:MM:SS``.

    Raises:
        ProtocolError: if ``time`` is missing, not an integer, or outside
            the platform's time range
    """
    timestamp = sample.get_int("time")
    try:
        local = time.localtime(timestamp)
    except (OverflowError, OSError, ValueError):
        raise ProtocolError(f"stat 'time' out of range: {timestamp}") from None
    return time.strftime("%H:%M:%S", local)


def _percent(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole > 0 else 0.0


@dataclass(frozen=True)
class DeltaReport:
    """
    One printed row of the stats table.

    Attributes:
        timestamp: ``HH:MM:SS`` of the sample
        connections: Current connections (always absolute)
        gets: cmd_get since the baseline (absolute on the baseline row)
        hits: get_hits since the baseline (absolute on the baseline row)
        misses: get_misses since the baseline (absolute on the baseline row)
    """
    timestamp: str
    connections: int
    gets: int
    hits: int
    misses: int

    @classmethod
    def from_samples(
            cls,
            baseline: StatSample,
            sample: StatSample,
            absolute: bool = False,
    ) -> "DeltaReport":
        """
        Build a report row for ``sample`` against ``baseline``.

        With ``absolute=True`` (the baseline row) the counters are reported
        as-is instead of as differences, so the first row shows the server's
        lifetime totals and ratios rather than zeros.

        Raises:
            ProtocolError: if a required counter is missing or not an integer
        """
        gets = sample.get_int("cmd_get")
        hits = sample.get_int("get_hits")
        misses = sample.get_int("get_misses")

        if not absolute:
            gets -= baseline.get_int("cmd_get")
            hits -= baseline.get_int("get_hits")
            misses -= baseline.get_int("get_misses")

        return cls(
            timestamp=format_timestamp(sample),
            connections=sample.get_int("curr_connections"),
            gets=gets,
            hits=hits,
            misses=misses,
        )

    @property
    def hit_rate(self) -> float:
        """Hits as a percentage of gets; 0 when there were no gets."""
        return _percent(self.hits, self.gets)

    @property
    def miss_rate(self) -> float:
        """Misses as a percentage of gets; 0 when there were no gets."""
        return _percent(self.misses, self.gets)

    def format_row(self) -> str:
        return ROW_FORMAT % (
            self.timestamp,
            self.connections,
            self.gets,
            self.hits,
            self.misses,
            self.hit_rate,
            self.miss_rate,
        )
