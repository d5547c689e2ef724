"""
Protocol Command and Sample Definitions

This module defines the data structures exchanged with the stats service:
the commands the monitor sends and the immutable sample built from a
``stats`` response.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator


class ProtocolError(Exception):
    """Raised when a stats response is malformed or ends prematurely."""


class StatsCommand(Enum):
    """Commands sent to the stats service, with their wire form."""
    STATS = "stats"
    QUIT = "quit"

    @property
    def wire(self) -> bytes:
        """The CRLF-terminated bytes written to the socket."""
        return f"{self.value}\r\n".encode()


@dataclass(frozen=True, eq=False)
class StatSample(Mapping):
    """
    One poll's worth of counters.

    Maps stat name to its raw text value exactly as the server reported it.
    The underlying mapping is read-only once the sample is built.

    Attributes:
        stats: Stat name -> stat value (text)
    """
    stats: Mapping = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "stats", MappingProxyType(dict(self.stats)))

    def __getitem__(self, name: str) -> str:
        return self.stats[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.stats)

    def __len__(self) -> int:
        return len(self.stats)

    def __repr__(self) -> str:
        return f"StatSample({dict(self.stats)!r})"

    def get_int(self, name: str) -> int:
        """
        Read a counter as an integer.

        Raises:
            ProtocolError: if the stat is absent or not an integer
        """
        if name not in self.stats:
            raise ProtocolError(f"missing stat '{name}'")
        try:
            return int(self.stats[name])
        except ValueError:
            raise ProtocolError(
                f"stat '{name}' is not an integer: {self.stats[name]!r}"
            ) from None
