"""
Protocol Parser Module

This module handles parsing of ``stats`` responses and formatting of
requests for the memcached text protocol.
"""

from typing import Iterable, Optional, Tuple

from .commands import ProtocolError, StatSample, StatsCommand

TERMINATOR = "END"
STAT_MARKER = "STAT"


class StatsParser:
    """
    Parser for the memcached ``stats`` exchange.

    Protocol Format:
        Request:  stats\\r\\n
        Response: STAT <key> <value>\\r\\n   (zero or more)
                  END\\r\\n

    Constraints:
        - Every line before the terminator has exactly three fields
        - The terminator is matched as a line prefix, so ``END `` counts
    """

    def format_command(self, command: StatsCommand) -> bytes:
        """
        Format a command for sending over the wire.

        Examples:
            >>> StatsParser().format_command(StatsCommand.STATS)
            b'stats\\r\\n'
        """
        return command.wire

    def is_terminator(self, line: str) -> bool:
        """Check whether a response line ends the stats block."""
        return line.startswith(TERMINATOR)

    def parse_line(self, line: str) -> Optional[Tuple[str, str]]:
        """
        Parse a single response line.

        Args:
            line: Raw line (trailing CRLF optional)

        Returns:
            (key, value) for a stat line, None for the terminator.

        Raises:
            ProtocolError: if the line does not split into exactly three fields

        Examples:
            >>> StatsParser().parse_line("STAT cmd_get 10\\r\\n")
            ('cmd_get', '10')
            >>> StatsParser().parse_line("END\\r\\n") is None
            True
        """
        if self.is_terminator(line):
            return None

        parts = line.split()
        if len(parts) != 3:
            raise ProtocolError(
                f"expected 'STAT <key> <value>', got {line.rstrip()!r}"
            )

        _, key, value = parts
        return key, value

    def parse_response(self, lines: Iterable[str]) -> StatSample:
        """
        Build a sample from a sequence of response lines.

        Lines after the terminator are ignored.

        Raises:
            ProtocolError: if a line is malformed or the terminator is missing
        """
        data = {}
        for line in lines:
            parsed = self.parse_line(line)
            if parsed is None:
                return StatSample(data)
            key, value = parsed
            data[key] = value

        raise ProtocolError("stats response ended before END")
