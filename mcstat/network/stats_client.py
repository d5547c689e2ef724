"""
Stats Client Module

This module owns the TCP connection to the stats service.

Key asyncio concepts used:
- asyncio.open_connection(): Open the stream pair
- StreamReader.readuntil(): Read one CRLF-terminated line, no fixed cap
- StreamWriter.write() / drain(): Send a request
- Connection cleanup with writer.close() / wait_closed()
"""

import asyncio
import errno
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..config.settings import settings
from ..protocol.commands import ProtocolError, StatSample, StatsCommand
from ..protocol.parser import StatsParser

logger = logging.getLogger(__name__)

LINE_DELIMITER = b"\r\n"


class StatsConnectionError(ConnectionError):
    """
    Raised when the connection to the stats service cannot be opened.

    Carries the platform error number and message of the underlying failure.
    """

    def __init__(self, code: int, message: str):
        super().__init__(code, message)

    def __str__(self) -> str:
        return f"{self.strerror} ({self.errno})"


class StatsClient:
    """
    A single open connection to a memcached-compatible stats service.

    The client is created by ``connect()`` and used by exactly one poller.
    ``close()`` is idempotent, so the connection is released once no matter
    how many cleanup paths reach it.

    Usage:
        client = await StatsClient.connect('localhost', 11211)
        try:
            sample = await client.fetch_stats()
        finally:
            await client.quit()

    Attributes:
        host: Service host
        port: Service port
        read_timeout: Seconds allowed per response line (0 = wait forever)
    """

    def __init__(
            self,
            reader: StreamReader,
            writer: StreamWriter,
            host: str,
            port: int,
            read_timeout: float = None,
    ):
        self.reader = reader
        self.writer = writer
        self.host = host
        self.port = port
        self.read_timeout = read_timeout if read_timeout is not None else settings.READ_TIMEOUT
        self.parser = StatsParser()
        self._closed = False

    @classmethod
    async def connect(
            cls,
            host: str = None,
            port: int = None,
            timeout: float = None,
            read_timeout: float = None,
            limit: int = None,
    ) -> "StatsClient":
        """
        Open a stream connection to the stats service.

        Args:
            host: Service host (default from settings)
            port: Service port (default from settings)
            timeout: Seconds allowed to establish the connection
            read_timeout: Seconds allowed per response line
            limit: Longest accepted response line in bytes

        Returns:
            A connected StatsClient

        Raises:
            StatsConnectionError: if the connection cannot be established
        """
        host = host if host is not None else settings.HOST
        port = port if port is not None else settings.PORT
        timeout = timeout if timeout is not None else settings.CONNECT_TIMEOUT
        limit = limit if limit is not None else settings.READ_LIMIT

        logger.debug(f"Connecting to {host}:{port} (timeout {timeout}s)")
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port, limit=limit),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            raise StatsConnectionError(
                errno.ETIMEDOUT, "Connection timed out"
            ) from None
        except OSError as e:
            raise StatsConnectionError(e.errno or 0, e.strerror or str(e)) from e

        logger.debug(f"Connected to {host}:{port}")
        return cls(reader, writer, host, port, read_timeout=read_timeout)

    async def fetch_stats(self) -> StatSample:
        """
        Request and read one ``stats`` response.

        Returns:
            The parsed StatSample

        Raises:
            ProtocolError: on a malformed line, an oversized line, a read
                timeout, or if the server closes before ``END``
        """
        await self._send(StatsCommand.STATS)

        # Drain the whole response so the stream stays in step
        lines = []
        while True:
            line = await self._read_line()
            lines.append(line)
            if self.parser.is_terminator(line):
                break

        sample = self.parser.parse_response(lines)
        logger.debug(f"Received {len(sample)} stats from {self.host}:{self.port}")
        return sample

    async def quit(self) -> None:
        """Send ``quit`` and close the connection."""
        if self._closed:
            return
        try:
            await self._send(StatsCommand.QUIT)
        except ConnectionError as e:
            logger.debug(f"Could not send quit to {self.host}:{self.port}: {e}")
        await self.close()

    async def close(self) -> None:
        """Close the connection. Later calls do nothing."""
        if self._closed:
            return
        self._closed = True

        self.writer.close()
        try:
            await self.writer.wait_closed()
        except ConnectionError as e:
            logger.debug(f"Error while closing {self.host}:{self.port}: {e}")
        logger.debug(f"Connection to {self.host}:{self.port} closed")

    @property
    def is_closed(self) -> bool:
        """Check if the connection has been closed."""
        return self._closed

    async def _send(self, command: StatsCommand) -> None:
        logger.debug(f"Sending {command.value!r} to {self.host}:{self.port}")
        self.writer.write(self.parser.format_command(command))
        await self.writer.drain()

    async def _read_line(self) -> str:
        """Read one CRLF-terminated line, decoded."""
        timeout: Optional[float] = self.read_timeout if self.read_timeout > 0 else None
        try:
            data = await asyncio.wait_for(
                self.reader.readuntil(LINE_DELIMITER), timeout=timeout
            )
        except asyncio.IncompleteReadError:
            raise ProtocolError("connection closed before END") from None
        except asyncio.LimitOverrunError:
            raise ProtocolError(
                "response line exceeds the read limit"
            ) from None
        except asyncio.TimeoutError:
            raise ProtocolError(
                f"no response line within {self.read_timeout}s"
            ) from None

        try:
            return data.decode()
        except UnicodeDecodeError:
            raise ProtocolError("invalid encoding in stats response") from None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
