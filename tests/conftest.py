"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import os
import socket
import time
from contextlib import closing
from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio

from mcstat.protocol.parser import StatsParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


def render_stats(stats: Dict[str, int]) -> bytes:
    """Render counters as a complete ``stats`` response."""
    lines = [f"STAT {key} {value}\r\n" for key, value in stats.items()]
    return ("".join(lines) + "END\r\n").encode()


# ============================================================================
# Fake Stats Service
# ============================================================================

class FakeMemcached:
    """
    Scripted stand-in for a memcached stats endpoint.

    Every ``stats`` request is answered from ``stats``, after which each
    counter in ``step`` is advanced. ``overrides`` maps a poll number
    (0-based) to raw bytes sent instead; with ``close_after_override`` the
    connection is dropped right after sending them. ``quit_received`` is
    set once a ``quit`` line arrives.

    Usage:
        fake = FakeMemcached('127.0.0.1', port)
        fake.stats = {"cmd_get": 10, ...}
        fake.step = {"cmd_get": 10}
        await fake.start()
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.stats: Dict[str, int] = {
            "pid": 4242,
            "time": 1000000000,
            "curr_connections": 2,
            "cmd_get": 0,
            "get_hits": 0,
            "get_misses": 0,
        }
        self.step: Dict[str, int] = {"time": 60}
        self.overrides: Dict[int, bytes] = {}
        self.close_after_override = False
        self.commands: List[str] = []
        self.quit_received = asyncio.Event()
        self.polls = 0
        self._server = None
        self._writers = set()

    async def handle_client(self, reader, writer) -> None:
        self._writers.add(writer)
        try:
            while True:
                data = await reader.readline()
                if not data:
                    break

                command = data.decode().strip()
                self.commands.append(command)
                if command == "quit":
                    self.quit_received.set()
                    break
                if command != "stats":
                    writer.write(b"ERROR\r\n")
                    await writer.drain()
                    continue

                poll = self.polls
                self.polls += 1
                if poll in self.overrides:
                    writer.write(self.overrides[poll])
                    await writer.drain()
                    if self.close_after_override:
                        break
                    continue

                writer.write(render_stats(self.stats))
                await writer.drain()
                for key, delta in self.step.items():
                    self.stats[key] += delta
        except ConnectionResetError:
            pass
        finally:
            self._writers.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def start(self) -> None:
        self._server = await asyncio.start_server(
            self.handle_client, self.host, self.port
        )

    async def stop(self) -> None:
        for writer in list(self._writers):
            writer.close()
        self._server.close()
        await self._server.wait_closed()


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> StatsParser:
    """Create a StatsParser instance."""
    return StatsParser()


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def utc():
    """Pin the local timezone to UTC for deterministic timestamps."""
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()

    yield

    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.fixture
def sleeps() -> List[float]:
    """Record of the intervals passed to ``no_sleep``."""
    return []


@pytest.fixture
def no_sleep(sleeps: List[float]):
    """A sleep replacement that records the interval and returns at once."""
    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)
    return sleep


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def fake_server(server_port: int) -> AsyncGenerator[FakeMemcached, None]:
    """
    Start a FakeMemcached on a free port for the duration of a test.

    Tests adjust ``stats``, ``step`` and ``overrides`` before polling.
    """
    srv = FakeMemcached('127.0.0.1', server_port)
    await srv.start()

    yield srv

    await srv.stop()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
