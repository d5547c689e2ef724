"""
Stats Poller Module

Drives one monitoring run: connect, take a baseline sample, then take a
fixed number of follow-up samples at a fixed interval, printing a table
row for each.
"""

import asyncio
import logging
import sys
from typing import Awaitable, Callable, Dict, List, Optional, TextIO

from .config.settings import settings
from .network.stats_client import StatsClient
from .protocol.commands import StatSample
from .report.delta import HEADER, DeltaReport, format_timestamp

logger = logging.getLogger(__name__)


class StatsPoller:
    """
    Polls a stats service and reports deltas against the first sample.

    The baseline is taken once, on the first poll, and every later row is
    computed against it, never against the previous sample. The first row
    reports the baseline's absolute counters.

    Usage:
        poller = StatsPoller(host='localhost', port=11211)
        asyncio.run(poller.run())

    Attributes:
        host: Service host
        port: Service port
        interval: Seconds to sleep after each sample
        samples: Follow-up samples taken after the baseline
        baseline: The first sample of the run (None before the run)
        history: Every sample taken, keyed by its ``HH:MM:SS`` timestamp
        rows: The report rows printed so far
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            interval: float = None,
            samples: int = None,
            connect_timeout: float = None,
            read_timeout: float = None,
            output: TextIO = None,
            sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.interval = interval if interval is not None else settings.INTERVAL
        self.samples = samples if samples is not None else settings.SAMPLES
        self.connect_timeout = (
            connect_timeout if connect_timeout is not None else settings.CONNECT_TIMEOUT
        )
        self.read_timeout = read_timeout if read_timeout is not None else settings.READ_TIMEOUT
        self.output = output if output is not None else sys.stdout
        self._sleep = sleep

        self.baseline: Optional[StatSample] = None
        self.history: Dict[str, StatSample] = {}
        self.rows: List[DeltaReport] = []

    async def run(self) -> List[DeltaReport]:
        """
        Run the full polling sequence.

        Returns:
            The report rows, baseline row first

        Raises:
            StatsConnectionError: if the service cannot be reached
            ProtocolError: if any stats response is malformed
        """
        client = await StatsClient.connect(
            self.host,
            self.port,
            timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
        )

        try:
            self.baseline = await client.fetch_stats()
            self._print(HEADER)
            self.report(self.baseline, absolute=True)
            self._print("")
            await self._sleep(self.interval)

            for i in range(self.samples):
                sample = await client.fetch_stats()
                self.report(sample)
                logger.debug(f"Sample {i + 1}/{self.samples} reported")
                await self._sleep(self.interval)

            await client.quit()
        finally:
            await client.close()

        return self.rows

    def report(self, sample: StatSample, absolute: bool = False) -> DeltaReport:
        """Record ``sample`` and print its row against the baseline."""
        self.history[format_timestamp(sample)] = sample

        row = DeltaReport.from_samples(self.baseline, sample, absolute=absolute)
        self.rows.append(row)
        self._print(row.format_row())
        return row

    def _print(self, line: str) -> None:
        print(line, file=self.output, flush=True)
