#!/usr/bin/env python3
"""
mcstat Entry Point

This is the main entry point for the memcached stats monitor.

Usage:
    python -m mcstat.monitor                      # Default target (localhost:11211)
    python -m mcstat.monitor --host 10.0.0.5      # Custom host
    python -m mcstat.monitor --port 11212         # Custom port
    python -m mcstat.monitor --interval 10        # Poll every 10 seconds
    python -m mcstat.monitor --debug              # Enable debug logging

Environment Variables:
    MCSTAT_HOST             - Service host
    MCSTAT_PORT             - Service port
    MCSTAT_INTERVAL         - Seconds between samples
    MCSTAT_SAMPLES          - Samples taken after the baseline
    MCSTAT_CONNECT_TIMEOUT  - Connection timeout in seconds
    MCSTAT_READ_TIMEOUT     - Per-line read timeout in seconds (0 disables)
    MCSTAT_DEBUG            - Enable debug mode (true/false)
    MCSTAT_LOG_LEVEL        - Log level when not in debug mode
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config.settings import settings
from .network.stats_client import StatsConnectionError
from .poller import StatsPoller
from .protocol.commands import ProtocolError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="mcstat: report memcached hit/miss deltas over time",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Stats service host",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Stats service port",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=settings.INTERVAL,
        help="Seconds to wait after each sample",
    )

    parser.add_argument(
        "--samples",
        type=int,
        default=settings.SAMPLES,
        help="Number of samples taken after the baseline",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.CONNECT_TIMEOUT,
        help="Connection timeout in seconds",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    # stdout carries the report table
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the monitor."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    logger.info(f"Monitoring {args.host}:{args.port}")
    logger.debug(f"  Interval: {args.interval}s")
    logger.debug(f"  Samples: {args.samples}")
    logger.debug(f"  Timeout: {args.timeout}s")

    poller = StatsPoller(
        host=args.host,
        port=args.port,
        interval=args.interval,
        samples=args.samples,
        connect_timeout=args.timeout,
    )

    try:
        asyncio.run(poller.run())
    except StatsConnectionError as e:
        print(e)
    except ProtocolError as e:
        logger.error(f"Protocol error from {args.host}:{args.port}: {e}")
        sys.exit(1)
    except ConnectionError as e:
        logger.error(f"Connection to {args.host}:{args.port} lost: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")


if __name__ == "__main__":
    main()
