"""
mcstat: Memcached Statistics Monitor

Polls a memcached-compatible daemon for its runtime counters over
the text protocol and prints hit/miss deltas against a fixed baseline.
"""

__version__ = "1.0.0"
