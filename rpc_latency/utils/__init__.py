"""Utility modules for the RPC latency tester."""

from .logger import get_logger, setup_logging
from .timing import Stopwatch, run_with_timeout

__all__ = [
    "get_logger",
    "setup_logging",
    "Stopwatch",
    "run_with_timeout",
]
