"""
Sequential latency tester for JSON-RPC endpoints.

Each endpoint is probed for a fixed observation window after a reachability
check and a warm-up request; the results are ranked by mean latency.
"""

__version__ = "1.0.0"

from .aggregator import aggregate
from .config import ClientKind, TesterConfig
from .models import EndpointTestResult, LatencyReport, LatencyStats, TestRun
from .sampler import LatencySampler
from .tester import LatencyTester

__all__ = [
    "aggregate",
    "ClientKind",
    "TesterConfig",
    "EndpointTestResult",
    "LatencyReport",
    "LatencyStats",
    "TestRun",
    "LatencySampler",
    "LatencyTester",
    "__version__",
]
