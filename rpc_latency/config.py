"""
Configuration management for the RPC latency tester.

Implements fail-fast validation: an invalid configuration raises before any
endpoint is contacted.
"""

import os
from dataclasses import dataclass, field
from enum import Enum


DEFAULT_RPC_URLS: tuple[str, ...] = (
    "https://carrot.megaeth.com/rpc",  # MegaETH RPC
    "https://testnet-rpc.monad.xyz",   # Monad RPC
)

DEFAULT_DURATION_MS = 10000          # 10 seconds per endpoint
DEFAULT_CONNECTION_TIMEOUT_MS = 5000 # 5 seconds
DEFAULT_PROBE_INTERVAL_MS = 100

URLS_ENV = "RPC_LATENCY_URLS"


class ClientKind(str, Enum):
    """Supported HTTP client implementations."""
    AIOHTTP = "aiohttp"
    REQUESTS = "requests"


def endpoints_from_env(environ: dict[str, str] | None = None) -> tuple[str, ...] | None:
    """Read a comma-separated endpoint list from ``RPC_LATENCY_URLS``.

    Returns None when the variable is unset or holds no URLs.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(URLS_ENV, "")
    urls = tuple(part.strip() for part in raw.split(",") if part.strip())
    return urls or None


@dataclass
class TesterConfig:
    """
    Main configuration for a latency test run.

    All durations are milliseconds. ``connection_timeout_ms`` bounds the
    initial reachability check and every individual probe.
    """
    endpoints: tuple[str, ...] = DEFAULT_RPC_URLS

    duration_ms: int = DEFAULT_DURATION_MS
    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    probe_interval_ms: int = DEFAULT_PROBE_INTERVAL_MS

    client: ClientKind = ClientKind.AIOHTTP

    # Observability
    verbose: bool = False

    extra_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate settings after initialization."""
        self.endpoints = tuple(self.endpoints)
        self.client = ClientKind(self.client)

        if not self.endpoints:
            raise ValueError("At least one endpoint is required")

        for endpoint in self.endpoints:
            if not isinstance(endpoint, str) or not endpoint.strip():
                raise ValueError(f"Endpoint must be a non-empty string, got {endpoint!r}")

        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be >= 0, got {self.duration_ms}")

        if self.connection_timeout_ms < 1:
            raise ValueError(f"connection_timeout_ms must be >= 1, got {self.connection_timeout_ms}")

        if self.probe_interval_ms < 0:
            raise ValueError(f"probe_interval_ms must be >= 0, got {self.probe_interval_ms}")

    @property
    def duration_s(self) -> float:
        return self.duration_ms / 1000

    @property
    def probe_interval_s(self) -> float:
        return self.probe_interval_ms / 1000
