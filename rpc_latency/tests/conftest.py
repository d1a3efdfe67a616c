"""Shared fakes for sampler, stage and tester tests."""

import pytest

from ..config import TesterConfig
from ..models import EndpointTestResult, LatencyStats


class FakeClock:
    """Manually advanced clock; ``sleep`` moves time forward instantly."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


class FakeRpcClient:
    """
    Scripted probe client.

    ``latencies`` is consumed one entry per ``get_latest_block`` call (the
    first entry is the warm-up). An entry is either a latency in seconds,
    which advances the clock, or an exception to raise. Once exhausted,
    ``default`` is used.
    """

    def __init__(
        self,
        clock: FakeClock,
        endpoint: str = "https://rpc.test",
        latencies=(),
        default=0.010,
        connect_error: Exception | None = None,
    ):
        self.clock = clock
        self.endpoint = endpoint
        self.latencies = list(latencies)
        self.default = default
        self.connect_error = connect_error
        self.block_number_calls = 0
        self.block_calls = 0
        self.closed = False

    async def get_block_number(self):
        self.block_number_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        return "0x10"

    async def get_latest_block(self):
        self.block_calls += 1
        step = self.latencies.pop(0) if self.latencies else self.default
        if isinstance(step, Exception):
            raise step
        self.clock.advance(step)
        return {"number": "0x10"}

    async def close(self):
        self.closed = True


def make_success(endpoint: str, mean: float, count: int = 3) -> EndpointTestResult:
    stats = LatencyStats(count=count, mean=mean, median=mean, min=mean, max=mean)
    return EndpointTestResult.success(endpoint, stats)


def make_failure(endpoint: str, error: str = "Connection timed out") -> EndpointTestResult:
    return EndpointTestResult.failure(endpoint, error)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> TesterConfig:
    return TesterConfig(
        endpoints=("https://rpc.test",),
        duration_ms=300,
        connection_timeout_ms=1000,
        probe_interval_ms=100,
    )
