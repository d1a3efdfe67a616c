"""
Data models for the RPC latency tester.

Results are immutable once built: a sampler session folds its observations
into an ``EndpointTestResult`` and the orchestrator only ever appends those.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SamplerPhase(str, Enum):
    """Phases of one endpoint test session."""
    CONNECTING = "connecting"
    WARMING_UP = "warming_up"
    SAMPLING = "sampling"
    DONE = "done"


@dataclass(frozen=True)
class ProbeAttempt:
    """A single timed probe. Lives for one loop iteration only."""
    started_at: float
    elapsed_ms: float
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def is_anomalous(self) -> bool:
        """A successful probe that measured exactly zero time."""
        return self.ok and self.elapsed_ms == 0


@dataclass(frozen=True)
class LatencyStats:
    """Summary statistics over the observations of one endpoint."""
    count: int
    mean: float
    median: float
    min: float
    max: float
    stdev: float = 0.0
    p95: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "stdev": self.stdev,
            "p95": self.p95,
        }


@dataclass(frozen=True)
class SessionDiagnostics:
    """Counters for what the sampler threw away during a session."""
    warmup_ms: float | None = None
    probe_errors: int = 0
    zero_samples: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "warmup_ms": self.warmup_ms,
            "probe_errors": self.probe_errors,
            "zero_samples": self.zero_samples,
        }


@dataclass(frozen=True)
class EndpointTestResult:
    """
    Terminal record for one endpoint.

    Exactly one of ``stats`` (success) or ``error`` (failure) is set.
    Use the ``success``/``failure`` factories rather than the constructor.
    """
    endpoint: str
    stats: LatencyStats | None = None
    error: str | None = None
    diagnostics: SessionDiagnostics = field(default_factory=SessionDiagnostics)

    def __post_init__(self):
        if (self.stats is None) == (self.error is None):
            raise ValueError(
                f"EndpointTestResult for {self.endpoint} must hold either stats or an error"
            )
        if self.stats is not None and self.stats.count < 1:
            raise ValueError("A successful result needs at least one observation")

    @classmethod
    def success(
        cls,
        endpoint: str,
        stats: LatencyStats,
        diagnostics: SessionDiagnostics | None = None,
    ) -> "EndpointTestResult":
        return cls(endpoint=endpoint, stats=stats, diagnostics=diagnostics or SessionDiagnostics())

    @classmethod
    def failure(
        cls,
        endpoint: str,
        error: str,
        diagnostics: SessionDiagnostics | None = None,
    ) -> "EndpointTestResult":
        return cls(endpoint=endpoint, error=error, diagnostics=diagnostics or SessionDiagnostics())

    @property
    def ok(self) -> bool:
        return self.stats is not None

    @property
    def mean(self) -> float:
        if self.stats is None:
            raise AttributeError(f"{self.endpoint} failed and has no latency")
        return self.stats.mean

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"endpoint": self.endpoint}
        if self.stats is not None:
            data.update(self.stats.to_dict())
        else:
            data["error"] = self.error
        data["diagnostics"] = self.diagnostics.to_dict()
        return data


@dataclass(frozen=True)
class TestRun:
    """Ordered results, one per tested endpoint, in test order."""
    results: tuple[EndpointTestResult, ...] = ()

    __test__ = False  # not a pytest test class

    def with_result(self, result: EndpointTestResult) -> "TestRun":
        """Return a new run with ``result`` appended."""
        return TestRun(results=self.results + (result,))

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class LatencyReport:
    """Ranked successes (fastest mean first) and failures in test order."""
    ranked: tuple[EndpointTestResult, ...] = ()
    failed: tuple[EndpointTestResult, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "ranked": [
                {"endpoint": r.endpoint, **r.stats.to_dict()} for r in self.ranked
            ],
            "failed": [
                {"endpoint": r.endpoint, "error": r.error} for r in self.failed
            ],
        }
