"""
Sampler - drives one endpoint through a bounded-duration probing session.

Phases:
- CONNECTING: one reachability probe bounded by the connection timeout
- WARMING_UP: one timed probe whose latency is logged but never counted
- SAMPLING: probe until the deadline, discarding errors and 0ms readings
- DONE: fold observations into an EndpointTestResult

Failures are returned as data. Nothing raised by the probe client escapes
``LatencySampler.sample``.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from .clients import RpcClient, create_client
from .config import TesterConfig
from .errors import ConnectionCheckError, NoSuccessfulProbesError, classify_error, describe
from .models import EndpointTestResult, ProbeAttempt, SamplerPhase, SessionDiagnostics
from .stats import summarize
from .utils.logger import get_logger
from .utils.timing import Stopwatch, run_with_timeout

logger = get_logger("sampler")

ClientFactory = Callable[[str], RpcClient]
PhaseListener = Callable[[str, SamplerPhase], None]


@dataclass
class _Session:
    """Mutable state owned by the sampler for one endpoint."""
    endpoint: str
    phase: SamplerPhase = SamplerPhase.CONNECTING
    observations: list[float] = field(default_factory=list)
    warmup_ms: float | None = None
    probe_errors: int = 0
    zero_samples: int = 0

    def diagnostics(self) -> SessionDiagnostics:
        return SessionDiagnostics(
            warmup_ms=self.warmup_ms,
            probe_errors=self.probe_errors,
            zero_samples=self.zero_samples,
        )


class LatencySampler:
    """
    Measures one endpoint for ``config.duration_ms``.

    Clocks and sleep are injectable: ``timer`` times individual probes,
    ``monotonic`` drives the observation deadline.
    """

    def __init__(
        self,
        config: TesterConfig,
        client_factory: ClientFactory | None = None,
        *,
        timer: Callable[[], float] = time.perf_counter,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_phase: PhaseListener | None = None,
    ):
        self.config = config
        self._client_factory = client_factory or self._default_client
        self._timer = timer
        self._monotonic = monotonic
        self._sleep = sleep
        self._on_phase = on_phase
        # Per-request latencies are shown at INFO only in verbose mode
        self._request_log_level = logging.INFO if config.verbose else logging.DEBUG

    def _default_client(self, endpoint: str) -> RpcClient:
        return create_client(
            self.config.client,
            endpoint,
            self.config.connection_timeout_ms,
            headers=self.config.extra_headers,
        )

    def _enter(self, session: _Session, phase: SamplerPhase) -> None:
        session.phase = phase
        logger.debug(f"{session.endpoint}: {phase.value}")
        if self._on_phase:
            self._on_phase(session.endpoint, phase)

    async def sample(self, endpoint: str) -> EndpointTestResult:
        """Run a full session against ``endpoint``."""
        logger.info(f"Starting test for {endpoint}...")
        session = _Session(endpoint=endpoint)
        client = self._client_factory(endpoint)

        try:
            result = await self._run(session, client)
        except Exception as e:
            cause = classify_error(e, endpoint)
            logger.error(f"Error testing {endpoint}: {cause}", extra={"error_type": type(e).__name__})
            result = EndpointTestResult.failure(endpoint, cause, session.diagnostics())
        finally:
            await self._close(client)

        self._enter(session, SamplerPhase.DONE)
        return result

    async def _run(self, session: _Session, client: RpcClient) -> EndpointTestResult:
        await self._check_connection(session, client)
        await self._warm_up(session, client)
        await self._sample_until_deadline(session, client)

        if not session.observations:
            raise NoSuccessfulProbesError()

        stats = summarize(session.observations)
        logger.info(
            f"Results for {session.endpoint}: {stats.count} requests, "
            f"avg {stats.mean:.2f} ms, median {stats.median:.2f} ms, "
            f"min {stats.min:.2f} ms, max {stats.max:.2f} ms"
        )
        return EndpointTestResult.success(session.endpoint, stats, session.diagnostics())

    async def _check_connection(self, session: _Session, client: RpcClient) -> None:
        self._enter(session, SamplerPhase.CONNECTING)
        logger.info("Testing initial connection...")
        try:
            await run_with_timeout(client.get_block_number(), self.config.connection_timeout_ms)
        except Exception as e:
            raise ConnectionCheckError(session.endpoint, e) from e
        logger.info("Connection successful, beginning tests")

    async def _warm_up(self, session: _Session, client: RpcClient) -> None:
        self._enter(session, SamplerPhase.WARMING_UP)
        attempt = await self._timed_probe(client)
        if not attempt.ok:
            raise attempt.error

        session.warmup_ms = attempt.elapsed_ms
        if attempt.is_anomalous():
            logger.info(f"First request (warmup): {attempt.elapsed_ms} ms (suspicious 0ms reading)")
        else:
            logger.info(f"First request (warmup): {attempt.elapsed_ms:.2f} ms")

    async def _sample_until_deadline(self, session: _Session, client: RpcClient) -> None:
        self._enter(session, SamplerPhase.SAMPLING)
        deadline = self._monotonic() + self.config.duration_s

        while self._monotonic() < deadline:
            attempt = await self._timed_probe(client)

            if not attempt.ok:
                session.probe_errors += 1
                logger.warning(f"Request error: {describe(attempt.error)}")
            elif attempt.is_anomalous():
                session.zero_samples += 1
                logger.info(
                    f"Request {len(session.observations) + 1}: 0 ms (suspicious 0ms reading, ignoring)"
                )
            else:
                session.observations.append(attempt.elapsed_ms)
                logger.log(
                    self._request_log_level,
                    f"Request {len(session.observations)}: {attempt.elapsed_ms:.2f} ms",
                )

            await self._sleep(self.config.probe_interval_s)

    async def _timed_probe(self, client: RpcClient) -> ProbeAttempt:
        watch = Stopwatch(self._timer)
        try:
            await run_with_timeout(client.get_latest_block(), self.config.connection_timeout_ms)
        except Exception as e:
            return ProbeAttempt(started_at=watch.started_at, elapsed_ms=watch.elapsed_ms(), error=e)
        return ProbeAttempt(started_at=watch.started_at, elapsed_ms=watch.elapsed_ms())

    async def _close(self, client: RpcClient) -> None:
        try:
            await client.close()
        except Exception as e:
            logger.warning(f"Failed to close client for {client.endpoint}: {e}")
