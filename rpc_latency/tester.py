"""
Latency Tester - main orchestrator using stageflow pipelines.

Tests endpoints strictly one after another, collects their results into a
TestRun and ranks them once every endpoint has finished.
"""

from typing import Any, Callable
from uuid import uuid4

from stageflow import Pipeline, PipelineTimer, StageContext, StageKind, StageStatus
from stageflow.context import ContextSnapshot, RunIdentity
from stageflow.stages import StageInputs

from .config import TesterConfig
from .models import EndpointTestResult, LatencyReport, SamplerPhase, TestRun
from .sampler import LatencySampler
from .stages import RankResultsStage, SampleEndpointStage
from .utils.logger import get_logger

logger = get_logger("tester")


class LatencyTester:
    """
    Runs a latency test over every configured endpoint.

    Features:
    - Sequential per-endpoint sampling pipeline
    - Failures recorded per endpoint, never aborting the run
    - Event subscription for progress reporting
    - Cancellation between endpoints
    """

    def __init__(self, config: TesterConfig, sampler: LatencySampler | None = None):
        self.config = config

        self.sampler = sampler or LatencySampler(config, on_phase=self._on_phase)
        self.sample_stage = SampleEndpointStage(self.sampler)
        self.rank_stage = RankResultsStage()

        self._pipeline = self._build_pipeline()

        self._listeners: list[Callable[[str, dict], None]] = []
        self._cancelled = False

        self.last_run: TestRun | None = None

    def _build_pipeline(self) -> Pipeline:
        """Build the per-endpoint sampling pipeline."""
        return Pipeline().with_stage("sample_endpoint", self.sample_stage, StageKind.WORK)

    def _make_context(self, topology: str, stage_name: str, metadata: dict[str, Any]) -> StageContext:
        snapshot = ContextSnapshot(
            run_id=RunIdentity(
                pipeline_run_id=uuid4(),
                request_id=uuid4(),
                session_id=uuid4(),
                user_id=None,
                org_id=None,
                interaction_id=uuid4(),
            ),
            topology=topology,
            execution_mode="default",
            metadata=metadata,
        )
        return StageContext(
            snapshot=snapshot,
            inputs=StageInputs(snapshot=snapshot),
            stage_name=stage_name,
            timer=PipelineTimer(),
        )

    async def _test_endpoint(self, endpoint: str) -> EndpointTestResult:
        """Run the sampling pipeline for one endpoint."""
        ctx = self._make_context("latency_sampling", "pipeline", {"endpoint": endpoint})

        graph = self._pipeline.build()
        results = await graph.run(ctx)

        output = results.get("sample_endpoint")
        if output is None or output.status != StageStatus.OK:
            error = getattr(output, "error", None) or "no output"
            raise RuntimeError(f"Sampling pipeline did not complete for {endpoint}: {error}")

        return output.data["result"]

    async def _rank(self, test_run: TestRun) -> LatencyReport:
        ctx = self._make_context("latency_ranking", "rank_results", {"test_run": test_run})
        output = await self.rank_stage.execute(ctx)
        if output.status != StageStatus.OK:
            raise RuntimeError(f"Ranking failed: {output.error}")
        return output.data["report"]

    async def run(self) -> LatencyReport:
        """
        Main entry point - test every endpoint, then rank the results.

        Endpoint-level failures are part of the report. Only unexpected
        errors (programming or environment errors) propagate.
        """
        logger.info("Starting RPC Latency Tests")
        logger.info(f"Each RPC endpoint will be tested for {self.config.duration_ms / 1000:g} seconds")
        logger.info(f"Connection timeout set to {self.config.connection_timeout_ms / 1000:g} seconds")

        test_run = TestRun()

        for index, endpoint in enumerate(self.config.endpoints, start=1):
            if self._cancelled:
                logger.info("Testing cancelled by user")
                break

            self._emit_event("endpoint.started", {
                "endpoint": endpoint,
                "index": index,
                "total": len(self.config.endpoints),
            })

            result = await self._test_endpoint(endpoint)
            test_run = test_run.with_result(result)

            self._emit_event("endpoint.completed", {"endpoint": endpoint, "result": result.to_dict()})

        self.last_run = test_run
        report = await self._rank(test_run)

        logger.info(
            f"Testing complete: {len(report.ranked)} succeeded, {len(report.failed)} failed",
            extra={"endpoints": len(test_run)},
        )
        self._emit_event("run.completed", report.to_dict())
        return report

    def cancel(self) -> None:
        """Stop before the next endpoint; the current session runs to its deadline."""
        self._cancelled = True
        logger.info("Cancellation requested")

    def subscribe(self, listener: Callable[[str, dict], None]) -> Callable[[], None]:
        """Subscribe to tester events. Returns unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _on_phase(self, endpoint: str, phase: SamplerPhase) -> None:
        self._emit_event("endpoint.phase", {"endpoint": endpoint, "phase": phase.value})

    def _emit_event(self, event: str, data: dict) -> None:
        """Emit an event to all listeners."""
        for listener in self._listeners:
            try:
                listener(event, data)
            except Exception as e:
                logger.warning(f"Event listener error: {e}")
