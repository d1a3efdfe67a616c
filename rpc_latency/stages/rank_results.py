"""
Rank Results Stage - aggregates a completed test run into a report.
"""

from stageflow import StageContext, StageKind, StageOutput

from ..aggregator import aggregate
from ..models import TestRun


class RankResultsStage:
    """Stage that ranks endpoint results by mean latency."""

    name = "rank_results"
    kind = StageKind.TRANSFORM

    async def execute(self, ctx: StageContext) -> StageOutput:
        metadata = ctx.snapshot.metadata or {}
        test_run = metadata.get("test_run")
        if test_run is None:
            return StageOutput.fail(error="No test run provided in context metadata")

        if not isinstance(test_run, TestRun):
            test_run = TestRun(results=tuple(test_run))

        report = aggregate(test_run.results)

        ctx.try_emit_event("results.ranked", {
            "ranked": [r.endpoint for r in report.ranked],
            "failed": [r.endpoint for r in report.failed],
        })

        return StageOutput.ok(
            report=report,
            ranked_count=len(report.ranked),
            failed_count=len(report.failed),
        )
