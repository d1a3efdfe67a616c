"""
Sample Endpoint Stage - runs one sampler session for the endpoint in context.

Single responsibility: turn an endpoint into an EndpointTestResult.
"""

from stageflow import StageContext, StageKind, StageOutput

from ..sampler import LatencySampler


class SampleEndpointStage:
    """Stage that measures the latency of a single endpoint."""

    name = "sample_endpoint"
    kind = StageKind.WORK

    def __init__(self, sampler: LatencySampler):
        self.sampler = sampler

    async def execute(self, ctx: StageContext) -> StageOutput:
        """Sample the endpoint named in the context metadata."""
        metadata = ctx.snapshot.metadata or {}
        endpoint = metadata.get("endpoint")
        if not endpoint:
            return StageOutput.fail(error="No endpoint provided in context metadata")

        ctx.try_emit_event("endpoint.sampling", {"endpoint": endpoint})

        # Endpoint failures come back as data, never as exceptions
        result = await self.sampler.sample(endpoint)

        ctx.try_emit_event("endpoint.sampled", {
            "endpoint": endpoint,
            "ok": result.ok,
            "count": result.stats.count if result.ok else 0,
            "error": result.error,
        })

        return StageOutput.ok(
            result=result,
            endpoint=endpoint,
            ok=result.ok,
        )
