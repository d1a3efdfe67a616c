"""Tests for the pipeline stages."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ..models import TestRun
from ..stages import RankResultsStage, SampleEndpointStage
from .conftest import make_failure, make_success


def make_ctx(metadata: dict) -> MagicMock:
    ctx = MagicMock()
    ctx.snapshot.metadata = metadata
    ctx.try_emit_event = MagicMock()
    return ctx


class TestSampleEndpointStage:

    @pytest.mark.asyncio
    async def test_missing_endpoint_fails(self):
        sampler = MagicMock()
        sampler.sample = AsyncMock()
        stage = SampleEndpointStage(sampler)

        result = await stage.execute(make_ctx({}))

        assert result.status.value == "fail"
        sampler.sample.assert_not_called()

    @pytest.mark.asyncio
    async def test_successful_endpoint(self):
        sampler = MagicMock()
        sampler.sample = AsyncMock(return_value=make_success("https://a.test", 12.0))
        stage = SampleEndpointStage(sampler)
        ctx = make_ctx({"endpoint": "https://a.test"})

        result = await stage.execute(ctx)

        assert result.status.value == "ok"
        assert result.data["ok"] is True
        assert result.data["result"].mean == 12.0
        sampler.sample.assert_awaited_once_with("https://a.test")
        emitted = [call.args[0] for call in ctx.try_emit_event.call_args_list]
        assert emitted == ["endpoint.sampling", "endpoint.sampled"]

    @pytest.mark.asyncio
    async def test_failed_endpoint_is_still_ok_output(self):
        """An unreachable endpoint is a result, not a stage failure."""
        sampler = MagicMock()
        sampler.sample = AsyncMock(return_value=make_failure("https://b.test", "Connection timed out"))
        stage = SampleEndpointStage(sampler)

        result = await stage.execute(make_ctx({"endpoint": "https://b.test"}))

        assert result.status.value == "ok"
        assert result.data["ok"] is False
        assert result.data["result"].error == "Connection timed out"


class TestRankResultsStage:

    @pytest.mark.asyncio
    async def test_missing_run_fails(self):
        result = await RankResultsStage().execute(make_ctx({}))
        assert result.status.value == "fail"

    @pytest.mark.asyncio
    async def test_ranks_test_run(self):
        run = TestRun(results=(
            make_success("A", 50.0),
            make_failure("B"),
            make_success("C", 20.0),
        ))

        result = await RankResultsStage().execute(make_ctx({"test_run": run}))

        assert result.status.value == "ok"
        report = result.data["report"]
        assert [r.endpoint for r in report.ranked] == ["C", "A"]
        assert [r.endpoint for r in report.failed] == ["B"]
        assert result.data["ranked_count"] == 2
        assert result.data["failed_count"] == 1

    @pytest.mark.asyncio
    async def test_accepts_plain_list(self):
        results = [make_success("A", 5.0), make_success("B", 1.0)]

        result = await RankResultsStage().execute(make_ctx({"test_run": results}))

        assert [r.endpoint for r in result.data["report"].ranked] == ["B", "A"]
