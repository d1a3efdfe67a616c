"""Aggregator - ranks endpoint results into a report."""

from typing import Iterable

from .models import EndpointTestResult, LatencyReport


def aggregate(results: Iterable[EndpointTestResult]) -> LatencyReport:
    """Partition results and rank successes by mean latency.

    ``sorted`` is stable, so endpoints with equal means keep their test order.
    Failures carry no latency and stay in test order.
    """
    results = tuple(results)
    successes = [r for r in results if r.ok]
    failures = tuple(r for r in results if not r.ok)

    return LatencyReport(
        ranked=tuple(sorted(successes, key=lambda r: r.stats.mean)),
        failed=failures,
    )
