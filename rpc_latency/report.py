"""Text and JSON renderings of a LatencyReport."""

import json

from .models import LatencyReport, TestRun

URL_WIDTH = 32
HEADER = f"| {'RPC URL':<{URL_WIDTH}} | {'Avg (ms)':>8} | {'Median':>6} | {'Min':>6} | {'Max':>6} |"
RULE = "-" * len(HEADER)


def _row(endpoint: str, mean: float, median: float, low: float, high: float) -> str:
    url = endpoint.ljust(URL_WIDTH)[:URL_WIDTH]
    return f"| {url} | {mean:8.2f} | {median:6.2f} | {low:6.2f} | {high:6.2f} |"


def render_text(report: LatencyReport) -> str:
    """Render the final comparison table."""
    lines = ["", "======= FINAL RESULTS =======", "RPC Endpoint Latency Comparison:"]

    if report.ranked:
        lines += [
            "",
            "Successful Tests (sorted by average latency):",
            RULE,
            HEADER,
            RULE,
        ]
        for result in report.ranked:
            stats = result.stats
            lines.append(_row(result.endpoint, stats.mean, stats.median, stats.min, stats.max))
        lines.append(RULE)
    else:
        lines += ["", "No successful tests completed"]

    if report.failed:
        lines += ["", "Failed Tests:"]
        lines += [f"{result.endpoint} - Error: {result.error}" for result in report.failed]

    return "\n".join(lines)


def render_json(report: LatencyReport, test_run: TestRun | None = None) -> str:
    """Render the report (and optionally the per-endpoint diagnostics) as JSON."""
    payload = report.to_dict()
    if test_run is not None:
        payload["results"] = [result.to_dict() for result in test_run]
    return json.dumps(payload, indent=2)
