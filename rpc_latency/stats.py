"""Summary statistics over latency observations (milliseconds)."""

import math
import statistics
from typing import Sequence

from .models import LatencyStats


def percentile(values: Sequence[float], pct: float) -> float:
    """Nearest-rank percentile of ``values``."""
    if not values:
        raise ValueError("percentile of an empty sequence")
    ordered = sorted(values)
    rank = max(1, math.ceil(pct / 100 * len(ordered)))
    return ordered[rank - 1]


def summarize(observations: Sequence[float]) -> LatencyStats:
    """Fold a non-empty observation sequence into ``LatencyStats``.

    The median follows the textbook definition: the middle value for an odd
    count, the mean of the two middle values for an even count.
    """
    if not observations:
        raise ValueError("cannot summarize zero observations")

    count = len(observations)
    return LatencyStats(
        count=count,
        mean=sum(observations) / count,
        median=statistics.median(observations),
        min=min(observations),
        max=max(observations),
        stdev=statistics.stdev(observations) if count > 1 else 0.0,
        p95=percentile(observations, 95),
    )
