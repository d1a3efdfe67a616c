"""Pipeline stages for the RPC latency tester."""

from .sample_endpoint import SampleEndpointStage
from .rank_results import RankResultsStage

__all__ = [
    "SampleEndpointStage",
    "RankResultsStage",
]
