"""gh-pulse - GitHub activity aggregation, statistics and timeline."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from gh_pulse.aggregator import ContributionAggregator, aggregate_contributions
from gh_pulse.config import GhPulseConfig
from gh_pulse.exceptions import AggregationError, GhPulseError
from gh_pulse.github_client import GitHubClient
from gh_pulse.models import ContributionData, ContributionStats, TimelineEntry
from gh_pulse.stats import calculate_stats
from gh_pulse.timeline import build_timeline

try:
    __version__ = version("gh-pulse")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "AggregationError",
    "ContributionAggregator",
    "ContributionData",
    "ContributionStats",
    "GhPulseConfig",
    "GhPulseError",
    "GitHubClient",
    "TimelineEntry",
    "__version__",
    "aggregate_contributions",
    "build_timeline",
    "calculate_stats",
]
