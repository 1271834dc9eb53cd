"""Configuration models for gh-pulse."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from gh_pulse.exceptions import ConfigError


class FetchConfig(BaseModel):
    """GitHub API fetch limits."""
    per_page: int = 100
    max_concurrency: int = 5
    pr_search_limit: int = 100
    max_pull_requests: int = 50
    issue_search_limit: int = 100
    commit_repo_count: int = 10
    commits_per_repo: int = 10
    max_recent_commits: int = 50
    collaborator_repo_count: int = 20
    contributors_per_repo: int = 10
    max_collaborators: int = 10
    top_language_count: int = 10


class ScoreWeightsConfig(BaseModel):
    """Weights of the composite scores.

    Each score is a weighted sum of raw counts, rounded half-up.
    """
    contribution_repo: float = 5.0
    contribution_calendar: float = 0.5
    contribution_pr: float = 10.0
    contribution_issue: float = 3.0
    impact_star: float = 2.0
    impact_fork: float = 3.0
    impact_merged_pr: float = 5.0
    collaboration_pr: float = 2.0
    collaboration_issue: float = 1.0
    collaboration_comment: float = 0.5


class TimelineConfig(BaseModel):
    """Timeline builder parameters."""
    limit: int = 100


class InsightsConfig(BaseModel):
    """Insight generation parameters."""
    model: str = "gemini-1.5-flash"
    max_insights: int = 6
    max_fallback_insights: int = 5
    timeline_sample: int = 10


class GhPulseConfig(BaseModel):
    """Top-level configuration composing all sub-configs."""
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    score_weights: ScoreWeightsConfig = Field(default_factory=ScoreWeightsConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    insights: InsightsConfig = Field(default_factory=InsightsConfig)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return yaml_data


def load_config(path: str | Path | None = None) -> GhPulseConfig:
    """Load configuration from YAML file, environment variables, and defaults.

    Priority (highest to lowest):
    1. Environment variables (GH_PULSE_*)
    2. YAML config file
    3. Defaults
    """
    config_data: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        if config_path.is_file():
            config_data = _read_yaml(config_path)
    else:
        for default_path in [".gh-pulse.yml", ".gh-pulse.yaml"]:
            p = Path(default_path)
            if p.is_file():
                config_data = _read_yaml(p)
                break

    # An empty section (``fetch:``) loads as None.
    config_data = {key: value for key, value in config_data.items() if value is not None}

    env_mapping = {
        "GH_PULSE_PER_PAGE": ("fetch", "per_page", int),
        "GH_PULSE_MAX_CONCURRENCY": ("fetch", "max_concurrency", int),
        "GH_PULSE_MAX_PULL_REQUESTS": ("fetch", "max_pull_requests", int),
        "GH_PULSE_TIMELINE_LIMIT": ("timeline", "limit", int),
        "GH_PULSE_INSIGHTS_MODEL": ("insights", "model", str),
    }

    for env_var, (section, key, type_fn) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            if section not in config_data:
                config_data[section] = {}
            elif not isinstance(config_data[section], dict):
                raise ConfigError(f"Config section {section!r} must be a mapping")
            try:
                config_data[section][key] = type_fn(value)
            except ValueError as exc:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}") from exc

    try:
        return GhPulseConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
