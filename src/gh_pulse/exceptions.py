"""Exceptions raised by gh-pulse."""

from __future__ import annotations

from datetime import datetime


class GhPulseError(Exception):
    """Base exception for gh-pulse."""


class GitHubAPIError(GhPulseError):
    """A GitHub REST or GraphQL call failed."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        rate_limit_remaining: int | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.rate_limit_remaining = rate_limit_remaining


class RateLimitExhaustedError(GitHubAPIError):
    """No requests left in the current rate-limit window."""

    def __init__(self, reset_at: datetime, rate_limit_remaining: int = 0):
        self.reset_at = reset_at
        super().__init__(
            f"Rate limit exhausted. Resets at {reset_at.isoformat()}",
            status_code=403,
            rate_limit_remaining=rate_limit_remaining,
        )


class UserNotFoundError(GitHubAPIError):
    """The GraphQL ``user`` lookup returned null."""

    def __init__(self, login: str):
        self.login = login
        super().__init__(f"User not found: {login}", status_code=404)


class ResourceNotFoundError(GitHubAPIError):
    """A REST resource (repository, pull request, ...) was not found."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Resource not found: {resource}", status_code=404)


class AggregationError(GhPulseError):
    """A collector the aggregation cannot do without has failed."""

    def __init__(self, collector: str, reason: str):
        self.collector = collector
        super().__init__(f"Failed to collect {collector}: {reason}")


class InsightGenerationError(GhPulseError):
    """The text generation backend failed or returned unusable output."""


class ConfigError(GhPulseError):
    """The config file or a GH_PULSE_* variable is invalid."""
