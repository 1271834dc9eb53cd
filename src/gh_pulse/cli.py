"""Click-based CLI for gh-pulse."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from gh_pulse.aggregator import aggregate_contributions
from gh_pulse.config import GhPulseConfig, load_config
from gh_pulse.exceptions import GhPulseError
from gh_pulse.formatter import format_cli_output, format_insights, format_json, format_timeline
from gh_pulse.insights import GeminiClient, generate_insights
from gh_pulse.models import ContributionData, Insight

_token_option = click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
_config_option = click.option("--config", "config_path", default=None, help="Config file path")
_json_option = click.option("--json", "output_json", is_flag=True, help="Output as JSON")


@click.group()
@click.version_option(package_name="gh-pulse")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """gh-pulse - GitHub activity statistics and timeline."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def _require_token(token: str | None) -> str:
    if not token:
        click.echo("Error: GitHub token required. Set GITHUB_TOKEN or use --token.", err=True)
        sys.exit(1)
    return token


def _load(config_path: str | None) -> GhPulseConfig:
    try:
        return load_config(config_path)
    except GhPulseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _aggregate(token: str, config: GhPulseConfig) -> ContributionData:
    try:
        return asyncio.run(aggregate_contributions(token=token, config=config))
    except GhPulseError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@main.command()
@_token_option
@_config_option
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@_json_option
def stats(
    token: str | None, config_path: str | None, verbose: bool, output_json: bool
) -> None:
    """Show statistics for the authenticated user."""
    token = _require_token(token)
    data = _aggregate(token, _load(config_path))

    if output_json:
        click.echo(format_json(data))
    else:
        click.echo(format_cli_output(data, verbose=verbose))


@main.command()
@_token_option
@_config_option
@click.option("--limit", type=int, default=None, help="Maximum number of entries")
@_json_option
def timeline(
    token: str | None, config_path: str | None, limit: int | None, output_json: bool
) -> None:
    """Show the activity timeline, newest first."""
    token = _require_token(token)
    config = _load(config_path)
    if limit is not None:
        config = config.model_copy(
            update={"timeline": config.timeline.model_copy(update={"limit": limit})}
        )
    data = _aggregate(token, config)

    if output_json:
        click.echo(format_json(data.timeline))
    else:
        click.echo(format_timeline(data.timeline))


async def _insights(
    data: ContributionData, config: GhPulseConfig, api_key: str | None
) -> list[Insight]:
    if not api_key:
        return await generate_insights(data, None, config.insights)
    gemini = GeminiClient(api_key=api_key, model=config.insights.model)
    return await generate_insights(data, gemini, config.insights)


@main.command()
@_token_option
@_config_option
@click.option(
    "--gemini-key",
    envvar="GEMINI_API_KEY",
    default=None,
    help="Gemini API key; rule-based insights are used without one",
)
@_json_option
def insights(
    token: str | None, config_path: str | None, gemini_key: str | None, output_json: bool
) -> None:
    """Generate insights about the authenticated user's activity."""
    token = _require_token(token)
    config = _load(config_path)
    data = _aggregate(token, config)
    result = asyncio.run(_insights(data, config, gemini_key))

    if output_json:
        click.echo(format_json(result))
    else:
        click.echo(format_insights(result))
