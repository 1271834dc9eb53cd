"""Example: Summarise GitHub activity with gh-pulse."""

from __future__ import annotations

import asyncio
import os

from gh_pulse import aggregate_contributions
from gh_pulse.insights import generate_insights


async def main() -> None:
    data = await aggregate_contributions(token=os.environ["GITHUB_TOKEN"])
    stats = data.stats
    print(f"User: {data.user.login}")
    print(f"Contributions: {stats.total_commits} | Streak: {stats.contribution_streak} days")
    print(f"Scores: {stats.contribution_score} / {stats.impact_score} / "
          f"{stats.collaboration_score}")

    for entry in data.timeline[:5]:
        print(f"{entry.date}: {entry.count} {entry.type.value}")

    for insight in await generate_insights(data):
        print(f"[{insight.type.value}] {insight.title}")


if __name__ == "__main__":
    asyncio.run(main())
