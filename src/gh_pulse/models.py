"""Data models for gh-pulse contribution aggregation."""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


class GitHubUser(BaseModel):
    """Profile of the authenticated GitHub user."""
    login: str
    name: str | None = None
    avatar_url: str = ""
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    company: str | None = None
    location: str | None = None
    email: str | None = None
    blog: str | None = None
    twitter_username: str | None = None
    hireable: bool | None = None


class License(BaseModel):
    name: str
    spdx_id: str | None = None


class Repository(BaseModel):
    """A repository visible to the authenticated user."""
    id: int
    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    size: int = 0
    created_at: dt.datetime
    updated_at: dt.datetime
    pushed_at: dt.datetime | None = None
    html_url: str = ""
    topics: list[str] = []
    license: License | None = None
    archived: bool = False
    disabled: bool = False
    private: bool = False

    @property
    def owner_login(self) -> str:
        return self.full_name.split("/", 1)[0]

    @property
    def is_active(self) -> bool:
        """Archived and disabled repositories are skipped by per-repo collectors."""
        return not self.archived and not self.disabled


class RepoRef(BaseModel):
    """Reference to the repository owning a PR, issue or commit."""
    name: str
    full_name: str
    owner: str

    @classmethod
    def from_api_url(cls, url: str) -> RepoRef:
        """Build from a ``.../repos/{owner}/{name}`` API URL."""
        owner, name = url.rstrip("/").split("/")[-2:]
        return cls(name=name, full_name=f"{owner}/{name}", owner=owner)


class Label(BaseModel):
    name: str
    color: str = ""


class PullRequestAuthor(BaseModel):
    login: str = ""
    avatar_url: str = ""


class PullRequest(BaseModel):
    """A pull request authored by the user, enriched with detail fields."""
    id: int
    number: int
    title: str
    state: str
    created_at: dt.datetime
    updated_at: dt.datetime
    closed_at: dt.datetime | None = None
    merged_at: dt.datetime | None = None
    repository: RepoRef
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    commits: int = 0
    comments: int = 0
    author: PullRequestAuthor = Field(default_factory=PullRequestAuthor)
    labels: list[Label] = []


class Issue(BaseModel):
    """An issue authored by the user."""
    id: int
    number: int
    title: str
    state: str
    created_at: dt.datetime
    updated_at: dt.datetime
    closed_at: dt.datetime | None = None
    repository: RepoRef
    labels: list[Label] = []
    comments: int = 0


class CommitAuthor(BaseModel):
    name: str = ""
    email: str = ""
    date: dt.datetime


class CommitStats(BaseModel):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class Commit(BaseModel):
    """A commit authored by the user in one of their repositories."""
    sha: str
    message: str
    author: CommitAuthor
    repository: RepoRef
    stats: CommitStats | None = None


class ContributionDay(BaseModel):
    contribution_count: int
    date: dt.date
    weekday: int = Field(ge=0, le=6)


class ContributionWeek(BaseModel):
    contribution_days: list[ContributionDay] = []


class ContributionCalendar(BaseModel):
    """Trailing twelve months of daily contribution counts."""
    total_contributions: int = 0
    weeks: list[ContributionWeek] = []

    def days(self) -> list[ContributionDay]:
        """All days, oldest first."""
        return [day for week in self.weeks for day in week.contribution_days]


class RepositoryContribution(BaseModel):
    """Commit contribution count for one repository over the calendar window."""
    name: str
    owner: str
    total_count: int = 0


class ContributionsCollection(BaseModel):
    calendar: ContributionCalendar
    repository_contributions: list[RepositoryContribution] = []


class LanguageShare(BaseModel):
    name: str
    count: int
    percentage: int


class Collaborator(BaseModel):
    login: str
    avatar_url: str = ""
    contributions: int = 0


class TimelineEventType(StrEnum):
    """Kinds of events merged into the timeline."""
    COMMIT = "commit"
    PULL_REQUEST = "pr"
    ISSUE = "issue"
    REPOSITORY = "repo"


class TimelineDetails(BaseModel):
    """Records behind one timeline bucket; only the list for its type is filled."""
    repos: list[Repository] = []
    prs: list[PullRequest] = []
    issues: list[Issue] = []
    commits: list[Commit] = []


_DETAILS_FIELD: dict[TimelineEventType, str] = {
    TimelineEventType.REPOSITORY: "repos",
    TimelineEventType.PULL_REQUEST: "prs",
    TimelineEventType.ISSUE: "issues",
    TimelineEventType.COMMIT: "commits",
}


class TimelineEntry(BaseModel):
    """All events of one type on one calendar date."""
    date: dt.date
    type: TimelineEventType
    details: TimelineDetails = Field(default_factory=TimelineDetails)

    def records(self) -> list[Repository] | list[PullRequest] | list[Issue] | list[Commit]:
        """The details list matching this entry's type."""
        return getattr(self.details, _DETAILS_FIELD[self.type])  # type: ignore[no-any-return]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def count(self) -> int:
        return len(self.records())


class ContributionStats(BaseModel):
    """Statistics derived once per aggregation run."""
    total_commits: int = 0
    total_prs: int = 0
    total_issues: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_watchers: int = 0
    total_repositories: int = 0
    lines_of_code: int = 0
    top_languages: list[LanguageShare] = []
    contribution_streak: int = 0
    most_active_day: str = "Monday"
    # Hour-of-day activity is not exposed by the calendar API.
    most_active_hour: int | None = None
    contribution_score: int = 0
    impact_score: int = 0
    collaboration_score: int = 0


class ContributionData(BaseModel):
    """Consolidated result of one aggregation run."""
    user: GitHubUser
    repositories: list[Repository] = []
    pull_requests: list[PullRequest] = []
    issues: list[Issue] = []
    recent_commits: list[Commit] = []
    contribution_calendar: ContributionCalendar = Field(
        default_factory=ContributionCalendar
    )
    repository_contributions: list[RepositoryContribution] = []
    languages: dict[str, int] = {}
    stats: ContributionStats = Field(default_factory=ContributionStats)
    timeline: list[TimelineEntry] = []
    collaborators: list[Collaborator] = []


class InsightType(StrEnum):
    SKILL = "skill"
    TREND = "trend"
    OPPORTUNITY = "opportunity"
    ACHIEVEMENT = "achievement"


class Insight(BaseModel):
    """One observation about a developer profile."""
    type: InsightType
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    confidence: float = Field(ge=0.0, le=1.0)
    actionable: bool
