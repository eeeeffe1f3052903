"""Data models for GitHub issues and the feeds generated from them."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from .utils.date_parser import parse_github_date


@dataclass(frozen=True)
class RepositoryRef:
    """
    A GitHub repository, identified by its owner and name.
    """
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.full_name}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """Parse an `owner/name` string."""
        parts = value.strip().split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"Invalid repository '{value}', expected 'owner/name'.")
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class IssueUser:
    """
    Author of an issue.
    """
    login: Optional[str]
    email: Optional[str] = None
    html_url: Optional[str] = None


@dataclass(frozen=True)
class Issue:
    """
    Issue or pull request as returned by the GitHub issues API.
    """
    created_at: datetime # Creation time, timezone aware.
    title: Optional[str] = None
    body: Optional[str] = None # Markdown.
    html_url: Optional[str] = None
    labels: FrozenSet[str] = frozenset()
    user: Optional[IssueUser] = None
    is_pull_request: bool = False # The API lists pull requests as issues with a `pull_request` key.

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Issue":
        """Build an issue from one element of the API's JSON array."""
        user_payload = payload.get("user")
        user = None
        if user_payload:
            user = IssueUser(
                login=user_payload.get("login"),
                email=user_payload.get("email"),
                html_url=user_payload.get("html_url"),
            )
        labels = frozenset(
            label["name"]
            for label in payload.get("labels") or []
            if isinstance(label, dict) and label.get("name") is not None
        )
        return cls(
            created_at=parse_github_date(payload["created_at"]),
            title=payload.get("title"),
            body=payload.get("body"),
            html_url=payload.get("html_url"),
            labels=labels,
            user=user,
            is_pull_request=payload.get("pull_request") is not None,
        )


class FeedKind(Enum):
    """
    The two feeds generated for each repository.
    """
    ISSUES = ("Issues", "issues", "Issue")
    PULL_REQUESTS = ("Pull Requests", "pr", "PR")

    def __init__(self, title_suffix: str, path_suffix: str, item_prefix: str):
        self.title_suffix = title_suffix # Appended to the repository name in the feed title.
        self.path_suffix = path_suffix # Middle part of the output file name.
        self.item_prefix = item_prefix # Prepended to each item title.

    def output_relative_path(self, repository: RepositoryRef) -> str:
        return f"{repository.full_name}.{self.path_suffix}.rss"


@dataclass(frozen=True)
class FeedPerson:
    """
    Author of a feed or of a feed item.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    uri: Optional[str] = None


@dataclass
class FeedItem:
    """
    Item in a generated feed, one per issue.
    """
    id: str # The issue URL.
    title: str
    content: str # HTML.
    link: str
    publish_date: datetime
    last_updated: datetime
    author: FeedPerson


@dataclass
class Feed:
    """
    Generated RSS feed.
    """
    title: str
    description: str
    link: str
    author: FeedPerson
    items: List[FeedItem] = field(default_factory=list)
    time_to_live: timedelta = timedelta(hours=1)
    last_build_date: Optional[datetime] = None

    @property
    def ttl_minutes(self) -> int:
        return int(self.time_to_live.total_seconds() // 60)


@dataclass
class FeedData:
    """
    A feed and the path, relative to the output directory, it is written to.
    """
    feed: Feed
    output_relative_path: str


@dataclass(frozen=True)
class SiteIdentity:
    """
    Identity of the site publishing the feeds.
    """
    author: FeedPerson
    generator_url: str # Mentioned in every feed description.
    root_url: str # Public URL of the output directory, used by the OPML index.
