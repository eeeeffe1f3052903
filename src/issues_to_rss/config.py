"""Configuration handling for Issues to RSS using dataclasses, CLI arguments and environment variables."""

import os
from argparse import ArgumentParser, Namespace as ArgNamespace
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence

from dotenv import load_dotenv

from .fetch_issues import DEFAULT_MAX_ITEMS, DEFAULT_TIMEOUT, GITHUB_API_URL
from .models import FeedPerson, RepositoryRef, SiteIdentity

GITHUB_REPOSITORY_URL = "https://github.com/meziantou/IssuesToRss/"
ROOT_URL = "https://meziantou.github.io/IssuesToRss/"
DEFAULT_MAX_CONCURRENCY = 16

DEFAULT_REPOSITORIES = [
    "dotnet/announcements",
    "dotnet/aspire",
    "dotnet/aspnetcore",
    "dotnet/AspNetCore.Docs",
    "dotnet/csharplang",
    "dotnet/docs",
    "dotnet/docs-desktop",
    "dotnet/efcore",
    "dotnet/EntityFramework.Docs",
    "dotnet/format",
    "dotnet/fsharp",
    "dotnet/interactive",
    "dotnet/machinelearning",
    "dotnet/msbuild",
    "dotnet/orleans",
    "dotnet/roslyn",
    "dotnet/roslyn-analyzers",
    "dotnet/runtime",
    "dotnet/runtimelab",
    "dotnet/sdk",
    "dotnet/SqlClient",
    "dotnet/windowsdesktop",
    "dotnet/winforms",
    "dotnet/wpf",
]

DEFAULT_EXCLUDED_USERS = [
    "cxwtool",
    "dependabot",
    "dependabot[bot]",
    "dotnet-bot",
    "dotnet-maestro-bot",
    "dotnet-maestro[bot]",
    "pr-benchmarks[bot]",
]

DEFAULT_EXCLUDED_LABELS = [
    "Type: Dependency Update :arrow_up_small:",
]

DEFAULT_SITE_AUTHOR = FeedPerson(
    name="Gérald Barré",
    email="dummy@example.com",
    uri="https://www.meziantou.net/",
)


def get_env_str(key: str, default: str | None = None) -> str:
    """Get a string environment variable."""
    value = os.environ.get(key)
    if value is None:
        if default is None:
            raise ValueError(f"Required environment variable {key} is not set.")
        return default
    return value


def get_env_int(key: str, default: int | None = None) -> int:
    """Get an integer environment variable."""
    value_str = os.environ.get(key)
    if value_str is None:
        if default is None:
            raise ValueError(f"Required environment variable {key} is not set.")
        return default
    try:
        return int(value_str)
    except ValueError as e:
        raise ValueError(f"Environment variable {key} must be an integer.") from e


def get_env_float(key: str, default: float | None = None) -> float:
    """Get a float environment variable."""
    value_str = os.environ.get(key)
    if value_str is None:
        if default is None:
            raise ValueError(f"Required environment variable {key} is not set.")
        return default
    try:
        return float(value_str)
    except ValueError as e:
        raise ValueError(f"Environment variable {key} must be a number.") from e


def get_env_bool(key: str, default: bool) -> bool:
    """Get a boolean environment variable (true/false, yes/no, 1/0)."""
    value_str = os.environ.get(key)
    if value_str is None:
        return default
    normalized = value_str.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Environment variable {key} must be a boolean.")


def get_env_list(key: str, default: List[str] | None = None) -> List[str]:
    """Get a list of strings environment variable (comma or newline separated)."""
    value_str = os.environ.get(key)
    if value_str is None:
        if default is None:
            raise ValueError(f"Required environment variable {key} is not set.")
        return default

    # Split by newline first, then by comma, and filter empty strings
    items = []
    for line in value_str.split("\n"):
        items.extend(item.strip() for item in line.split(",") if item.strip())
    return items


@dataclass(frozen=True)
class IssuesToRssConfig:
    """Configuration settings for Issues to RSS."""

    output_dir: str
    github_token: Optional[str] = field(default=None, repr=False)  # Avoid printing the token
    repositories: List[RepositoryRef] = field(
        default_factory=lambda: [RepositoryRef.parse(r) for r in DEFAULT_REPOSITORIES]
    )
    excluded_users: FrozenSet[str] = frozenset(DEFAULT_EXCLUDED_USERS)
    excluded_labels: FrozenSet[str] = frozenset(DEFAULT_EXCLUDED_LABELS)
    root_url: str = ROOT_URL
    generator_url: str = GITHUB_REPOSITORY_URL
    site_author: FeedPerson = DEFAULT_SITE_AUTHOR
    api_url: str = GITHUB_API_URL
    max_items: int = DEFAULT_MAX_ITEMS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    request_timeout: float = DEFAULT_TIMEOUT
    fail_fast: bool = True  # Abort the whole run when one repository cannot be fetched

    @property
    def site(self) -> SiteIdentity:
        return SiteIdentity(
            author=self.site_author,
            generator_url=self.generator_url,
            root_url=self.root_url,
        )

    @classmethod
    def from_environment(
        cls, output_dir: str, github_token: Optional[str] = None
    ) -> "IssuesToRssConfig":
        """Load configuration from environment variables, falling back to the built-in defaults."""
        max_concurrency = get_env_int("ISSUES_TO_RSS_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY)
        if max_concurrency < 1:
            raise ValueError("Environment variable ISSUES_TO_RSS_MAX_CONCURRENCY must be at least 1.")

        return cls(
            output_dir=output_dir,
            github_token=github_token or os.environ.get("GITHUB_TOKEN") or None,
            repositories=[
                RepositoryRef.parse(repository)
                for repository in get_env_list("ISSUES_TO_RSS_REPOSITORIES", DEFAULT_REPOSITORIES)
            ],
            excluded_users=frozenset(
                get_env_list("ISSUES_TO_RSS_EXCLUDED_USERS", DEFAULT_EXCLUDED_USERS)
            ),
            excluded_labels=frozenset(
                get_env_list("ISSUES_TO_RSS_EXCLUDED_LABELS", DEFAULT_EXCLUDED_LABELS)
            ),
            root_url=get_env_str("ISSUES_TO_RSS_ROOT_URL", ROOT_URL),
            site_author=FeedPerson(
                name=get_env_str("ISSUES_TO_RSS_AUTHOR_NAME", DEFAULT_SITE_AUTHOR.name),
                email=get_env_str("ISSUES_TO_RSS_AUTHOR_EMAIL", DEFAULT_SITE_AUTHOR.email),
                uri=get_env_str("ISSUES_TO_RSS_AUTHOR_URI", DEFAULT_SITE_AUTHOR.uri),
            ),
            max_items=get_env_int("ISSUES_TO_RSS_MAX_ITEMS", DEFAULT_MAX_ITEMS),
            max_concurrency=max_concurrency,
            request_timeout=get_env_float("ISSUES_TO_RSS_REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            fail_fast=get_env_bool("ISSUES_TO_RSS_FAIL_FAST", True),
        )


def parse_cli_arguments(argv: Optional[Sequence[str]] = None) -> ArgNamespace:
    """
    Parse the command line arguments.
    """
    parser = ArgumentParser(
        prog="issues-to-rss",
        description="Generate RSS feeds from the issues and pull requests of GitHub repositories.",
    )
    parser.add_argument(
        "output_dir",
        help="The directory to write the feeds, feeds.opml and index.html to.",
    )
    parser.add_argument(
        "github_token",
        nargs="?",
        default=None,
        help="A GitHub access token. Defaults to the GITHUB_TOKEN environment variable.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def load_config(cli_args: ArgNamespace) -> IssuesToRssConfig:
    """
    Load the configuration from the parsed CLI arguments, the environment and the `.env` file.
    """
    load_dotenv()
    return IssuesToRssConfig.from_environment(
        output_dir=cli_args.output_dir,
        github_token=cli_args.github_token,
    )
