import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .interfaces.protocols import MarkdownRendererProtocol
from .models import (
    Feed,
    FeedData,
    FeedItem,
    FeedKind,
    FeedPerson,
    Issue,
    RepositoryRef,
    SiteIdentity,
)
from .sanitize import sanitize_string

FEED_TIME_TO_LIVE = timedelta(hours=1)


def generate_feed_item(
    issue: Issue, # The issue to convert
    renderer: MarkdownRendererProtocol, # Converts the markdown body to HTML
) -> FeedItem:
    """
    Generate a feed item from an issue.
    """
    kind = FeedKind.PULL_REQUESTS if issue.is_pull_request else FeedKind.ISSUES
    login = issue.user.login if issue.user else None
    title = f"{kind.item_prefix}: {issue.title or ''} - @{login or ''}"

    return FeedItem(
        id=issue.html_url or "",
        title=sanitize_string(title),
        content=sanitize_string(renderer.render(issue.body)),
        link=issue.html_url or "",
        publish_date=issue.created_at,
        last_updated=issue.created_at,
        author=FeedPerson(
            name=login,
            email=issue.user.email if issue.user else None,
            uri=issue.user.html_url if issue.user else None,
        ),
    )


def generate_feed(
    repository: RepositoryRef,
    kind: FeedKind,
    items: List[FeedItem],
    site: SiteIdentity,
    build_date: Optional[datetime] = None,
) -> FeedData:
    """
    Generate one of the two feeds of a repository.
    """
    feed = Feed(
        title=f"{repository.full_name} {kind.title_suffix}",
        description=f"{kind.title_suffix} from {repository.html_url}, generated by {site.generator_url}",
        link=repository.html_url,
        author=site.author,
        items=items,
        time_to_live=FEED_TIME_TO_LIVE,
        last_build_date=build_date or datetime.now(timezone.utc),
    )
    return FeedData(feed=feed, output_relative_path=kind.output_relative_path(repository))


def generate_feeds(
    repository: RepositoryRef,
    issues: Iterable[Issue],
    renderer: MarkdownRendererProtocol,
    site: SiteIdentity,
    build_date: Optional[datetime] = None,
) -> List[FeedData]:
    """
    Split the issues of a repository into an issues feed and a pull requests feed.

    Both feeds are always returned, issues first, and keep the order of `issues`.
    """
    issue_items: List[FeedItem] = []
    pr_items: List[FeedItem] = []
    for issue in issues:
        item = generate_feed_item(issue, renderer)
        if issue.is_pull_request:
            pr_items.append(item)
        else:
            issue_items.append(item)

    logging.info(f"Generated feeds for {repository}: {len(issue_items)} issues, {len(pr_items)} pull requests")
    return [
        generate_feed(repository, FeedKind.ISSUES, issue_items, site, build_date),
        generate_feed(repository, FeedKind.PULL_REQUESTS, pr_items, site, build_date),
    ]
