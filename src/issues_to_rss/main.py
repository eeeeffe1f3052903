import sys
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from .config import IssuesToRssConfig, load_config, parse_cli_arguments
from .fetch_issues import fetch_issues
from .filter_issues import filter_issues
from .generate_feed import generate_feeds
from .generate_outputs import generate_outputs
from .interfaces.protocols import IssueSourceProtocol, MarkdownRendererProtocol
from .models import FeedData, RepositoryRef
from .render_markdown import MarkdownRenderer


class FeedCollector:
    """
    Collects the feeds produced by concurrent repository workers.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._feeds: List[FeedData] = []

    def add(self, feed_data: FeedData) -> None:
        with self._lock:
            self._feeds.append(feed_data)

    def add_all(self, feeds: Iterable[FeedData]) -> None:
        for feed_data in feeds:
            self.add(feed_data)

    def sorted_feeds(self) -> List[FeedData]:
        """Return the collected feeds ordered by output path."""
        with self._lock:
            return sorted(self._feeds, key=lambda feed_data: feed_data.output_relative_path)


@dataclass
class RunResult:
    """
    Outcome of a run.
    """
    feeds: List[FeedData] = field(default_factory=list) # The written feeds, ordered by output path.
    written_files: List[str] = field(default_factory=list)
    failed: List[RepositoryRef] = field(default_factory=list) # Repositories skipped because they failed.

    @property
    def succeeded(self) -> bool:
        return not self.failed


class Main:
    """
    Main class for the Issues to RSS application.
    """
    def __init__(
            self,
            config: IssuesToRssConfig,
            issue_source: IssueSourceProtocol = fetch_issues,
            renderer: Optional[MarkdownRendererProtocol] = None,
            ):
        self.config = config
        self.issue_source = issue_source
        self.renderer = renderer or MarkdownRenderer()

    def process_repository(
            self,
            repository: RepositoryRef,
            collector: FeedCollector,
            build_date: datetime,
            ) -> None:
        """
        Fetch, filter and convert the issues of one repository, then hand its two feeds to the collector.
        """
        logging.info(f"Generating feed for {repository}")
        issues = self.issue_source(
            repository,
            token=self.config.github_token,
            max_items=self.config.max_items,
            api_url=self.config.api_url,
            timeout=self.config.request_timeout,
        )
        included = filter_issues(issues, self.config.excluded_users, self.config.excluded_labels)
        feeds = generate_feeds(
            repository=repository,
            issues=included,
            renderer=self.renderer,
            site=self.config.site,
            build_date=build_date,
        )
        collector.add_all(feeds)

    def collect_feeds(self, build_date: datetime) -> RunResult:
        """
        Process every repository with bounded parallelism.

        Every repository runs to completion even when another one fails. Then, with `fail_fast`,
        the first failure in configuration order is raised; otherwise failed repositories are
        logged and reported in the result.
        """
        collector = FeedCollector()
        failed: List[RepositoryRef] = []

        with ThreadPoolExecutor(max_workers=self.config.max_concurrency) as executor:
            futures = {
                executor.submit(self.process_repository, repository, collector, build_date): repository
                for repository in self.config.repositories
            }
            wait(futures)

        for future, repository in futures.items():
            error = future.exception()
            if error is None:
                continue
            if self.config.fail_fast:
                raise error
            logging.error(
                f"Failed to generate the feeds of {repository}, skipping it.",
                exc_info=error,
            )
            failed.append(repository)

        return RunResult(feeds=collector.sorted_feeds(), failed=failed)

    def run(self) -> RunResult:
        """
        Run the main application.
        """
        build_date = datetime.now(timezone.utc)
        logging.info(f"Generating feeds for {len(self.config.repositories)} repositories.")
        result = self.collect_feeds(build_date)

        result.written_files = generate_outputs(
            feeds=result.feeds,
            output_dir=self.config.output_dir,
            root_url=self.config.root_url,
            generator_url=self.config.generator_url,
            build_date=build_date,
        )
        logging.info(f"Wrote {len(result.feeds)} feeds to \"{self.config.output_dir}\"")
        return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    cli_args = parse_cli_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if cli_args.verbose else logging.INFO)
    config = load_config(cli_args)
    result = Main(config=config).run()
    if not result.succeeded:
        failed = ", ".join(str(repository) for repository in result.failed)
        logging.error(f"Feeds of {failed} could not be generated.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
