"""Tests for the orchestration of a full run."""

import os
import sys
import tempfile
import threading
import time
import unittest
import xml.etree.ElementTree as ET
from unittest.mock import patch

from bs4 import BeautifulSoup

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from issues_to_rss.config import IssuesToRssConfig
from issues_to_rss.fetch_issues import IssueFetchError
from issues_to_rss.main import FeedCollector, Main, main
from issues_to_rss.models import RepositoryRef
from test_utils import (
    FakeIssueSource,
    generate_test_issue,
    generate_test_payload,
    generate_test_response,
    generate_test_site,
)


def generate_test_config(output_dir: str, repositories, **overrides) -> IssuesToRssConfig:
    site = generate_test_site()
    values = dict(
        output_dir=output_dir,
        github_token="token",
        repositories=[RepositoryRef.parse(repository) for repository in repositories],
        excluded_users=frozenset({"dotnet-bot"}),
        excluded_labels=frozenset({"dependencies"}),
        root_url=site.root_url,
        generator_url=site.generator_url,
        site_author=site.author,
        max_concurrency=4,
    )
    values.update(overrides)
    return IssuesToRssConfig(**values)


def list_files(directory: str):
    return sorted(
        os.path.relpath(os.path.join(root, name), directory).replace(os.sep, "/")
        for root, _, names in os.walk(directory)
        for name in names
    )


class RunTestCase(unittest.TestCase):
    """Base class managing a temporary output directory."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self.temp_dir.name, "output")

    def tearDown(self):
        self.temp_dir.cleanup()


class TestFeedCollector(unittest.TestCase):
    """Tests for FeedCollector."""

    def test_concurrent_adds(self):
        from issues_to_rss.models import Feed, FeedData, FeedPerson

        collector = FeedCollector()

        def add(index):
            feed = Feed(title=str(index), description="", link="", author=FeedPerson())
            collector.add(FeedData(feed=feed, output_relative_path=f"x/{index:03d}.rss"))

        threads = [threading.Thread(target=add, args=(i,)) for i in reversed(range(100))]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        paths = [feed_data.output_relative_path for feed_data in collector.sorted_feeds()]
        self.assertEqual(paths, [f"x/{i:03d}.rss" for i in range(100)])


class TestMain(RunTestCase):
    """Tests for Main.run."""

    def test_end_to_end(self):
        source = FakeIssueSource({
            "a/c": [generate_test_issue(1, repository="a/c")],
            "a/b": [generate_test_issue(1, repository="a/b")],
        })
        config = generate_test_config(self.output_dir, ["a/c", "a/b"])

        result = Main(config, issue_source=source).run()

        self.assertTrue(result.succeeded)
        self.assertEqual(
            list_files(self.output_dir),
            ["a/b.issues.rss", "a/b.pr.rss", "a/c.issues.rss", "a/c.pr.rss", "feeds.opml", "index.html"],
        )
        expected_order = ["a/b.issues.rss", "a/b.pr.rss", "a/c.issues.rss", "a/c.pr.rss"]
        self.assertEqual([feed_data.output_relative_path for feed_data in result.feeds], expected_order)

        outlines = ET.parse(os.path.join(self.output_dir, "feeds.opml")).getroot().findall("body/outline")
        self.assertEqual(
            [outline.get("xmlUrl") for outline in outlines],
            [f"https://example.github.io/feeds/{path}" for path in expected_order],
        )

        with open(os.path.join(self.output_dir, "index.html"), encoding="utf-8") as f:
            soup = BeautifulSoup(f.read(), "html.parser")
        self.assertEqual([link["href"] for link in soup.select("ul li a")], expected_order)

    def test_passes_config_to_source(self):
        source = FakeIssueSource({})
        config = generate_test_config(self.output_dir, ["a/b"], max_items=50)

        Main(config, issue_source=source).run()

        self.assertEqual(source.calls, [{"repository": RepositoryRef("a", "b"), "token": "token", "max_items": 50}])

    def test_excluded_items_never_appear(self):
        source = FakeIssueSource({
            "a/b": [
                generate_test_issue(1),
                generate_test_issue(2, login="DotNet-Bot"),
                generate_test_issue(3, is_pull_request=True, login="dotnet-bot"),
                generate_test_issue(4, is_pull_request=True, labels=["Dependencies"]),
                generate_test_issue(5, is_pull_request=True),
            ],
        })
        config = generate_test_config(self.output_dir, ["a/b"])

        result = Main(config, issue_source=source).run()

        issues_feed, prs_feed = result.feeds
        self.assertEqual([item.id for item in issues_feed.feed.items], ["https://github.com/a/b/issues/1"])
        self.assertEqual([item.id for item in prs_feed.feed.items], ["https://github.com/a/b/pull/5"])

    def test_fail_fast_writes_nothing(self):
        source = FakeIssueSource(
            {"a/b": [generate_test_issue(1)]},
            failing={"a/c": IssueFetchError(RepositoryRef("a", "c"), "https://api.github.com/x", 500)},
        )
        config = generate_test_config(self.output_dir, ["a/b", "a/c"])

        with self.assertRaises(IssueFetchError):
            Main(config, issue_source=source).run()

        self.assertFalse(os.path.exists(self.output_dir))

    def test_isolated_failure_writes_other_repositories(self):
        source = FakeIssueSource(
            {"a/b": [generate_test_issue(1)]},
            failing={"a/c": IssueFetchError(RepositoryRef("a", "c"), "https://api.github.com/x", 500)},
        )
        config = generate_test_config(self.output_dir, ["a/b", "a/c"], fail_fast=False)

        with self.assertLogs(level="ERROR"):
            result = Main(config, issue_source=source).run()

        self.assertFalse(result.succeeded)
        self.assertEqual(result.failed, [RepositoryRef("a", "c")])
        self.assertEqual(
            list_files(self.output_dir),
            ["a/b.issues.rss", "a/b.pr.rss", "feeds.opml", "index.html"],
        )

    def test_concurrency_is_bounded(self):
        lock = threading.Lock()
        state = {"running": 0, "max": 0}

        def slow_source(repository, token=None, max_items=200, api_url=None, timeout=None):
            with lock:
                state["running"] += 1
                state["max"] = max(state["max"], state["running"])
            time.sleep(0.02)
            with lock:
                state["running"] -= 1
            return []

        repositories = [f"owner/repo{i}" for i in range(12)]
        config = generate_test_config(self.output_dir, repositories, max_concurrency=3)

        result = Main(config, issue_source=slow_source).run()

        self.assertLessEqual(state["max"], 3)
        self.assertEqual(len(result.feeds), 24)


class TestCommandLine(RunTestCase):
    """Tests for the console entry point with a mocked GitHub API."""

    def setUp(self):
        super().setUp()
        self.original_environ = dict(os.environ)
        os.environ["ISSUES_TO_RSS_REPOSITORIES"] = "a/b"
        os.environ.pop("GITHUB_TOKEN", None)

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self.original_environ)
        super().tearDown()

    @patch("issues_to_rss.config.load_dotenv")
    @patch("requests.get")
    def test_main(self, mock_get, mock_load_dotenv):
        mock_get.return_value = generate_test_response([
            generate_test_payload(2, is_pull_request=True),
            generate_test_payload(1),
        ])

        exit_code = main([self.output_dir, "cli-token"])

        self.assertEqual(exit_code, 0)
        self.assertEqual(
            mock_get.call_args.kwargs["headers"]["Authorization"], "Bearer cli-token"
        )
        self.assertEqual(
            list_files(self.output_dir),
            ["a/b.issues.rss", "a/b.pr.rss", "feeds.opml", "index.html"],
        )

    @patch("issues_to_rss.config.load_dotenv")
    @patch("requests.get")
    def test_main_http_error(self, mock_get, mock_load_dotenv):
        mock_get.return_value = generate_test_response([], status_code=403)

        with self.assertRaises(IssueFetchError):
            main([self.output_dir])

        self.assertFalse(os.path.exists(self.output_dir))

    @patch("issues_to_rss.config.load_dotenv")
    @patch("requests.get")
    def test_main_isolated_failure_exit_code(self, mock_get, mock_load_dotenv):
        os.environ["ISSUES_TO_RSS_FAIL_FAST"] = "false"
        mock_get.return_value = generate_test_response([], status_code=500)

        with self.assertLogs(level="ERROR"):
            exit_code = main([self.output_dir])

        self.assertEqual(exit_code, 1)
        self.assertEqual(list_files(self.output_dir), ["feeds.opml", "index.html"])


if __name__ == "__main__":
    unittest.main()
