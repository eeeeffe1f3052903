import os
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from . import __version__
from .models import FeedData, FeedPerson
from .utils.date_parser import format_rfc822, format_round_trip

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
OPML_FILE_NAME = "feeds.opml"
OPML_TITLE = "GitHub issues feeds"
INDEX_FILE_NAME = "index.html"
GENERATOR = f"issues-to-rss {__version__}"


def format_person(person: FeedPerson) -> str:
    """
    Format a person as RSS 2.0 expects in `author` and `managingEditor`: `email (name)`.
    """
    if person.name:
        return f"{person.email} ({person.name})"
    return person.email or ""


def create_environment(template_dir: Optional[str] = None) -> Environment:
    """
    Create the Jinja environment used for every output. All outputs are XML or HTML, so
    autoescaping is always on.
    """
    env = Environment(
        loader=FileSystemLoader(template_dir or TEMPLATE_DIR),
        autoescape=True,
        keep_trailing_newline=True,
    )
    env.filters["rfc822"] = format_rfc822
    env.filters["person"] = format_person
    return env


def write_output(output_dir: str, relative_path: str, content: str) -> str:
    """
    Write `content` to `relative_path` inside `output_dir`, creating parent directories.

    Returns:
        str: The path of the written file.
    """
    save_path = os.path.join(output_dir, relative_path)
    parent_dir = os.path.dirname(save_path)
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)
    with open(save_path, "w", encoding="utf-8") as f:
        f.write(content)
    return save_path


def write_feed(feed_data: FeedData, output_dir: str, env: Optional[Environment] = None) -> str:
    """
    Serialize a feed to RSS 2.0 at its relative path inside `output_dir`.
    """
    env = env or create_environment()
    logging.info(f"Writing feed '{feed_data.output_relative_path}'")
    content = env.get_template("feed.rss.j2").render(
        feed=feed_data.feed,
        generator=GENERATOR,
    )
    return write_output(output_dir, feed_data.output_relative_path, content)


def write_opml(
    feeds: Sequence[FeedData],
    output_dir: str,
    root_url: str,
    env: Optional[Environment] = None,
) -> str:
    """
    Write the OPML index listing every feed. Feed URLs are `root_url` followed by the relative path.
    """
    env = env or create_environment()
    logging.info("Generating opml")
    content = env.get_template("feeds.opml.j2").render(
        feeds=feeds,
        root_url=root_url,
        title=OPML_TITLE,
    )
    return write_output(output_dir, OPML_FILE_NAME, content)


def write_index(
    feeds: Sequence[FeedData],
    output_dir: str,
    generator_url: str,
    build_date: Optional[datetime] = None,
    env: Optional[Environment] = None,
) -> str:
    """
    Write the HTML landing page linking to every feed.
    """
    env = env or create_environment()
    logging.info("Generating index")
    content = env.get_template("index.html.j2").render(
        feeds=feeds,
        build_date=format_round_trip(build_date or datetime.now(timezone.utc)),
        generator_url=generator_url,
    )
    return write_output(output_dir, INDEX_FILE_NAME, content)


def generate_outputs(
    feeds: Sequence[FeedData],
    output_dir: str,
    root_url: str,
    generator_url: str,
    build_date: Optional[datetime] = None,
    template_dir: Optional[str] = None,
) -> List[str]:
    """
    Write every feed, then the OPML index and the HTML page, in the order of `feeds`.

    Returns:
        List[str]: The paths of the written files.
    """
    env = create_environment(template_dir)
    output_dir = os.path.abspath(output_dir)
    os.makedirs(output_dir, exist_ok=True)

    written = [write_feed(feed_data, output_dir, env) for feed_data in feeds]
    written.append(write_opml(feeds, output_dir, root_url, env))
    written.append(write_index(feeds, output_dir, generator_url, build_date, env))
    return written
