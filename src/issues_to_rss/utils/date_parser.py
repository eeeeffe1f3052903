"""Utilities for parsing GitHub timestamps and formatting feed dates."""

import datetime
from datetime import timezone
from email.utils import format_datetime
from typing import Optional

from dateutil import parser


def parse_github_date(date_str: str) -> datetime.datetime:
    """Parse an ISO 8601 timestamp from the GitHub API into a UTC aware datetime.

    Args:
        date_str: The timestamp, e.g. `2024-04-03T12:00:00Z`.

    Returns:
        A timezone-aware datetime object in UTC. Naive timestamps are assumed to be UTC.

    Raises:
        ValueError: If the string is not a valid ISO 8601 timestamp.
    """
    parsed_date = parser.isoparse(date_str)
    if parsed_date.tzinfo is None:
        return parsed_date.replace(tzinfo=timezone.utc)
    return parsed_date.astimezone(timezone.utc)


def format_rfc822(value: Optional[datetime.datetime]) -> str:
    """Format a datetime the way RSS 2.0 expects (`Wed, 03 Apr 2024 12:00:00 GMT`)."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def format_round_trip(value: datetime.datetime) -> str:
    """Format a datetime as a round-trippable ISO 8601 string in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
