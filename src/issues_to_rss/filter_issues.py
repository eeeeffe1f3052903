import logging
from typing import AbstractSet, Iterable, Iterator

from .models import Issue


def _casefold_set(values: Iterable[str]) -> frozenset:
    return frozenset(value.casefold() for value in values)


def is_issue_included(
    issue: Issue,
    excluded_users: AbstractSet[str],
    excluded_labels: AbstractSet[str],
) -> bool:
    """
    Check whether an issue survives the exclusion lists. Both lists are matched case-insensitively.
    """
    users = _casefold_set(excluded_users)
    labels = _casefold_set(excluded_labels)

    login = issue.user.login if issue.user else None
    if login is not None and login.casefold() in users:
        return False

    return not any(label.casefold() in labels for label in issue.labels)


def filter_issues(
    issues: Iterable[Issue],
    excluded_users: AbstractSet[str],
    excluded_labels: AbstractSet[str],
) -> Iterator[Issue]:
    """
    Yield the issues that pass `is_issue_included`, in their original order.
    """
    users = _casefold_set(excluded_users)
    labels = _casefold_set(excluded_labels)
    for issue in issues:
        if is_issue_included(issue, users, labels):
            yield issue
        else:
            logging.debug(f"Excluded: \"{issue.html_url}\"")
