import logging
from itertools import islice
from typing import Dict, Iterator, Optional

import requests

from .models import Issue, RepositoryRef

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "issuetorss/1.0.0"
PAGE_SIZE = 100
DEFAULT_MAX_ITEMS = 200
DEFAULT_TIMEOUT = 30


class IssueFetchError(Exception):
    """
    Raised when the GitHub API answers a page request with a non-success status.
    """
    def __init__(self, repository: RepositoryRef, url: str, status_code: int):
        super().__init__(
            f"Failed to fetch the issues of {repository} from {url}. Code: {status_code}"
        )
        self.repository = repository
        self.url = url
        self.status_code = status_code


def first_page_url(repository: RepositoryRef, api_url: str = GITHUB_API_URL) -> str:
    return (
        f"{api_url}/repos/{repository.owner}/{repository.name}/issues"
        f"?state=all&sort=created&direction=desc&per_page={PAGE_SIZE}&page=1"
    )


def request_headers(token: Optional[str] = None) -> Dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _iter_pages(
    repository: RepositoryRef,
    token: Optional[str],
    api_url: str,
    timeout: float,
) -> Iterator[Issue]:
    url: Optional[str] = first_page_url(repository, api_url)
    headers = request_headers(token)
    page = 1
    while url is not None:
        logging.info(f"Fetching page {page} of {repository}.")
        response = requests.get(url, headers=headers, timeout=timeout)

        if not response.ok:
            raise IssueFetchError(repository, url, response.status_code)

        for payload in response.json():
            yield Issue.from_api(payload)

        url = response.links.get("next", {}).get("url")
        page += 1


def fetch_issues(
    repository: RepositoryRef,
    token: Optional[str] = None,
    max_items: int = DEFAULT_MAX_ITEMS,
    api_url: str = GITHUB_API_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Iterator[Issue]:
    """
    Fetch the issues and pull requests of a repository, newest first.

    Pages are requested lazily by following the `next` link of each response, so no
    page beyond the one holding the `max_items`-th issue is ever requested.
    """
    return islice(_iter_pages(repository, token, api_url, timeout), max_items)
