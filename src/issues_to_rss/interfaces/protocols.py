"""Defines protocols for dependency injection and mocking core components."""

from typing import Iterable, Optional, Protocol

from ..models import Issue, RepositoryRef


class IssueSourceProtocol(Protocol):
    """Protocol defining how the issues of a repository are obtained."""

    def __call__(
        self,
        repository: RepositoryRef,
        token: Optional[str] = None,
        max_items: int = ...,
        api_url: str = ...,
        timeout: float = ...,
    ) -> Iterable[Issue]:
        """Return the issues of `repository`, newest first, at most `max_items` of them."""
        ...


class MarkdownRendererProtocol(Protocol):
    """Protocol defining the interface for markdown rendering."""

    def render(self, text: Optional[str]) -> str:
        """Convert markdown to HTML. Must not raise for malformed input."""
        ...
