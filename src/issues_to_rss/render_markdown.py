"""Markdown to HTML conversion with an ordered chain of fallbacks."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import markdown

FULL_EXTENSIONS = ["extra", "sane_lists", "smarty"]


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one rendering attempt: either `html` or the `error` that prevented it."""

    html: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.html is not None


@dataclass(frozen=True)
class RenderStrategy:
    """A named way of turning markdown into HTML."""

    name: str
    render: Callable[[Optional[str]], RenderResult]


def converting_strategy(name: str, convert: Callable[[str], str]) -> RenderStrategy:
    """Wrap a converter that may raise into a strategy that reports failures as a result."""

    def render(text: Optional[str]) -> RenderResult:
        try:
            return RenderResult(html=convert(text or ""))
        except Exception as e:
            return RenderResult(error=e)

    return RenderStrategy(name=name, render=render)


def full_strategy() -> RenderStrategy:
    return converting_strategy(
        "full", lambda text: markdown.markdown(text, extensions=FULL_EXTENSIONS)
    )


def minimal_strategy() -> RenderStrategy:
    return converting_strategy("minimal", markdown.markdown)


def passthrough_strategy() -> RenderStrategy:
    return RenderStrategy(name="passthrough", render=lambda text: RenderResult(html=text or ""))


def default_strategies() -> List[RenderStrategy]:
    return [full_strategy(), minimal_strategy(), passthrough_strategy()]


class MarkdownRenderer:
    """
    Renders markdown by trying each strategy in order and keeping the first success.

    With the default strategies this never fails: the last one returns the text unchanged.
    """

    def __init__(self, strategies: Optional[Sequence[RenderStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()

    def render(self, text: Optional[str]) -> str:
        for strategy in self.strategies:
            result = strategy.render(text)
            if result.ok:
                return result.html
            logging.debug(f"Markdown strategy '{strategy.name}' failed: {result.error}")
        return text or ""
