"""Text helpers shared by the page parsers."""

import re
from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    return re.sub(r"\s+", " ", text).strip()


def title_case_slug(slug: str) -> str:
    """
    Turn a hyphenated slug into a display label.

    Examples:
        "yelmo-icaria" → "Yelmo Icaria"
        "cines-verdi" → "Cines Verdi"
    """
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


def first_non_empty(strategies: Iterable[Callable[[T], str]], subject: T) -> str:
    """
    Evaluate candidate-producing strategies in order and return the first non-empty result.

    Args:
        strategies: Callables taking ``subject`` and returning a candidate string
        subject: The value every strategy inspects

    Returns:
        The first non-empty candidate, or "" when every strategy comes up empty
    """
    for strategy in strategies:
        candidate = strategy(subject)
        if candidate:
            return candidate
    return ""
