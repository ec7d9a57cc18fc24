"""Booking-link parsing shared by the detail and overview parsers."""

import logging
import re
from collections.abc import Callable
from datetime import date
from urllib.parse import urljoin

from bs4 import Tag

from cinevo.config import settings
from cinevo.schemas.movie import Cinema, Showtime
from cinevo.scrapers.models import ShowtimeLink
from cinevo.utils.text import collapse_whitespace, first_non_empty, title_case_slug

logger = logging.getLogger(__name__)

TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")
CINEMA_SLUG_RE = re.compile(r"/r/([^/?#]+)/")
SHOWTIME_ID_RE = re.compile(r"/(\d+)/?(?:[?#].*)?$")
TOOLTIP_CINEMA_RE = re.compile(r"\bat\s+(.+)$")
DECORATION_RE = re.compile(r"[*•·|]+")


def parse_booking_link(link: Tag) -> ShowtimeLink | None:
    """
    Extract time, cinema slug and showtime id from a booking anchor.

    Returns None when the link text has no clock time or the href has no
    cinema segment.
    """
    href = str(link.get("href", ""))
    text = collapse_whitespace(link.get_text(separator=" "))

    time_match = TIME_RE.search(text)
    if not time_match:
        logger.debug(f"Skipping booking link without a time: {href}")
        return None

    hour, minute = int(time_match.group(1)), int(time_match.group(2))
    if hour > 23 or minute > 59:
        return None

    cinema_match = CINEMA_SLUG_RE.search(href)
    if not cinema_match:
        logger.debug(f"Skipping booking link without a cinema: {href}")
        return None

    id_match = SHOWTIME_ID_RE.search(href)

    return ShowtimeLink(
        href=href,
        time=f"{hour:02d}:{minute:02d}",
        cinema_slug=cinema_match.group(1),
        showtime_id=id_match.group(1) if id_match else None,
        text=text,
        tooltip=collapse_whitespace(str(link.get("title", ""))),
    )


# ---------------------------------------------------------------------------
# Cinema name strategies
# ---------------------------------------------------------------------------


def name_from_link_text(link: ShowtimeLink) -> str:
    """Link text with the time token and decorative markers removed."""
    remainder = TIME_RE.sub("", link.text, count=1)
    return collapse_whitespace(DECORATION_RE.sub(" ", remainder))


def name_from_tooltip(link: ShowtimeLink) -> str:
    """The cinema named after "at " in the tooltip."""
    m = TOOLTIP_CINEMA_RE.search(link.tooltip)
    return m.group(1).strip() if m else ""


def name_from_slug(link: ShowtimeLink) -> str:
    return title_case_slug(link.cinema_slug)


DETAIL_CINEMA_NAME_STRATEGIES: tuple[Callable[[ShowtimeLink], str], ...] = (
    name_from_link_text,
    name_from_slug,
)
OVERVIEW_CINEMA_NAME_STRATEGIES: tuple[Callable[[ShowtimeLink], str], ...] = (
    name_from_tooltip,
    name_from_slug,
)


def resolve_cinema_name(
    link: ShowtimeLink, strategies: tuple[Callable[[ShowtimeLink], str], ...]
) -> str:
    """Return the first non-empty cinema name produced by ``strategies``."""
    return first_non_empty(strategies, link)


# ---------------------------------------------------------------------------
# Showtime assembly
# ---------------------------------------------------------------------------


class CinemaRegistry:
    """
    Deduplicates cinemas within one parse run.

    The first name seen for a slug wins, so every showtime for that slug
    refers to the same Cinema value.
    """

    def __init__(self) -> None:
        self._cinemas: dict[str, Cinema] = {}

    def get(self, slug: str, name: str) -> Cinema:
        cinema = self._cinemas.get(slug)
        if cinema is None:
            cinema = Cinema(id=slug, name=name, slug=slug)
            self._cinemas[slug] = cinema
        return cinema

    def __len__(self) -> int:
        return len(self._cinemas)


class ShowtimeCollector:
    """Builds deduplicated showtimes; the first link for a (cinema, date, time) key wins."""

    def __init__(self, registry: CinemaRegistry, movie_slug: str, base_url: str | None = None) -> None:
        self.registry = registry
        self.movie_slug = movie_slug
        self.base_url = base_url or settings.site_base_url
        self.showtimes: list[Showtime] = []
        self._seen: set[tuple[str, date, str]] = set()

    def add(
        self,
        link: ShowtimeLink,
        showtime_date: date,
        name_strategies: tuple[Callable[[ShowtimeLink], str], ...],
    ) -> Showtime | None:
        """Add a showtime for ``link``; returns None if its key was already seen."""
        key = (link.cinema_slug, showtime_date, link.time)
        if key in self._seen:
            return None
        self._seen.add(key)

        cinema = self.registry.get(link.cinema_slug, resolve_cinema_name(link, name_strategies))
        showtime = Showtime(
            cinema=cinema,
            date=showtime_date,
            time=link.time,
            booking_url=urljoin(self.base_url, link.href),
            showtime_id=link.showtime_id,
            movie_slug=self.movie_slug,
        )
        self.showtimes.append(showtime)
        return showtime
