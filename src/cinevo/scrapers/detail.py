"""Movie detail page parser, including date inference for its showtimes."""

import logging
import re
from bisect import bisect_right
from collections.abc import Callable
from datetime import date

from bs4 import BeautifulSoup, Tag

from cinevo.schemas.movie import MovieDetail, Ratings, RottenTomatoesRating, Showtime
from cinevo.scrapers.base import BasePageParser
from cinevo.scrapers.dates import parse_heading_date
from cinevo.scrapers.links import (
    DETAIL_CINEMA_NAME_STRATEGIES,
    CinemaRegistry,
    ShowtimeCollector,
    parse_booking_link,
)
from cinevo.utils.text import first_non_empty

logger = logging.getLogger(__name__)

SITE_CDN_MARKER = "img.englishcinemabarcelona.com"
POSTER_CDN_RE = re.compile(r"tmdb|poster", re.IGNORECASE)

DURATION_RE = re.compile(r"(\d+)\s*(?:minutes|mins|m)\b", re.IGNORECASE)
ROTTEN_TOMATOES_RE = re.compile(r"Rotten\s*Tomatoes[:\s]*(\d+)%", re.IGNORECASE)
METACRITIC_RE = re.compile(r"Metacritic[:\s]*(\d+)(?:/100)?", re.IGNORECASE)

DAY_HEADING_TAGS = ("h3",)


# ---------------------------------------------------------------------------
# Poster strategies
# ---------------------------------------------------------------------------


def _image_sources(soup: BeautifulSoup) -> list[str]:
    return [str(img.get("src", "")) for img in soup.find_all("img") if img.get("src")]


def poster_from_site_cdn(soup: BeautifulSoup) -> str:
    return next((src for src in _image_sources(soup) if SITE_CDN_MARKER in src), "")


def poster_from_known_cdn(soup: BeautifulSoup) -> str:
    return next((src for src in _image_sources(soup) if POSTER_CDN_RE.search(src)), "")


def poster_from_any_absolute_image(soup: BeautifulSoup) -> str:
    return next((src for src in _image_sources(soup) if src.startswith("http")), "")


POSTER_STRATEGIES: tuple[Callable[[BeautifulSoup], str], ...] = (
    poster_from_site_cdn,
    poster_from_known_cdn,
    poster_from_any_absolute_image,
)


def resolve_poster(soup: BeautifulSoup) -> str:
    """Return the first poster URL found by POSTER_STRATEGIES, or ""."""
    return first_non_empty(POSTER_STRATEGIES, soup)


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------


def extract_ratings(text: str) -> Ratings:
    """Scrape Rotten Tomatoes and Metacritic scores from page text."""
    rotten_tomatoes = None
    metacritic = None

    m = ROTTEN_TOMATOES_RE.search(text)
    if m and int(m.group(1)) <= 100:
        rotten_tomatoes = RottenTomatoesRating(critics=int(m.group(1)))

    m = METACRITIC_RE.search(text)
    if m and int(m.group(1)) <= 100:
        metacritic = int(m.group(1))

    return Ratings(rotten_tomatoes=rotten_tomatoes, metacritic=metacritic)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class DetailParser(BasePageParser):
    """
    Parses a movie's detail page into a MovieDetail.

    Showtime links on this page do not carry their date. The page lists
    them under day headings, so dates are inferred in two passes over the
    document's elements in order: the first collects (position, date) for
    every heading that reads as a date, the second gives each booking link
    the date of the nearest heading before it. Links with no dated heading
    before them fall back to today.
    """

    def parse(self, slug: str, html: str) -> MovieDetail | None:
        """Return the movie, or None if the page has no title (not a movie page)."""
        soup = self._soup(html)

        title_tag = soup.find("h1")
        title = self._get_text(title_tag) if isinstance(title_tag, Tag) else ""
        if not title:
            logger.warning(f"Detail: no title on page for {slug!r}")
            return None

        body = soup.body or soup
        body_text = self._get_text(body)

        duration_match = DURATION_RE.search(body_text)

        return MovieDetail(
            title=title,
            slug=slug,
            poster_url=resolve_poster(soup),
            duration_minutes=int(duration_match.group(1)) if duration_match else 0,
            genres=self._extract_genres(soup),
            ratings=extract_ratings(body_text),
            showtimes=self.extract_showtimes(soup, slug),
        )

    def _extract_genres(self, soup: BeautifulSoup) -> list[str]:
        genres: list[str] = []
        for anchor in soup.find_all("a", href=re.compile(r"/genre/")):
            genre = self._get_text(anchor)
            if genre and genre not in genres:
                genres.append(genre)
        return genres

    def extract_showtimes(self, soup: BeautifulSoup, slug: str) -> list[Showtime]:
        """Collect this movie's booking links as deduplicated, dated showtimes."""
        link_re = re.compile(r"/r/[^/]+/" + re.escape(slug) + r"(?:/|$)")
        elements = [el for el in soup.descendants if isinstance(el, Tag)]

        # Pass 1: dated headings by document position
        anchor_positions: list[int] = []
        anchor_dates: list[date] = []
        for position, element in enumerate(elements):
            if element.name not in DAY_HEADING_TAGS:
                continue
            heading_date = parse_heading_date(self._get_text(element), self.today)
            if heading_date is not None:
                anchor_positions.append(position)
                anchor_dates.append(heading_date)

        # Pass 2: each booking link takes the nearest preceding dated heading
        collector = ShowtimeCollector(CinemaRegistry(), movie_slug=slug, base_url=self.base_url)
        for position, element in enumerate(elements):
            if element.name != "a" or not link_re.search(str(element.get("href", ""))):
                continue
            link = parse_booking_link(element)
            if link is None:
                continue
            index = bisect_right(anchor_positions, position) - 1
            showtime_date = anchor_dates[index] if index >= 0 else self.today
            collector.add(link, showtime_date, DETAIL_CINEMA_NAME_STRATEGIES)

        logger.debug(f"Detail: {len(collector.showtimes)} showtimes for {slug!r}")
        return collector.showtimes


def parse_detail(slug: str, html: str, today: date | None = None) -> MovieDetail | None:
    return DetailParser(today=today).parse(slug, html)
