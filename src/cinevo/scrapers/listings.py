"""Homepage parser producing the list of movie stubs."""

import logging
import re

from bs4 import Tag

from cinevo.config import settings
from cinevo.schemas.movie import MovieListing
from cinevo.scrapers.base import BasePageParser

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100

# "195m", "195 min", "2h 15m"
ROUGH_DURATION_RE = re.compile(r"(?:(\d+)\s*h\s*)?(\d+)\s*m(?:in)?\b", re.IGNORECASE)


class ListingsParser(BasePageParser):
    """
    Parses the homepage into MovieListing stubs.

    Movie cards are anchors pointing at ``/m/{slug}/in-english-in-barcelona``.
    The card text carries the title (in a heading when there is one) and a
    rough running time; the first image inside the card is the poster.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.movie_href_re = re.compile(
            r"^(?:https?://[^/]+)?/m/([^/?#]+)" + re.escape(settings.listing_path_suffix)
        )

    def parse(self, html: str) -> list[MovieListing]:
        """Return one stub per movie slug, in document order."""
        soup = self._soup(html)
        movies: list[MovieListing] = []
        seen: set[str] = set()

        for anchor in soup.find_all("a", href=self.movie_href_re):
            if not isinstance(anchor, Tag):
                continue
            listing = self._parse_card(anchor)
            if listing is None or listing.slug in seen:
                continue
            seen.add(listing.slug)
            movies.append(listing)

        logger.info(f"Listings: found {len(movies)} movies")
        return movies

    def _parse_card(self, anchor: Tag) -> MovieListing | None:
        m = self.movie_href_re.match(str(anchor.get("href", "")))
        slug = m.group(1) if m else ""
        if not slug:
            return None

        heading = anchor.find(["h2", "h3"])
        title = self._get_text(heading) if isinstance(heading, Tag) else ""
        if not title:
            title = self._get_text(anchor)
        if not title or len(title) > MAX_TITLE_LENGTH:
            logger.debug(f"Listings: skipping card for {slug!r} without a usable title")
            return None

        img = anchor.find("img")
        poster_url = str(img.get("src", "")) if isinstance(img, Tag) else ""

        return MovieListing(
            title=title,
            slug=slug,
            poster_url=poster_url,
            rough_duration=self._parse_rough_duration(self._get_text(anchor)),
        )

    @staticmethod
    def _parse_rough_duration(text: str) -> int:
        """Minutes from "195m" / "2h 15m" style text, 0 when absent."""
        m = ROUGH_DURATION_RE.search(text)
        if not m:
            return 0
        hours = int(m.group(1)) if m.group(1) else 0
        return hours * 60 + int(m.group(2))


def parse_listings(html: str) -> list[MovieListing]:
    return ListingsParser().parse(html)
