"""Base class and URL helpers for the listings-site page parsers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from bs4 import BeautifulSoup, Tag

from cinevo.config import settings
from cinevo.scrapers.dates import site_today
from cinevo.utils.text import collapse_whitespace


def movie_url(slug: str) -> str:
    """Absolute URL of a movie's detail page."""
    return f"{settings.site_base_url}/m/{slug}{settings.listing_path_suffix}"


def overview_url() -> str:
    """Absolute URL of the 7-day overview grid."""
    return f"{settings.site_base_url}{settings.overview_path}"


class BasePageParser(ABC):
    """
    Abstract base class for the page parsers.

    Parsers are pure functions of the HTML they are given (plus "today"
    for date inference). They must not raise on markup drift: missing
    pieces yield None or empty results and are logged at debug level.
    """

    def __init__(self, today: date | None = None, base_url: str | None = None) -> None:
        """
        Args:
            today: Reference date for year inference (defaults to today in the site's timezone)
            base_url: Site root used to absolutise booking links
        """
        self._today = today
        self.base_url = base_url or settings.site_base_url

    @property
    def today(self) -> date:
        return self._today or site_today()

    @abstractmethod
    def parse(self, *args: Any) -> Any:
        pass

    @staticmethod
    def _soup(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    @staticmethod
    def _get_text(tag: Tag) -> str:
        """Get clean text from a tag with whitespace collapsed."""
        return collapse_whitespace(tag.get_text(separator=" "))
