"""7-day overview grid parser."""

import logging
import re
from datetime import date

from bs4 import BeautifulSoup, Tag

from cinevo.schemas.movie import Showtime
from cinevo.scrapers.base import BasePageParser
from cinevo.scrapers.dates import parse_column_date
from cinevo.scrapers.links import (
    OVERVIEW_CINEMA_NAME_STRATEGIES,
    CinemaRegistry,
    ShowtimeCollector,
    parse_booking_link,
)

logger = logging.getLogger(__name__)

MOVIE_SLUG_RE = re.compile(r"/m/([^/?#]+)/")

ShowtimesByMovie = dict[str, list[Showtime]]


class OverviewParser(BasePageParser):
    """
    Parses the 7-day overview grid into showtimes per movie slug.

    The grid has one row per movie and one column per day. Column dates
    come from the header cells ("Wed, 17 Dec") and are authoritative for
    every link in that column; cinema names come from each link's tooltip
    ("11:45 at Yelmo Icaria"). Cinemas are shared across the whole grid.
    """

    def parse(self, html: str) -> ShowtimesByMovie:
        soup = self._soup(html)
        column_dates = self._parse_column_dates(soup)
        if not any(column_dates):
            logger.warning("Overview: no dated columns found")
            return {}

        registry = CinemaRegistry()
        showtimes_by_movie: ShowtimesByMovie = {}

        for row in soup.select("tbody tr"):
            cells = row.find_all("td", recursive=False) or row.find_all("td")
            if not cells:
                continue

            movie_link = cells[0].find("a", href=re.compile(r"/m/"))
            m = MOVIE_SLUG_RE.search(str(movie_link.get("href", ""))) if isinstance(movie_link, Tag) else None
            if not m:
                continue
            movie_slug = m.group(1)

            collector = ShowtimeCollector(registry, movie_slug=movie_slug, base_url=self.base_url)
            for column, cell in enumerate(cells[1:]):
                if column >= len(column_dates) or column_dates[column] is None:
                    continue
                self._parse_cell(cell, column_dates[column], collector)

            if collector.showtimes:
                showtimes_by_movie.setdefault(movie_slug, []).extend(collector.showtimes)

        logger.info(
            f"Overview: {sum(len(s) for s in showtimes_by_movie.values())} showtimes "
            f"for {len(showtimes_by_movie)} movies at {len(registry)} cinemas"
        )
        return showtimes_by_movie

    def _parse_column_dates(self, soup: BeautifulSoup) -> list[date | None]:
        """
        Dates of the day columns, in order, skipping the leading movie column.

        An unparseable header keeps its slot as None so later columns stay aligned.
        """
        headers = soup.select("thead th")
        return [parse_column_date(self._get_text(th), self.today) for th in headers[1:]]

    def _parse_cell(self, cell: Tag, cell_date: date, collector: ShowtimeCollector) -> None:
        for anchor in cell.find_all("a", href=re.compile(r"/r/")):
            link = parse_booking_link(anchor)
            if link is None:
                continue
            collector.add(link, cell_date, OVERVIEW_CINEMA_NAME_STRATEGIES)


def parse_overview(html: str, today: date | None = None) -> ShowtimesByMovie:
    return OverviewParser(today=today).parse(html)
