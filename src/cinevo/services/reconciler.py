"""Reconciles detail-page and overview showtimes for one movie."""

import logging
from datetime import date

from cinevo.schemas.movie import Cinema, Showtime

logger = logging.getLogger(__name__)


def merge_showtimes(detail: list[Showtime], overview: list[Showtime]) -> list[Showtime]:
    """
    Merge a movie's showtimes from its detail page and the overview grid.

    Overview showtimes are added first: the grid spans seven days and its
    column dates are authoritative, so on a (cinema, date, time) collision
    the overview entry is kept. Detail showtimes fill in slots the grid
    lacks. Where both sources know a cinema slug, detail showtimes are
    re-pointed at the overview's Cinema so each slug maps to one value.

    Returns:
        Deduplicated showtimes sorted by (date, time)
    """
    overview_cinemas: dict[str, Cinema] = {}
    merged: dict[tuple[str, date, str], Showtime] = {}

    for showtime in overview:
        overview_cinemas.setdefault(showtime.cinema.slug, showtime.cinema)
        merged.setdefault(showtime.key, showtime)

    for showtime in detail:
        existing = merged.get(showtime.key)
        if existing is not None:
            if existing.booking_url != showtime.booking_url:
                logger.warning(
                    f"Reconcile: overview and detail disagree on {showtime.key}: "
                    f"{existing.booking_url} vs {showtime.booking_url}; keeping overview"
                )
            continue

        cinema = overview_cinemas.get(showtime.cinema.slug)
        if cinema is not None and cinema != showtime.cinema:
            showtime = showtime.model_copy(update={"cinema": cinema})
        merged[showtime.key] = showtime

    return sorted(merged.values(), key=lambda s: (s.date, s.time))
