"""Movies API endpoints."""

import logging
from datetime import date, time

from fastapi import APIRouter, Depends, HTTPException, Query, status

from cinevo.api.dependencies import get_catalog
from cinevo.schemas.api import (
    CinemaWithShowtimes,
    MovieResponse,
    MoviesResponse,
    ShowtimeResponse,
)
from cinevo.schemas.movie import MovieDetail, Showtime
from cinevo.scrapers.dates import site_today
from cinevo.services.booking import booking_form
from cinevo.services.catalog import MovieCatalog
from cinevo.services.scoring import normalize_score
from cinevo.utils.showtimes import (
    format_date_label,
    format_duration,
    group_showtimes_by_cinema,
    time_to_minutes,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def build_movie_response(movie: MovieDetail, showtimes: list[Showtime], today: date) -> MovieResponse:
    """Build the API view of a movie from the showtimes that passed the filters."""
    cinemas = [
        CinemaWithShowtimes(
            cinema=cinema,
            times=[
                ShowtimeResponse(
                    date=showtime.date,
                    date_label=format_date_label(showtime.date, today),
                    time=showtime.time,
                    booking_url=showtime.booking_url,
                    booking_form=booking_form(showtime),
                )
                for showtime in sorted(times, key=lambda s: (s.date, s.time))
            ],
        )
        for cinema, times in group_showtimes_by_cinema(showtimes)
    ]

    return MovieResponse(
        id=movie.id,
        slug=movie.slug,
        title=movie.title,
        poster_url=movie.poster_url,
        year=movie.year,
        duration_minutes=movie.duration_minutes,
        duration_label=format_duration(movie.duration_minutes) if movie.duration_minutes else None,
        genres=movie.genres,
        ratings=movie.ratings,
        score=normalize_score(movie.ratings),
        plot=movie.plot,
        director=movie.director,
        writer=movie.writer,
        actors=movie.actors,
        language=movie.language,
        country=movie.country,
        awards=movie.awards,
        box_office=movie.box_office,
        mpaa_rating=movie.mpaa_rating,
        release_date=movie.release_date,
        trailer_key=movie.trailer_key,
        imdb_id=movie.imdb_id,
        showtime_count=len(showtimes),
        cinemas=cinemas,
    )


def _clock_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


@router.get("/movies", response_model=MoviesResponse)
async def get_movies(
    date_param: date | None = Query(None, alias="date", description="Only showtimes on this date (YYYY-MM-DD)"),
    min_score: float | None = Query(None, ge=0, le=100, description="Minimum normalized score"),
    cinema: list[str] | None = Query(None, description="Cinema slugs to include (repeatable)"),
    time_from: time | None = Query(None, description="Earliest start time (HH:MM)"),
    time_to: time | None = Query(None, description="Latest start time (HH:MM)"),
    catalog: MovieCatalog = Depends(get_catalog),
) -> MoviesResponse:
    """
    List catalog movies with their showtimes grouped by cinema.

    Movies keep the catalog order (newest first, then highest score). When
    any showtime filter is given, movies left without showtimes are dropped.
    A movie with no score never passes a ``min_score`` filter.
    """
    filtering_showtimes = any(
        value is not None for value in (date_param, cinema, time_from, time_to)
    )
    cinema_slugs = set(cinema or [])
    minutes_from = _clock_minutes(time_from) if time_from is not None else None
    minutes_to = _clock_minutes(time_to) if time_to is not None else None

    def keep(showtime: Showtime) -> bool:
        if date_param is not None and showtime.date != date_param:
            return False
        if cinema_slugs and showtime.cinema.slug not in cinema_slugs:
            return False
        minutes = time_to_minutes(showtime.time)
        if minutes_from is not None and minutes < minutes_from:
            return False
        if minutes_to is not None and minutes > minutes_to:
            return False
        return True

    today = site_today()
    movies: list[MovieResponse] = []
    for movie in catalog.movies:
        if min_score is not None:
            score = normalize_score(movie.ratings)
            if score is None or score < min_score:
                continue

        showtimes = [s for s in movie.showtimes if keep(s)]
        if filtering_showtimes and not showtimes:
            continue

        movies.append(build_movie_response(movie, showtimes, today))

    return MoviesResponse(
        movies=movies,
        total_movies=len(movies),
        loading=catalog.loading,
        error=catalog.error,
        updated_at=catalog.updated_at,
    )


@router.get("/movies/{slug}", response_model=MovieResponse)
async def get_movie(slug: str, catalog: MovieCatalog = Depends(get_catalog)) -> MovieResponse:
    """Get one movie with all of its showtimes."""
    movie = catalog.get(slug)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Movie '{slug}' not found")
    return build_movie_response(movie, movie.showtimes, site_today())


@router.post("/refresh", status_code=status.HTTP_202_ACCEPTED)
async def refresh_movies(catalog: MovieCatalog = Depends(get_catalog)) -> dict[str, str]:
    """Clear every cache and rebuild the catalog in the background."""
    logger.info("Manual refresh requested")
    catalog.refresh()
    return {"status": "refreshing"}
