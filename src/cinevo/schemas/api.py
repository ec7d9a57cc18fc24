"""Pydantic schemas for API responses."""

from datetime import date, datetime

from pydantic import BaseModel

from cinevo.schemas.movie import Cinema, Ratings
from cinevo.services.booking import BookingForm


class ShowtimeResponse(BaseModel):
    """Individual showtime with its booking options."""

    date: date
    date_label: str
    time: str
    booking_url: str
    booking_form: BookingForm | None = None


class CinemaWithShowtimes(BaseModel):
    """Cinema with its showtimes for a specific movie."""

    cinema: Cinema
    times: list[ShowtimeResponse]


class MovieResponse(BaseModel):
    """Movie with its normalized score and grouped showtimes."""

    id: str
    slug: str
    title: str
    poster_url: str
    year: int | None = None
    duration_minutes: int
    duration_label: str | None = None
    genres: list[str]
    ratings: Ratings
    score: float | None = None
    plot: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    box_office: str | None = None
    mpaa_rating: str | None = None
    release_date: str | None = None
    trailer_key: str | None = None
    imdb_id: str | None = None
    showtime_count: int
    cinemas: list[CinemaWithShowtimes]


class MoviesResponse(BaseModel):
    """Catalog state plus the movies matching the filters."""

    movies: list[MovieResponse]
    total_movies: int
    loading: bool
    error: str | None = None
    updated_at: datetime | None = None
