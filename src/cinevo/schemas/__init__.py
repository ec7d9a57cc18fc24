"""Pydantic schemas for domain records and API responses."""

from cinevo.schemas.movie import (
    Cinema,
    ImdbRating,
    MovieDetail,
    MovieListing,
    Ratings,
    RottenTomatoesRating,
    Showtime,
)

__all__ = [
    "Cinema",
    "ImdbRating",
    "MovieDetail",
    "MovieListing",
    "Ratings",
    "RottenTomatoesRating",
    "Showtime",
]
