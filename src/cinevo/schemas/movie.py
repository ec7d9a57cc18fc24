"""Pydantic schemas for movies, cinemas, showtimes and ratings."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Cinema(BaseModel):
    """A cinema venue. Identity is the slug."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str


class Showtime(BaseModel):
    """A single screening of a movie at a cinema."""

    model_config = ConfigDict(frozen=True)

    cinema: Cinema
    date: date
    time: str = Field(pattern=r"^\d{2}:\d{2}$")  # local clock time, "HH:MM"
    booking_url: str
    showtime_id: str | None = None
    movie_slug: str | None = None

    @property
    def key(self) -> tuple[str, date, str]:
        """Deduplication key: (cinema slug, date, time)."""
        return (self.cinema.slug, self.date, self.time)


class RottenTomatoesRating(BaseModel):
    critics: int = Field(ge=0, le=100)


class ImdbRating(BaseModel):
    score: float = Field(ge=0, le=10)
    votes: int = Field(default=0, ge=0)
    id: str | None = None


class Ratings(BaseModel):
    """Ratings from the three supported sources. Absence means unknown."""

    rotten_tomatoes: RottenTomatoesRating | None = None
    metacritic: int | None = Field(default=None, ge=0, le=100)
    imdb: ImdbRating | None = None


class MovieListing(BaseModel):
    """Movie stub scraped from the homepage."""

    title: str
    slug: str
    poster_url: str = ""
    rough_duration: int = 0  # minutes, 0 = unknown


class MovieDetail(MovieListing):
    """Full movie record built from the detail page, the overview and enrichment."""

    duration_minutes: int = 0
    genres: list[str] = Field(default_factory=list)
    ratings: Ratings = Field(default_factory=Ratings)
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
    year: int | None = None
    showtimes: list[Showtime] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return self.slug

    @model_validator(mode="after")
    def _check_unique_showtimes(self) -> "MovieDetail":
        keys = [(s.cinema.id, s.date, s.time) for s in self.showtimes]
        if len(keys) != len(set(keys)):
            raise ValueError(f"duplicate showtimes for movie {self.slug!r}")
        return self
