"""Shared test fixtures."""

from datetime import date

import pytest
from fastapi import FastAPI

from cinevo.api.routes import cinemas, health, movies
from cinevo.cache import MemoryStore, PipelineCaches
from cinevo.schemas.movie import Cinema, MovieDetail, Showtime


@pytest.fixture
def caches() -> PipelineCaches:
    return PipelineCaches(
        html=MemoryStore("html"),
        ratings=MemoryStore("ratings"),
        movies=MemoryStore("movies"),
    )


def make_showtime(
    cinema_slug: str = "yelmo-icaria",
    cinema_name: str = "Yelmo Icaria",
    day: date = date(2025, 12, 17),
    time: str = "18:00",
    showtime_id: str | None = "101",
    movie_slug: str | None = "wicked-for-good",
    booking_url: str | None = None,
) -> Showtime:
    return Showtime(
        cinema=Cinema(id=cinema_slug, name=cinema_name, slug=cinema_slug),
        date=day,
        time=time,
        booking_url=booking_url or f"https://englishcinemabarcelona.com/r/{cinema_slug}/{movie_slug}/{showtime_id}",
        showtime_id=showtime_id,
        movie_slug=movie_slug,
    )


def make_movie(slug: str = "wicked-for-good", title: str = "Wicked: For Good", **kwargs) -> MovieDetail:
    return MovieDetail(title=title, slug=slug, **kwargs)


class BrokenStore(MemoryStore):
    """Store whose backing medium fails on every read and write."""

    async def _read(self, key: str) -> str | None:
        raise RuntimeError("database is locked")

    async def _write(self, key: str, payload: str) -> None:
        raise RuntimeError("database is locked")


class StubCatalog:
    """Catalog stand-in with fixed state for API tests."""

    def __init__(self, movies: list[MovieDetail] | None = None) -> None:
        self.movies = movies or []
        self.loading = False
        self.error: str | None = None
        self.updated_at = None
        self.refreshed = 0

    def get(self, slug: str) -> MovieDetail | None:
        return next((m for m in self.movies if m.slug == slug), None)

    def refresh(self) -> None:
        self.refreshed += 1


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the APScheduler lifespan, for API tests."""
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(movies.router, prefix="/api")
    app.include_router(cinemas.router, prefix="/api")
    app.state.catalog = StubCatalog()
    return app
