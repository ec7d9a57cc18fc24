"""Tests for the OMDb API client and the rating merge policy."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import BrokenStore, make_movie

from cinevo.cache import MemoryStore
from cinevo.schemas.movie import ImdbRating, Ratings, RottenTomatoesRating
from cinevo.services.omdb_client import (
    OMDbClient,
    RatingSupplement,
    apply_rating_supplement,
    parse_omdb_response,
)


# ---------------------------------------------------------------------------
# Sample fixture data
# ---------------------------------------------------------------------------

SAMPLE_OMDB_RESPONSE = {
    "Title": "Wicked: For Good",
    "Year": "2025",
    "Rated": "PG",
    "Released": "21 Nov 2025",
    "Runtime": "137 min",
    "Genre": "Fantasy, Musical",
    "Director": "Jon M. Chu",
    "Writer": "Winnie Holzman, Dana Fox",
    "Actors": "Cynthia Erivo, Ariana Grande, Jonathan Bailey",
    "Plot": "Elphaba and Glinda face the consequences.",
    "Language": "English",
    "Country": "United States",
    "Awards": "N/A",
    "Poster": "https://m.media-amazon.com/images/wicked.jpg",
    "Ratings": [
        {"Source": "Internet Movie Database", "Value": "7.1/10"},
        {"Source": "Rotten Tomatoes", "Value": "68%"},
        {"Source": "Metacritic", "Value": "58/100"},
    ],
    "Metascore": "58",
    "imdbRating": "7.1",
    "imdbVotes": "45,210",
    "imdbID": "tt19847976",
    "BoxOffice": "$150,000,000",
    "Response": "True",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_http_response(json_data: dict, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = Exception(f"HTTP {status_code}")
    else:
        response.raise_for_status = MagicMock()
    return response


def make_async_client_ctx(response: MagicMock) -> AsyncMock:
    """Return an async context manager whose .get() always returns *response*."""
    inner = AsyncMock()
    inner.get = AsyncMock(return_value=response)
    ctx = AsyncMock()
    ctx.__aenter__ = AsyncMock(return_value=inner)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


@pytest.fixture
def client() -> OMDbClient:
    return OMDbClient(MemoryStore("ratings"), api_key="test-key")


# ---------------------------------------------------------------------------
# parse_omdb_response
# ---------------------------------------------------------------------------


class TestParseOmdbResponse:
    def test_parses_ratings(self) -> None:
        supplement = parse_omdb_response(SAMPLE_OMDB_RESPONSE)
        assert supplement.imdb == ImdbRating(score=7.1, votes=45210, id="tt19847976")
        assert supplement.rotten_tomatoes == RottenTomatoesRating(critics=68)
        assert supplement.metacritic == 58

    def test_parses_metadata(self) -> None:
        supplement = parse_omdb_response(SAMPLE_OMDB_RESPONSE)
        assert supplement.year == 2025
        assert supplement.content_rating == "PG"
        assert supplement.director == "Jon M. Chu"
        assert supplement.box_office == "$150,000,000"
        assert supplement.poster_url == "https://m.media-amazon.com/images/wicked.jpg"

    def test_not_available_fields_are_absent(self) -> None:
        data = {
            "Response": "True",
            "imdbRating": "N/A",
            "Poster": "N/A",
            "Awards": "N/A",
            "Metascore": "N/A",
            "Ratings": [],
        }
        supplement = parse_omdb_response(data)
        assert supplement.imdb is None
        assert supplement.poster_url is None
        assert supplement.awards is None
        assert supplement.metacritic is None
        assert supplement.is_empty

    def test_metascore_fallback(self) -> None:
        supplement = parse_omdb_response({"Response": "True", "Metascore": "81", "Ratings": []})
        assert supplement.metacritic == 81

    def test_series_year_range_keeps_first_year(self) -> None:
        supplement = parse_omdb_response({"Response": "True", "Year": "2019–2023"})
        assert supplement.year == 2019

    def test_unparseable_imdb_rating_is_skipped(self) -> None:
        supplement = parse_omdb_response({"Response": "True", "imdbRating": "great"})
        assert supplement.imdb is None


# ---------------------------------------------------------------------------
# enrich
# ---------------------------------------------------------------------------


class TestEnrich:
    async def test_returns_supplement_on_success(self, client: OMDbClient) -> None:
        ctx = make_async_client_ctx(make_http_response(SAMPLE_OMDB_RESPONSE))
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Wicked: For Good")
        assert supplement.metacritic == 58
        params = ctx.__aenter__.return_value.get.call_args.kwargs["params"]
        assert params == {"t": "Wicked: For Good", "apikey": "test-key"}

    async def test_successful_lookup_is_cached_by_lowercased_title(self, client: OMDbClient) -> None:
        ctx = make_async_client_ctx(make_http_response(SAMPLE_OMDB_RESPONSE))
        with patch("httpx.AsyncClient", return_value=ctx):
            await client.enrich("Wicked: For Good")
        with patch("httpx.AsyncClient") as client_cls:
            supplement = await client.enrich("WICKED: FOR GOOD")
        client_cls.assert_not_called()
        assert supplement.imdb is not None
        assert supplement.imdb.score == 7.1

    async def test_not_found_is_empty_and_not_cached(self, client: OMDbClient) -> None:
        ctx = make_async_client_ctx(make_http_response({"Response": "False", "Error": "Movie not found!"}))
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Unknown")
        assert supplement.is_empty
        assert await client.cache.get("unknown") is None

    async def test_http_error_is_empty(self, client: OMDbClient) -> None:
        ctx = make_async_client_ctx(make_http_response({}, status_code=500))
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Wicked: For Good")
        assert supplement == RatingSupplement()

    async def test_network_error_is_empty(self, client: OMDbClient) -> None:
        inner = AsyncMock()
        inner.get = AsyncMock(side_effect=Exception("Timeout"))
        ctx = AsyncMock()
        ctx.__aenter__ = AsyncMock(return_value=inner)
        ctx.__aexit__ = AsyncMock(return_value=False)
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Wicked: For Good")
        assert supplement.is_empty

    async def test_no_api_key_skips_request(self) -> None:
        client = OMDbClient(MemoryStore("ratings"), api_key="dummy")
        client.api_key = ""
        with patch("httpx.AsyncClient") as client_cls:
            supplement = await client.enrich("Wicked: For Good")
        client_cls.assert_not_called()
        assert supplement.is_empty

    async def test_invalid_cache_entry_is_refetched(self, client: OMDbClient) -> None:
        await client.cache.set("wicked: for good", {"metacritic": 500})
        ctx = make_async_client_ctx(make_http_response(SAMPLE_OMDB_RESPONSE))
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Wicked: For Good")
        assert supplement.metacritic == 58

    async def test_failing_cache_is_treated_as_miss(self) -> None:
        client = OMDbClient(BrokenStore("ratings"), api_key="test-key")
        ctx = make_async_client_ctx(make_http_response(SAMPLE_OMDB_RESPONSE))
        with patch("httpx.AsyncClient", return_value=ctx):
            supplement = await client.enrich("Hamnet")
        assert supplement.metacritic == 58


# ---------------------------------------------------------------------------
# apply_rating_supplement
# ---------------------------------------------------------------------------


class TestApplyRatingSupplement:
    def test_scraped_ratings_win(self) -> None:
        movie = make_movie(ratings=Ratings(rotten_tomatoes=RottenTomatoesRating(critics=90), metacritic=80))
        merged = apply_rating_supplement(movie, parse_omdb_response(SAMPLE_OMDB_RESPONSE))
        assert merged.ratings.rotten_tomatoes == RottenTomatoesRating(critics=90)
        assert merged.ratings.metacritic == 80

    def test_omdb_fills_missing_ratings(self) -> None:
        merged = apply_rating_supplement(make_movie(), parse_omdb_response(SAMPLE_OMDB_RESPONSE))
        assert merged.ratings.rotten_tomatoes == RottenTomatoesRating(critics=68)
        assert merged.ratings.metacritic == 58

    def test_imdb_always_from_omdb(self) -> None:
        merged = apply_rating_supplement(make_movie(), parse_omdb_response(SAMPLE_OMDB_RESPONSE))
        assert merged.ratings.imdb is not None
        assert merged.ratings.imdb.score == 7.1
        assert merged.imdb_id == "tt19847976"

    def test_metadata_overrides_when_present(self) -> None:
        movie = make_movie(poster_url="https://img.englishcinemabarcelona.com/p.jpg")
        merged = apply_rating_supplement(movie, parse_omdb_response(SAMPLE_OMDB_RESPONSE))
        assert merged.poster_url == "https://m.media-amazon.com/images/wicked.jpg"
        assert merged.year == 2025
        assert merged.mpaa_rating == "PG"
        assert merged.release_date == "21 Nov 2025"
        assert merged.actors == "Cynthia Erivo, Ariana Grande, Jonathan Bailey"

    def test_empty_supplement_leaves_movie_unchanged(self) -> None:
        movie = make_movie(poster_url="https://img.englishcinemabarcelona.com/p.jpg", year=2025)
        assert apply_rating_supplement(movie, RatingSupplement()) == movie

    def test_not_available_poster_keeps_scraped_poster(self) -> None:
        movie = make_movie(poster_url="https://img.englishcinemabarcelona.com/p.jpg")
        supplement = parse_omdb_response({"Response": "True", "Poster": "N/A"})
        assert apply_rating_supplement(movie, supplement).poster_url == movie.poster_url
