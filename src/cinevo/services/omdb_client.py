"""OMDb API client for ratings and extended movie metadata."""

import logging
import re
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from cinevo.cache.store import CacheStore
from cinevo.config import settings
from cinevo.schemas.movie import ImdbRating, MovieDetail, RottenTomatoesRating

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


class RatingSupplement(BaseModel):
    """Fields looked up on OMDb for one title. Every field is optional."""

    imdb: ImdbRating | None = None
    rotten_tomatoes: RottenTomatoesRating | None = None
    metacritic: int | None = Field(default=None, ge=0, le=100)
    poster_url: str | None = None
    year: int | None = None
    content_rating: str | None = None
    release_date: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    plot: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    box_office: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


def _clean(value: Any) -> str | None:
    """Return the field as a stripped string, or None for blanks and the "N/A" sentinel."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == NOT_AVAILABLE:
        return None
    return text


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    m = re.search(r"\d+", value.replace(",", ""))
    return int(m.group(0)) if m else None


def parse_omdb_response(data: dict[str, Any]) -> RatingSupplement:
    """
    Turn an OMDb title response into a RatingSupplement.

    Args:
        data: Decoded OMDb JSON (``Response`` must be "True")

    Returns:
        The supplement; fields holding "N/A" are left unset
    """
    fields: dict[str, Any] = {}

    imdb_rating = _clean(data.get("imdbRating"))
    if imdb_rating is not None:
        try:
            score = float(imdb_rating)
        except ValueError:
            score = None
        if score is not None and 0 <= score <= 10:
            fields["imdb"] = ImdbRating(
                score=score,
                votes=_parse_int(_clean(data.get("imdbVotes"))) or 0,
                id=_clean(data.get("imdbID")),
            )

    # The Ratings array carries Rotten Tomatoes and Metacritic
    for rating in data.get("Ratings") or []:
        if not isinstance(rating, dict):
            continue
        source = rating.get("Source")
        value = _clean(rating.get("Value")) or ""
        if source == "Rotten Tomatoes":
            m = re.search(r"(\d+)%", value)
            if m and int(m.group(1)) <= 100:
                fields["rotten_tomatoes"] = RottenTomatoesRating(critics=int(m.group(1)))
        elif source == "Metacritic":
            m = re.search(r"(\d+)/100", value)
            if m and int(m.group(1)) <= 100:
                fields["metacritic"] = int(m.group(1))

    # Metascore is the fallback for Metacritic
    if "metacritic" not in fields:
        metascore = _parse_int(_clean(data.get("Metascore")))
        if metascore is not None and metascore <= 100:
            fields["metacritic"] = metascore

    year = _clean(data.get("Year"))
    if year is not None:
        # Series report "2019–2023"; keep the first year
        m = re.search(r"(\d{4})", year)
        if m:
            fields["year"] = int(m.group(1))

    for key, omdb_key in (
        ("poster_url", "Poster"),
        ("content_rating", "Rated"),
        ("release_date", "Released"),
        ("director", "Director"),
        ("writer", "Writer"),
        ("actors", "Actors"),
        ("plot", "Plot"),
        ("language", "Language"),
        ("country", "Country"),
        ("awards", "Awards"),
        ("box_office", "BoxOffice"),
    ):
        value = _clean(data.get(omdb_key))
        if value is not None:
            fields[key] = value

    return RatingSupplement(**fields)


class OMDbClient:
    """Client for the OMDb API, with lookups cached by lowercased title."""

    def __init__(
        self,
        cache: CacheStore,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """
        Initialize OMDb client.

        Args:
            cache: Store for successful lookups (never expires, versioned)
            api_key: OMDb API key (uses settings if not provided)
            base_url: OMDb endpoint (uses settings if not provided)
        """
        self.cache = cache
        self.api_key = api_key or settings.omdb_api_key
        self.base_url = base_url or settings.omdb_base_url
        if not self.api_key:
            logger.warning("OMDb API key not configured")

    async def enrich(self, title: str) -> RatingSupplement:
        """
        Look up ratings and metadata for an exact title.

        Never raises: any failure is logged and yields an empty supplement.
        """
        cache_key = title.lower()
        cached = await self._get_cached(cache_key)
        if cached is not None:
            return cached

        if not self.api_key:
            return RatingSupplement()

        try:
            async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
                logger.info(f"[fetch] OMDb: {title}")
                response = await client.get(
                    self.base_url,
                    params={"t": title, "apikey": self.api_key},
                )
                response.raise_for_status()
                data = response.json()

            if data.get("Response") != "True":
                logger.info(f"No OMDb result for '{title}': {data.get('Error', 'unknown')}")
                return RatingSupplement()

            supplement = parse_omdb_response(data)

        except Exception as e:
            logger.error(f"OMDb lookup error for '{title}': {e}")
            return RatingSupplement()

        try:
            await self.cache.set(cache_key, supplement.model_dump(mode="json", exclude_none=True))
        except Exception as e:
            logger.warning(f"OMDb cache write failed for '{title}': {e}")
        return supplement

    async def _get_cached(self, cache_key: str) -> RatingSupplement | None:
        try:
            cached = await self.cache.get(cache_key)
        except Exception as e:
            logger.warning(f"OMDb cache read failed for {cache_key!r}: {e}")
            return None
        if cached is None:
            return None
        try:
            return RatingSupplement.model_validate(cached)
        except ValidationError:
            logger.debug(f"OMDb cache entry for {cache_key!r} failed validation")
            return None


def apply_rating_supplement(movie: MovieDetail, supplement: RatingSupplement) -> MovieDetail:
    """
    Merge an OMDb supplement into a scraped movie.

    - IMDb rating always comes from OMDb (the listings site never has it).
    - Scraped Rotten Tomatoes / Metacritic scores win; OMDb only fills gaps.
    - Poster, year and the extended metadata always take OMDb's value when present.
    """
    ratings_update: dict[str, Any] = {}
    if supplement.imdb is not None:
        ratings_update["imdb"] = supplement.imdb
    if movie.ratings.rotten_tomatoes is None and supplement.rotten_tomatoes is not None:
        ratings_update["rotten_tomatoes"] = supplement.rotten_tomatoes
    if movie.ratings.metacritic is None and supplement.metacritic is not None:
        ratings_update["metacritic"] = supplement.metacritic

    update: dict[str, Any] = {}
    if ratings_update:
        update["ratings"] = movie.ratings.model_copy(update=ratings_update)
    if supplement.imdb is not None and supplement.imdb.id:
        update["imdb_id"] = supplement.imdb.id

    for field, value in (
        ("poster_url", supplement.poster_url),
        ("year", supplement.year),
        ("mpaa_rating", supplement.content_rating),
        ("release_date", supplement.release_date),
        ("director", supplement.director),
        ("writer", supplement.writer),
        ("actors", supplement.actors),
        ("plot", supplement.plot),
        ("language", supplement.language),
        ("country", supplement.country),
        ("awards", supplement.awards),
        ("box_office", supplement.box_office),
    ):
        if value is not None:
            update[field] = value

    return movie.model_copy(update=update) if update else movie
