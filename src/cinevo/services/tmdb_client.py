"""TMDb API client for finding movie trailers."""

import logging
from typing import Any

import httpx

from cinevo.config import settings

logger = logging.getLogger(__name__)

TRAILER_SITE = "YouTube"


def select_trailer(videos: list[dict[str, Any]]) -> str | None:
    """
    Pick the best trailer key from a TMDb video list.

    Only YouTube entries are considered. Priority: official trailer,
    any trailer, teaser, then any video.
    """
    candidates = [v for v in videos if v.get("site") == TRAILER_SITE and v.get("key")]

    for matches in (
        lambda v: v.get("type") == "Trailer" and v.get("official"),
        lambda v: v.get("type") == "Trailer",
        lambda v: v.get("type") == "Teaser",
        lambda v: True,
    ):
        video = next((v for v in candidates if matches(v)), None)
        if video is not None:
            return str(video["key"])

    return None


class TMDbClient:
    """Client for The Movie Database (TMDb) API."""

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: str | None = None) -> None:
        """
        Initialize TMDb client.

        Args:
            api_key: TMDb API key (uses settings if not provided)
        """
        self.api_key = api_key or settings.tmdb_api_key
        if not self.api_key:
            logger.warning("TMDb API key not configured")

    async def search_film(self, title: str, year: int | None = None) -> dict[str, Any] | None:
        """
        Search for a film by title.

        Args:
            title: Film title
            year: Release year (optional, helps narrow results)

        Returns:
            First matching film result or None if not found
        """
        if not self.api_key:
            logger.warning("Cannot search TMDb without API key")
            return None

        params: dict[str, Any] = {
            "api_key": self.api_key,
            "query": title,
            "language": settings.tmdb_language,
        }
        if year:
            params["year"] = year

        try:
            async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
                response = await client.get(f"{self.BASE_URL}/search/movie", params=params)
                response.raise_for_status()
                data = response.json()

                results = data.get("results", [])
                if not results:
                    logger.info(f"No TMDb results for: {title}")
                    return None

                # Return the first result
                return results[0]

        except Exception as e:
            logger.error(f"TMDb search error for '{title}': {e}")
            return None

    async def get_videos(self, tmdb_id: int) -> list[dict[str, Any]]:
        """
        Get the video list (trailers, teasers, clips) for a film.

        Args:
            tmdb_id: TMDb film ID

        Returns:
            Video entries with key/site/type/official, empty on error
        """
        if not self.api_key:
            return []

        try:
            async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
                response = await client.get(
                    f"{self.BASE_URL}/movie/{tmdb_id}/videos",
                    params={"api_key": self.api_key},
                )
                response.raise_for_status()
                return response.json().get("results", []) or []

        except Exception as e:
            logger.error(f"TMDb videos error for ID {tmdb_id}: {e}")
            return []

    async def find_trailer(self, title: str, year: int | None = None) -> str | None:
        """
        Find a YouTube trailer key for a film.

        Returns:
            Video key, or None when the search or the video list comes up empty
        """
        film = await self.search_film(title, year)
        if not film or film.get("id") is None:
            return None

        videos = await self.get_videos(film["id"])
        if not videos:
            logger.info(f"No TMDb videos for: {title}")
            return None

        return select_trailer(videos)
