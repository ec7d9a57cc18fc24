"""Movie pipeline: listing → per-movie detail, reconcile and enrich → sort → cache."""

import asyncio
import logging
from collections.abc import AsyncIterator

from pydantic import ValidationError

from cinevo.cache import PipelineCaches
from cinevo.config import settings
from cinevo.schemas.movie import MovieDetail, MovieListing
from cinevo.scrapers import (
    DetailParser,
    FetchError,
    HtmlFetcher,
    ListingsParser,
    OverviewParser,
    ShowtimesByMovie,
    movie_url,
    overview_url,
)
from cinevo.services.omdb_client import OMDbClient, apply_rating_supplement
from cinevo.services.reconciler import merge_showtimes
from cinevo.services.scoring import sort_movies
from cinevo.services.tmdb_client import TMDbClient

logger = logging.getLogger(__name__)

MOVIES_CACHE_KEY = "movies"


class MoviePipeline:
    """
    Builds the sorted movie list for the listings site.

    Flow:
    1. Serve the aggregate cache when it is fresh (unless bypassed).
    2. Fetch the homepage for movie stubs; start the overview fetch alongside.
    3. Process stubs in batches of ``batch_size``. Within a batch every movie
       runs concurrently: detail page, reconcile with the overview, OMDb,
       TMDb. Batches run one after another.
    4. After each batch, yield the sorted accumulated list.
    5. Write the final list to the aggregate cache.
    """

    def __init__(
        self,
        caches: PipelineCaches,
        fetcher: HtmlFetcher | None = None,
        omdb_client: OMDbClient | None = None,
        tmdb_client: TMDbClient | None = None,
        batch_size: int | None = None,
        listings_parser: ListingsParser | None = None,
        detail_parser: DetailParser | None = None,
        overview_parser: OverviewParser | None = None,
    ) -> None:
        self.caches = caches
        self.fetcher = fetcher or HtmlFetcher(caches.html)
        self.omdb_client = omdb_client or OMDbClient(caches.ratings)
        self.tmdb_client = tmdb_client or TMDbClient()
        self.batch_size = max(1, batch_size or settings.pipeline_batch_size)
        self.listings_parser = listings_parser or ListingsParser()
        self.detail_parser = detail_parser or DetailParser()
        self.overview_parser = overview_parser or OverviewParser()

    async def load(self, bypass_cache: bool = False) -> AsyncIterator[list[MovieDetail]]:
        """
        Yield progressively larger sorted movie lists; the last one is final.

        Args:
            bypass_cache: Clear the HTML, rating and aggregate caches and rebuild

        Raises:
            FetchError: If the homepage cannot be fetched
        """
        if bypass_cache:
            await self.caches.clear_all()
        else:
            cached = await self.get_cached_movies()
            if cached is not None:
                logger.info(f"Serving {len(cached)} movies from cache")
                yield cached
                return

        listings = await self.fetch_movie_list()
        overview_task = asyncio.create_task(self.fetch_overview())

        movies: list[MovieDetail] = []
        try:
            for start in range(0, len(listings), self.batch_size):
                batch = listings[start:start + self.batch_size]
                results = await asyncio.gather(
                    *(self.build_movie(listing, overview_task) for listing in batch)
                )
                movies.extend(movie for movie in results if movie is not None)
                logger.info(
                    f"Processed {min(start + self.batch_size, len(listings))}/{len(listings)} movies"
                )
                yield sort_movies(movies)
        finally:
            if not overview_task.done():
                overview_task.cancel()

        if not listings:
            yield []

        final = sort_movies(movies)
        try:
            await self.caches.movies.set(
                MOVIES_CACHE_KEY, [movie.model_dump(mode="json") for movie in final]
            )
        except Exception as e:
            logger.warning(f"Could not write movies cache: {e}")
        else:
            logger.info(f"Pipeline complete: {len(final)} movies cached")

    async def get_cached_movies(self) -> list[MovieDetail] | None:
        """Return the aggregate cache if it is fresh and decodes cleanly."""
        try:
            cached = await self.caches.movies.get(MOVIES_CACHE_KEY)
        except Exception as e:
            logger.warning(f"Could not read movies cache: {e}")
            return None
        if not isinstance(cached, list):
            return None
        try:
            return [MovieDetail.model_validate(item) for item in cached]
        except ValidationError as e:
            logger.warning(f"Discarding unreadable movies cache: {e}")
            return None

    async def fetch_movie_list(self) -> list[MovieListing]:
        html = await self.fetcher.fetch(settings.site_base_url)
        return self.listings_parser.parse(html)

    async def fetch_overview(self) -> ShowtimesByMovie:
        """Fetch and parse the overview grid; failures degrade to an empty map."""
        try:
            html = await self.fetcher.fetch(overview_url())
            return self.overview_parser.parse(html)
        except Exception as e:
            logger.warning(f"Overview unavailable, using detail-page showtimes only: {e}")
            return {}

    async def build_movie(
        self, listing: MovieListing, overview_task: "asyncio.Task[ShowtimesByMovie]"
    ) -> MovieDetail | None:
        """
        Build one movie from its stub, or None if its detail page fails.

        A detail page that cannot be fetched or has no title drops the
        movie; OMDb and TMDb failures only leave their fields empty.
        """
        try:
            html = await self.fetcher.fetch(movie_url(listing.slug))
        except FetchError as e:
            logger.error(f"Detail fetch failed for '{listing.slug}': {e}")
            return None

        movie = self.detail_parser.parse(listing.slug, html)
        if movie is None:
            return None

        if not movie.poster_url and listing.poster_url:
            movie = movie.model_copy(update={"poster_url": listing.poster_url})
        if listing.rough_duration:
            movie = movie.model_copy(update={"rough_duration": listing.rough_duration})

        overview = await asyncio.shield(overview_task)
        movie = movie.model_copy(
            update={"showtimes": merge_showtimes(movie.showtimes, overview.get(listing.slug, []))}
        )

        supplement = await self.omdb_client.enrich(movie.title)
        movie = apply_rating_supplement(movie, supplement)

        trailer_key = await self.tmdb_client.find_trailer(movie.title, movie.year)
        if trailer_key:
            movie = movie.model_copy(update={"trailer_key": trailer_key})

        return movie
