"""In-process movie catalog fed by the pipeline."""

import asyncio
import logging
from collections.abc import Callable
from contextlib import aclosing
from datetime import datetime, timezone

from cinevo.schemas.movie import MovieDetail
from cinevo.services.pipeline import MoviePipeline

logger = logging.getLogger(__name__)


class MovieCatalog:
    """
    Holds the latest movie list and the state of the load feeding it.

    ``movies`` is replaced at every pipeline emission so readers see
    partial progress. A failed load records its message in ``error`` and
    leaves the movies from earlier emissions in place. Starting a new load
    cancels the one in flight; the newest caller wins.
    """

    def __init__(self, pipeline_factory: Callable[[], MoviePipeline]) -> None:
        self.pipeline_factory = pipeline_factory
        self.movies: list[MovieDetail] = []
        self.loading = False
        self.error: str | None = None
        self.updated_at: datetime | None = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    def get(self, slug: str) -> MovieDetail | None:
        return next((movie for movie in self.movies if movie.slug == slug), None)

    async def load(self, bypass_cache: bool = False) -> None:
        """Run the pipeline to completion, updating the catalog as it goes."""
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None
        try:
            async with aclosing(self.pipeline_factory().load(bypass_cache=bypass_cache)) as emissions:
                async for movies in emissions:
                    if generation != self._generation:
                        return
                    self.movies = movies
                    self.updated_at = datetime.now(timezone.utc)
        except asyncio.CancelledError:
            logger.info("Catalog load cancelled")
            raise
        except Exception as e:
            logger.error(f"Catalog load failed: {e}", exc_info=True)
            if generation == self._generation:
                self.error = str(e) or "Failed to load movies"
        finally:
            if generation == self._generation:
                self.loading = False

    def start(self, bypass_cache: bool = False) -> "asyncio.Task[None]":
        """Start a load in the background, cancelling any load already running."""
        if self._task is not None and not self._task.done():
            logger.info("Cancelling in-flight catalog load")
            self._task.cancel()
        self._task = asyncio.create_task(self.load(bypass_cache=bypass_cache))
        return self._task

    def refresh(self) -> "asyncio.Task[None]":
        """Clear every cache and rebuild from scratch."""
        return self.start(bypass_cache=True)

    async def wait(self) -> None:
        """Wait for the current background load, if any."""
        if self._task is not None:
            await asyncio.wait([self._task])

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await self.wait()
