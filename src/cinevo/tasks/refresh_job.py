"""Scheduled job that keeps the movie catalog fresh."""

import logging

from cinevo.services.catalog import MovieCatalog

logger = logging.getLogger(__name__)


async def run_refresh(catalog: MovieCatalog) -> None:
    """Reload the catalog, serving the aggregate cache while it is still fresh.

    Expired caches make this a full rebuild; fresh ones make it a no-op
    apart from re-reading the cache.
    """
    logger.info("Starting scheduled catalog refresh")
    catalog.start()
    await catalog.wait()

    if catalog.error:
        logger.warning(f"Scheduled refresh failed: {catalog.error}")
    else:
        logger.info(f"Scheduled refresh complete: {len(catalog.movies)} movies")
