"""Cache store registry and the three named pipeline caches."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Type

from cinevo.cache.store import CacheStore, FileStore, MemoryStore, SqlStore
from cinevo.config import settings

# Bump when the shape of RatingSupplement changes so old lookups are ignored
RATING_CACHE_VERSION = 2

# Registry mapping backend names to store classes
STORE_REGISTRY: dict[str, Type[CacheStore]] = {
    "memory": MemoryStore,
    "file": FileStore,
    "sql": SqlStore,
}


@dataclass
class PipelineCaches:
    """The stores shared by the fetcher, the rating client and the pipeline."""

    html: CacheStore
    ratings: CacheStore
    movies: CacheStore

    async def clear_all(self) -> None:
        await self.html.clear()
        await self.ratings.clear()
        await self.movies.clear()


def get_store(backend: str, namespace: str, **kwargs: Any) -> CacheStore:
    """
    Create a store instance by backend name.

    Args:
        backend: One of the STORE_REGISTRY keys
        namespace: Store namespace
        **kwargs: ttl / version / clock passed through to the store

    Raises:
        ValueError: If the backend name is unknown
    """
    store_class = STORE_REGISTRY.get(backend)
    if store_class is None:
        raise ValueError(f"Unknown cache backend: {backend!r}")

    if store_class is FileStore:
        return FileStore(namespace, directory=settings.cache_dir, **kwargs)
    if store_class is SqlStore:
        from cinevo.database import AsyncSessionLocal

        return SqlStore(namespace, session_factory=AsyncSessionLocal, **kwargs)
    return store_class(namespace, **kwargs)


def build_caches(backend: str | None = None) -> PipelineCaches:
    """Build the html, ratings and movies stores for the configured backend."""
    backend = backend or settings.cache_backend
    return PipelineCaches(
        html=get_store(backend, "html", ttl=timedelta(hours=settings.html_cache_ttl_hours)),
        ratings=get_store(backend, "ratings", version=RATING_CACHE_VERSION),
        movies=get_store(backend, "movies", ttl=timedelta(hours=settings.movies_cache_ttl_hours)),
    )


__all__ = [
    "STORE_REGISTRY",
    "CacheStore",
    "FileStore",
    "MemoryStore",
    "PipelineCaches",
    "RATING_CACHE_VERSION",
    "SqlStore",
    "build_caches",
    "get_store",
]
