"""SQLAlchemy ORM models."""

from cinevo.models.base import Base
from cinevo.models.cache_entry import CacheEntry

__all__ = ["Base", "CacheEntry"]
