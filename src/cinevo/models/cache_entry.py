"""Cache entry model backing the SQL cache store."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cinevo.models.base import Base, TimestampMixin


class CacheEntry(Base, TimestampMixin):
    """
    One cached value.

    The payload is the JSON envelope written by the cache store, so expiry
    and schema version checks happen in Python rather than in SQL.
    """

    __tablename__ = "cache_entries"

    namespace: Mapped[str] = mapped_column(String(50), primary_key=True)
    key: Mapped[str] = mapped_column(String(1000), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<CacheEntry(namespace={self.namespace!r}, key={self.key!r})>"
