"""TTL-aware key-value stores for HTML pages, rating lookups and movie lists."""

import asyncio
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cinevo.models import CacheEntry

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """
    Abstract key-value store with expiry and schema versioning.

    Every value is wrapped in a JSON envelope carrying the write timestamp
    and the store's schema version. An entry is returned by ``get`` only
    while ``now - stored_at < ttl`` and its version matches; anything else,
    including undecodable payloads, is a miss.

    Subclasses only move encoded strings in and out of their backing medium.
    """

    def __init__(
        self,
        namespace: str,
        ttl: timedelta | None = None,
        version: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            namespace: Name separating this store's keys from other stores
            ttl: Maximum age of a valid entry (None = never expires)
            version: Schema version; entries written under another version are ignored
            clock: Source of the current time in epoch seconds
        """
        self.namespace = namespace
        self.ttl = ttl
        self.version = version
        self.clock = clock

    async def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or None on a miss."""
        payload = await self._read(key)
        if payload is None:
            return None
        return self._decode(key, payload)

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under ``key``."""
        envelope = {"value": value, "stored_at": self.clock(), "version": self.version}
        await self._write(key, json.dumps(envelope))

    async def delete(self, key: str) -> None:
        await self._remove(key)

    async def clear(self) -> None:
        """Remove every entry in this namespace."""
        await self._clear()
        logger.info(f"Cleared '{self.namespace}' cache")

    def _decode(self, key: str, payload: str) -> Any | None:
        try:
            envelope = json.loads(payload)
            stored_at = float(envelope["stored_at"])
            version = envelope["version"]
            value = envelope["value"]
        except (ValueError, TypeError, KeyError) as e:
            logger.debug(f"Cache '{self.namespace}': corrupt entry for {key!r}: {e}")
            return None

        if version != self.version:
            logger.debug(f"Cache '{self.namespace}': stale schema version for {key!r}")
            return None

        if self.ttl is not None and self.clock() - stored_at >= self.ttl.total_seconds():
            return None

        return value

    @abstractmethod
    async def _read(self, key: str) -> str | None:
        pass

    @abstractmethod
    async def _write(self, key: str, payload: str) -> None:
        pass

    @abstractmethod
    async def _remove(self, key: str) -> None:
        pass

    @abstractmethod
    async def _clear(self) -> None:
        pass


class MemoryStore(CacheStore):
    """Process-local store. Entries are kept encoded, exactly as a persistent store would hold them."""

    def __init__(self, namespace: str, **kwargs: Any) -> None:
        super().__init__(namespace, **kwargs)
        self._entries: dict[str, str] = {}

    async def _read(self, key: str) -> str | None:
        return self._entries.get(key)

    async def _write(self, key: str, payload: str) -> None:
        self._entries[key] = payload

    async def _remove(self, key: str) -> None:
        self._entries.pop(key, None)

    async def _clear(self) -> None:
        self._entries.clear()


class FileStore(CacheStore):
    """
    Store backed by one JSON document per namespace.

    The document maps keys to encoded envelopes. A missing or unreadable
    document behaves as an empty store; write failures are logged and dropped.
    File work runs in a worker thread. Each write also drops entries that
    are expired or written under another schema version.
    """

    def __init__(self, namespace: str, directory: str | Path, **kwargs: Any) -> None:
        super().__init__(namespace, **kwargs)
        self.path = Path(directory) / f"{namespace}.json"
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Cache '{self.namespace}': unreadable file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, entries: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(entries), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Cache '{self.namespace}': could not write {self.path}: {e}")

    def _put(self, key: str, payload: str) -> None:
        with self._lock:
            entries = {k: v for k, v in self._load().items() if self._decode(k, v) is not None}
            entries[key] = payload
            self._save(entries)

    def _pop(self, key: str) -> None:
        with self._lock:
            entries = self._load()
            if entries.pop(key, None) is not None:
                self._save(entries)

    async def _read(self, key: str) -> str | None:
        entries = await asyncio.to_thread(self._load)
        return entries.get(key)

    async def _write(self, key: str, payload: str) -> None:
        await asyncio.to_thread(self._put, key, payload)

    async def _remove(self, key: str) -> None:
        await asyncio.to_thread(self._pop, key)

    async def _clear(self) -> None:
        try:
            await asyncio.to_thread(self.path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning(f"Cache '{self.namespace}': could not remove {self.path}: {e}")


class SqlStore(CacheStore):
    """Store backed by the ``cache_entries`` table."""

    def __init__(
        self,
        namespace: str,
        session_factory: async_sessionmaker[AsyncSession],
        **kwargs: Any,
    ) -> None:
        super().__init__(namespace, **kwargs)
        self.session_factory = session_factory

    async def _read(self, key: str) -> str | None:
        async with self.session_factory() as db:
            result = await db.execute(
                select(CacheEntry.payload).where(
                    CacheEntry.namespace == self.namespace,
                    CacheEntry.key == key,
                )
            )
            return result.scalar_one_or_none()

    async def _write(self, key: str, payload: str) -> None:
        async with self.session_factory() as db:
            await db.merge(CacheEntry(namespace=self.namespace, key=key, payload=payload))
            await db.commit()

    async def _remove(self, key: str) -> None:
        async with self.session_factory() as db:
            await db.execute(
                delete(CacheEntry).where(
                    CacheEntry.namespace == self.namespace,
                    CacheEntry.key == key,
                )
            )
            await db.commit()

    async def _clear(self) -> None:
        async with self.session_factory() as db:
            await db.execute(delete(CacheEntry).where(CacheEntry.namespace == self.namespace))
            await db.commit()
