"""
Source Lookup Cache

In-memory TTL cache for corroboration lookups.
Key = SHA-256(claim text + source name). Default TTL = 1 hour.

Prevents repeated queries to the same authoritative source for
identical claim windows (common when one phrase repeats in a document,
or the same page is re-ingested). Guarded by an asyncio lock.

Usage:
    from theeye.cache import LookupCache
    cache = LookupCache(ttl_seconds=600)
    hits = await cache.get(claim.claim_text, source.name)
    if hits is None:
        hits = await backend.lookup(claim, source)
        await cache.put(claim.claim_text, source.name, hits)
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Optional

from theeye.models import SourceHit


class LookupCache:
    """In-memory cache with TTL and oldest-first eviction."""

    def __init__(self, ttl_seconds: int = 3600, max_entries: int = 500):
        self._cache: dict[str, tuple[float, list[SourceHit]]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _make_key(claim_text: str, source_name: str) -> str:
        raw = f"{claim_text}||{source_name}"
        return hashlib.sha256(raw.encode("utf-8", "surrogatepass")).hexdigest()

    async def get(self, claim_text: str, source_name: str) -> Optional[list[SourceHit]]:
        """Return cached hits if present and not expired. An empty list is a cached miss."""
        key = self._make_key(claim_text, source_name)
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            ts, hits = entry
            if time.monotonic() - ts > self._ttl:
                del self._cache[key]
                self._misses += 1
                return None

            self._hits += 1
            return list(hits)

    async def put(self, claim_text: str, source_name: str, hits: list[SourceHit]) -> None:
        key = self._make_key(claim_text, source_name)
        async with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_entries:
                oldest_key = min(self._cache, key=lambda k: self._cache[k][0])
                del self._cache[oldest_key]

            self._cache[key] = (time.monotonic(), list(hits))

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "entries": len(self._cache),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }
