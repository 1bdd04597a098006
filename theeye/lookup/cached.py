"""
Cached Lookup — TTL cache in front of another backend.

Only completed lookups are cached. A backend error or timeout is not
stored, so the next run queries the source again.
"""

from __future__ import annotations

from theeye.cache import LookupCache
from theeye.lookup import SourceLookup
from theeye.models import Claim, SourceHit
from theeye.sources import AuthoritativeSource


class CachedLookup(SourceLookup):

    def __init__(self, backend: SourceLookup, cache: LookupCache | None = None):
        self.backend = backend
        self.cache = cache or LookupCache()
        self.name = f"cached:{backend.name}"

    async def lookup(self, claim: Claim, source: AuthoritativeSource) -> list[SourceHit]:
        cached = await self.cache.get(claim.claim_text, source.name)
        if cached is not None:
            return cached

        hits = await self.backend.lookup(claim, source)
        await self.cache.put(claim.claim_text, source.name, hits)
        return hits
