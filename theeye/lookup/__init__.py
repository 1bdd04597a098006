"""
Source Lookup — Abstract Interface

Every corroboration query goes through this interface. Live network
backends, cached fixtures and test doubles are interchangeable; swap
them with THEEYE_LOOKUP_BACKEND in env or by passing one to
analyze_document().
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from theeye.models import Claim, SourceHit
from theeye.sources import AuthoritativeSource


class SourceLookup(ABC):
    """Abstract base for source lookup backends."""

    name: str = "abstract"

    @abstractmethod
    async def lookup(self, claim: Claim, source: AuthoritativeSource) -> list[SourceHit]:
        """Return zero or more records in `source` that corroborate `claim`."""
        ...


class NullLookup(SourceLookup):
    """Backend that never finds anything. Every claim comes back weak."""

    name = "null"

    async def lookup(self, claim: Claim, source: AuthoritativeSource) -> list[SourceHit]:
        return []
