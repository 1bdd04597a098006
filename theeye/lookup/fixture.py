"""
Fixture Lookup — deterministic in-memory records.

Holds a fixed set of records per source. A record corroborates a
claim when any of its keywords appears in the claim window (case
insensitive). Same input, same hits: suitable for offline runs,
demos and tests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from theeye.lookup import SourceLookup
from theeye.models import Claim, SourceHit
from theeye.sources import AuthoritativeSource


@dataclass(frozen=True)
class FixtureRecord:
    source: str
    url: str
    snippet: str
    keywords: tuple[str, ...]
    retrieved_at: str
    confidence: str = "medium"


class FixtureLookup(SourceLookup):
    """Match claims against pre-loaded records."""

    name = "fixture"

    def __init__(self, records: Iterable[FixtureRecord] = ()):
        self._by_source: dict[str, list[FixtureRecord]] = {}
        for record in records:
            self._by_source.setdefault(record.source, []).append(record)

    @classmethod
    def from_json(cls, path: str | Path) -> "FixtureLookup":
        """
        Load records from a JSON file: a list of objects with
        source, url, snippet, keywords, retrieved_at and optional confidence.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            FixtureRecord(
                source=r["source"],
                url=r["url"],
                snippet=r["snippet"],
                keywords=tuple(r.get("keywords", ())),
                retrieved_at=r["retrieved_at"],
                confidence=r.get("confidence", "medium"),
            )
            for r in raw
        )

    async def lookup(self, claim: Claim, source: AuthoritativeSource) -> list[SourceHit]:
        window = claim.claim_text.lower()
        hits = []
        for record in self._by_source.get(source.name, []):
            if any(kw.lower() in window for kw in record.keywords):
                hits.append(SourceHit(
                    source=source.name,
                    url=record.url,
                    snippet=record.snippet,
                    confidence=record.confidence,
                    last_checked=record.retrieved_at,
                ))
        return hits
