"""
Corroboration Engine

Checks each claim against the authoritative source registry through a
SourceLookup backend. This is the only stage that performs I/O, and the
only one allowed to suspend.

Contract (holds for every backend):
  - Relevance: legal sources are always checked; oversight sources for
    fraud claims; sources covering the claim's alleged actor (listed
    organization, or a distinctive word shared with the source name);
    sources that declare the claim's type. Non-queryable sources are skipped.
  - Level: strong (>=2 hits), moderate (1), weak (0).
    needs_further_investigation is True exactly when weak.
  - Claims fan out concurrently, and so do the sources for a claim.
    Results come back in claim-extraction order.
  - A lookup that errors or exceeds the timeout counts as zero hits for
    that source. It lowers the level; it never fails the document.
  - Cancellation propagates: nothing partial is returned.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional

from theeye.lookup import SourceLookup
from theeye.models import Claim, CorroborationResult, SourceHit, UNKNOWN
from theeye.sources import SOURCE_REGISTRY, AuthoritativeSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

# Words too common in agency and source names to tie an actor to a source
GENERIC_NAME_WORDS = frozenset({
    "the", "and", "for", "ministry", "department", "office", "government",
    "board", "agency", "ontario", "canada", "canadian", "federal",
    "provincial", "general", "annual", "reports", "legal", "decisions",
})

_WORD = re.compile(r"[A-Za-z0-9]+")


async def corroborate_claims(
    claims: list[Claim],
    lookup: SourceLookup,
    registry: tuple[AuthoritativeSource, ...] = SOURCE_REGISTRY,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[CorroborationResult]:
    """Return one CorroborationResult per claim, in claim order."""
    if not claims:
        return []
    results = await asyncio.gather(
        *[corroborate_claim(c, lookup, registry, timeout) for c in claims]
    )
    return list(results)


async def corroborate_claim(
    claim: Claim,
    lookup: SourceLookup,
    registry: tuple[AuthoritativeSource, ...] = SOURCE_REGISTRY,
    timeout: float = DEFAULT_TIMEOUT,
) -> CorroborationResult:
    relevant = [s for s in registry if is_relevant(claim, s)]

    outcomes = await asyncio.gather(
        *[_query_source(claim, s, lookup, timeout) for s in relevant]
    )

    hits: list[SourceHit] = []
    unavailable: list[str] = []
    for source, found in zip(relevant, outcomes):
        if found is None:
            unavailable.append(source.name)
            continue
        hits.extend(found)

    level = corroboration_level(len(hits))
    return CorroborationResult(
        claim=claim.claim_text,
        claim_type=claim.claim_type,
        corroborating_sources=hits,
        corroboration_level=level,
        needs_further_investigation=level == "weak",
        sources_checked=[s.name for s in relevant],
        sources_unavailable=unavailable,
    )


def is_relevant(claim: Claim, source: AuthoritativeSource) -> bool:
    """Deterministic relevance selection. No sampling."""
    if not source.queryable:
        return False
    if source.category == "legal":
        return True
    if claim.claim_type == "fraud" and source.category == "oversight":
        return True
    actor = claim.alleged_actor
    if actor and actor != UNKNOWN:
        if actor in source.organizations:
            return True
        if actor_tokens(actor) & _words(source.name):
            return True
    return claim.claim_type in source.claim_types


def actor_tokens(actor: str) -> set[str]:
    """Distinctive words of an actor name, lowercased."""
    return {w for w in _words(actor) if len(w) >= 3 and w not in GENERIC_NAME_WORDS}


def _words(name: str) -> set[str]:
    return {w.lower() for w in _WORD.findall(name)}


def corroboration_level(hit_count: int) -> str:
    if hit_count >= 2:
        return "strong"
    if hit_count == 1:
        return "moderate"
    return "weak"


async def _query_source(
    claim: Claim,
    source: AuthoritativeSource,
    lookup: SourceLookup,
    timeout: float,
) -> Optional[list[SourceHit]]:
    """Run one lookup. None means the source was unavailable (recorded as zero hits)."""
    try:
        return list(await asyncio.wait_for(lookup.lookup(claim, source), timeout=timeout))
    except asyncio.TimeoutError:
        logger.warning(
            "Source lookup timed out after %.1fs: %s", timeout, source.name,
            extra={"source": source.name, "error": "timeout"},
        )
    except Exception as e:
        logger.warning(
            "Source lookup failed: %s", source.name,
            extra={"source": source.name, "error": str(e), "error_type": type(e).__name__},
        )
    return None
