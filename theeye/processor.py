"""
Document Processor — the analysis pipeline.

Stages, in order:
  1. Metadata extraction
  2. Entity extraction, then relationship mapping
  3. Claim extraction
  4. Corroboration (the only stage that awaits)
  5. Risk scoring
  6. Action generation
  7. Provenance compilation

The input contract is checked before stage 1 runs. After that there is
no failure path: sparse or empty documents still produce a complete
report with explicit "unknown" placeholders.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional, Union

from theeye.actions import generate_actions
from theeye.claims import extract_claims
from theeye.config import ANALYZER_VERSION, settings
from theeye.corroboration import corroborate_claims
from theeye.entities import extract_entities
from theeye.lookup import SourceLookup
from theeye.lookup.factory import get_lookup
from theeye.metadata import extract_metadata
from theeye.models import Document
from theeye.provenance import compile_provenance
from theeye.relationships import map_relationships
from theeye.safety import apply_safety_checks
from theeye.scorer import calculate_risk_score
from theeye.sources import SOURCE_REGISTRY

logger = logging.getLogger(__name__)


# Built once so the lookup cache survives across calls
_default_lookup: Optional[SourceLookup] = None


def default_lookup() -> SourceLookup:
    """Lookup backend described by the environment settings."""
    global _default_lookup
    if _default_lookup is None:
        _default_lookup = get_lookup(
            backend_name=settings.LOOKUP_BACKEND,
            fixture_path=settings.LOOKUP_FIXTURES,
            cache_ttl=settings.LOOKUP_CACHE_TTL,
            cache_size=settings.LOOKUP_CACHE_SIZE,
        )
    return _default_lookup


async def analyze_document(
    payload: Union[dict, Document],
    lookup: Optional[SourceLookup] = None,
    *,
    timeout: Optional[float] = None,
    safety_checks: bool = False,
) -> dict:
    """
    Run the full pipeline over one document and return the report.

    Args:
        payload: Raw input mapping ({text, source_url_or_id, fetch_date,
            source_type?, metadata_overrides?}) or an already validated
            Document.
        lookup: Corroboration backend. Defaults to the configured one.
        timeout: Per-source lookup timeout in seconds.
        safety_checks: Also attach privacy/legal/explainability checks.

    Raises:
        DocumentContractError: before any stage runs, if the input
            breaks the contract.
    """
    document = payload if isinstance(payload, Document) else Document.from_input(payload)
    if lookup is None:
        lookup = default_lookup()
    if timeout is None:
        timeout = settings.CORROBORATION_TIMEOUT

    started = time.perf_counter()
    text = document.text

    metadata = extract_metadata(document)
    entities = extract_entities(text)
    relationships = map_relationships(entities, text)
    claims = extract_claims(text, entities)
    corroboration = await corroborate_claims(
        claims, lookup, registry=SOURCE_REGISTRY, timeout=timeout,
    )
    risk = calculate_risk_score(claims, corroboration)
    actions = generate_actions(claims, corroboration, risk)
    provenance = compile_provenance(document, corroboration)

    elapsed_ms = int((time.perf_counter() - started) * 1000)

    report = {
        "id": report_id(text),
        "title": metadata.title,
        "date": metadata.date,
        "jurisdiction": asdict(metadata.jurisdiction),
        "source_url": document.source_id,
        "source_type": metadata.source_type,
        "fetch_date": document.fetch_date,
        "metadata": asdict(metadata),
        "entities": {
            "people": [asdict(p) for p in entities.people],
            "organizations": [asdict(o) for o in entities.organizations],
            "money": [asdict(m) for m in entities.money],
            "dates": [asdict(d) for d in entities.dates],
        },
        "relationships": [asdict(r) for r in relationships],
        "claims": [asdict(c) for c in claims],
        "corroboration": [asdict(r) for r in corroboration],
        "risk_score": risk.score,
        "risk_explanation": risk.explanation,
        "risk_breakdown": risk.breakdown,
        "priority": risk.priority,
        "suggested_actions": [a.to_dict() for a in actions],
        "provenance": [asdict(p) for p in provenance],
        "processing_time_ms": elapsed_ms,
        "processed_at": datetime.now(timezone.utc).isoformat(),
        "version": ANALYZER_VERSION,
    }

    if safety_checks:
        apply_safety_checks(report)

    logger.info(
        "Document analyzed: %s", report["id"],
        extra={
            "report_id": report["id"],
            "risk_score": risk.score,
            "priority": risk.priority,
            "claims_count": len(claims),
            "duration_ms": elapsed_ms,
        },
    )
    return report


def report_id(text: str) -> str:
    """Opaque id: millisecond timestamp plus a content hash prefix."""
    digest = hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()[:12]
    return f"eye_{int(time.time() * 1000)}_{digest}"
