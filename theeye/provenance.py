"""
Provenance Compiler

Ordered trail of every source consulted. Entry zero is always the
ingested document; corroborating hits follow in claim order, then in
the order each claim's sources returned them. Append-only: a source
cited by several claims appears once per claim.
"""

from __future__ import annotations

from theeye.models import CorroborationResult, Document, ProvenanceEntry

SNIPPET_LENGTH = 200


def compile_provenance(
    document: Document,
    corroboration: list[CorroborationResult],
) -> list[ProvenanceEntry]:
    provenance = [
        ingestion_entry(document.source_id, document.text, document.fetch_date)
    ]

    for index, result in enumerate(corroboration):
        for hit in result.corroborating_sources:
            provenance.append(ProvenanceEntry(
                source=hit.source,
                url=hit.url,
                snippet=hit.snippet,
                retrieved_at=hit.last_checked,
                verification_method="cross_reference",
                claim_index=index,
            ))

    return provenance


def ingestion_entry(source_id: str, text: str, fetch_date: str) -> ProvenanceEntry:
    """Entry zero: the submitted document itself."""
    snippet = text[:SNIPPET_LENGTH]
    if len(text) > SNIPPET_LENGTH:
        snippet += "..."
    return ProvenanceEntry(
        source=source_id,
        url=source_id,
        snippet=snippet,
        retrieved_at=fetch_date,
        verification_method="direct_ingestion",
    )
