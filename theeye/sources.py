"""
Authoritative Source Registry

Static, versioned list of the sources the corroboration engine may
consult. The engine depends only on each entry's shape (name,
category, queryability, relevance hints); how a source is actually
queried belongs to a SourceLookup backend (see theeye.lookup).
"""

from __future__ import annotations

from dataclasses import dataclass

REGISTRY_VERSION = "2025.1"

SOURCE_CATEGORIES = ("official", "oversight", "legal", "data", "legislative")


@dataclass(frozen=True)
class AuthoritativeSource:
    name: str
    category: str                      # one of SOURCE_CATEGORIES
    url: str
    query_method: str                  # "api" | "search" | "rss"
    queryable: bool = True
    # Organizations this source reports on (matched against a claim's alleged actor)
    organizations: tuple[str, ...] = ()
    # Claim types this source is relevant to regardless of actor
    claim_types: tuple[str, ...] = ()


SOURCE_REGISTRY: tuple[AuthoritativeSource, ...] = (
    AuthoritativeSource(
        name="WSIB Annual Reports",
        category="official",
        url="https://www.wsib.ca/en/annualreport",
        query_method="search",
        organizations=("WSIB", "WSIAT"),
    ),
    AuthoritativeSource(
        name="Ontario Auditor General Reports",
        category="oversight",
        url="https://www.auditor.on.ca/",
        query_method="search",
        claim_types=("negligence", "pattern"),
    ),
    AuthoritativeSource(
        name="CanLII Legal Decisions",
        category="legal",
        url="https://www.canlii.org/",
        query_method="api",
    ),
    AuthoritativeSource(
        name="Statistics Canada",
        category="data",
        url="https://www.statcan.gc.ca/",
        query_method="api",
        claim_types=("pattern",),
    ),
    AuthoritativeSource(
        name="Ontario Legislature Hansard",
        category="legislative",
        url="https://www.ola.org/en/legislative-business/house-documents/hansard",
        query_method="rss",
        claim_types=("violation", "denial"),
    ),
)


def describe_registry(registry: tuple[AuthoritativeSource, ...] = SOURCE_REGISTRY) -> dict:
    """JSON-friendly view of the registry. Used by GET /sources."""
    return {
        "registry_version": REGISTRY_VERSION,
        "sources": [
            {
                "name": s.name,
                "category": s.category,
                "url": s.url,
                "query_method": s.query_method,
                "queryable": s.queryable,
                "organizations": list(s.organizations),
                "claim_types": list(s.claim_types),
            }
            for s in registry
        ],
    }
