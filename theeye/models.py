"""
Data Model — records produced by one analysis run.

Every record here is created fresh per document and lives only until
the report is assembled. Nothing is persisted or resolved across
documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


UNKNOWN = "unknown"

SOURCE_TYPES = ("news", "official", "FOI", "report", "social", "unknown")


class DocumentContractError(ValueError):
    """Raised before the pipeline starts when the caller's input is malformed."""


# ============================================================
# INPUT
# ============================================================

@dataclass(frozen=True)
class Document:
    """The unit of analysis. Immutable once submitted."""
    text: str
    source_id: str
    fetch_date: str                      # ISO-8601, validated
    source_type: Optional[str] = None    # one of SOURCE_TYPES, or None to detect
    metadata_overrides: dict = field(default_factory=dict)

    @classmethod
    def from_input(cls, payload: dict) -> "Document":
        """
        Validate a raw pipeline input and build a Document.

        Missing or empty text is allowed (it yields an empty report).
        A missing or unparseable fetch_date is a contract violation.
        """
        if not isinstance(payload, dict):
            raise DocumentContractError("Document input must be a mapping")

        text = payload.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise DocumentContractError("'text' must be a string")

        source_id = payload.get("source_url_or_id") or payload.get("source_id") or ""
        if not isinstance(source_id, str):
            raise DocumentContractError("'source_url_or_id' must be a string")

        fetch_date = _validate_fetch_date(payload.get("fetch_date"))

        source_type = payload.get("source_type")
        if source_type is not None and source_type not in SOURCE_TYPES:
            raise DocumentContractError(
                f"Unknown source_type {source_type!r}; expected one of {SOURCE_TYPES}"
            )

        overrides = payload.get("metadata_overrides") or {}
        if not isinstance(overrides, dict):
            raise DocumentContractError("'metadata_overrides' must be a mapping")
        _validate_overrides(overrides)

        return cls(
            text=text,
            source_id=source_id or UNKNOWN,
            fetch_date=fetch_date,
            source_type=source_type,
            metadata_overrides=dict(overrides),
        )


TEXT_OVERRIDES = ("title", "date", "publication_date", "author", "language")


def _validate_overrides(overrides: dict) -> None:
    """Override values land in typed metadata fields; reject anything else."""
    for key in TEXT_OVERRIDES:
        value = overrides.get(key)
        if value is not None and not isinstance(value, str):
            raise DocumentContractError(f"metadata override {key!r} must be a string")

    jurisdiction = overrides.get("jurisdiction")
    if jurisdiction is None or isinstance(jurisdiction, str):
        return
    if not isinstance(jurisdiction, dict):
        raise DocumentContractError(
            "metadata override 'jurisdiction' must be a string or a {location, level} mapping"
        )
    for key in ("location", "level"):
        value = jurisdiction.get(key)
        if value is not None and not isinstance(value, str):
            raise DocumentContractError(f"jurisdiction override {key!r} must be a string")


def _validate_fetch_date(value: Any) -> str:
    if value is None or value == "":
        raise DocumentContractError("'fetch_date' is required")
    if isinstance(value, datetime):
        return value.isoformat()
    if not isinstance(value, str):
        raise DocumentContractError("'fetch_date' must be an ISO-8601 string")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DocumentContractError(f"'fetch_date' is not ISO-8601: {value!r}") from e
    return value


# ============================================================
# METADATA & ENTITIES
# ============================================================

@dataclass
class Jurisdiction:
    location: str = UNKNOWN
    level: str = UNKNOWN     # "city" | "province" | "federal" | "unknown"


@dataclass
class Metadata:
    title: str
    date: str
    publication_date: str
    source_url: str
    author: str
    source_type: str
    jurisdiction: Jurisdiction
    language: str = "en"
    word_count: int = 0
    raw_metadata: dict = field(default_factory=dict)


@dataclass
class Person:
    full_name: str
    role: str                # role title if detected, else "unknown"
    context: str
    offset: int


@dataclass
class Organization:
    name: str
    category: str            # "workers_comp" | "government" | "insurance" | "other"
    context: str
    offset: int


@dataclass
class MonetaryAmount:
    amount: str              # canonical text, e.g. "50,000"
    scale: str               # "thousand" | "million" | "billion" | "dollars"
    context: str
    offset: int


@dataclass
class DateMention:
    date: str
    context: str
    offset: int


@dataclass
class EntitySet:
    """Deduplicated entity lists for a single document."""
    people: list[Person] = field(default_factory=list)
    organizations: list[Organization] = field(default_factory=list)
    money: list[MonetaryAmount] = field(default_factory=list)
    dates: list[DateMention] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.people or self.organizations or self.money or self.dates)


@dataclass
class Relationship:
    """Proximity-inferred link. Textual co-occurrence, not verified fact."""
    type: str                # currently only "employment"
    source: str              # person full_name
    target: str              # organization name
    confidence: str          # "high" | "medium"
    distance: int
    evidence: str


# ============================================================
# CLAIMS & CORROBORATION
# ============================================================

@dataclass
class Claim:
    """A single textual sighting of an allegation."""
    claim_type: str
    matched_text: str
    claim_text: str          # ±200 char window around the match
    offset: int
    alleged_actor: str
    alleged_victim: str
    date_of_event: Optional[str]
    quote: str
    source_snippet: str      # ±300 char window around the match
    evidence_points: int
    evidence_strength: str   # "Low" | "Medium" | "High"


@dataclass
class SourceHit:
    source: str
    url: str
    snippet: str
    confidence: str          # "high" | "medium"
    last_checked: str


@dataclass
class CorroborationResult:
    claim: str
    claim_type: str
    corroborating_sources: list[SourceHit]
    corroboration_level: str         # "strong" | "moderate" | "weak"
    needs_further_investigation: bool
    sources_checked: list[str] = field(default_factory=list)
    sources_unavailable: list[str] = field(default_factory=list)


# ============================================================
# SCORING, ACTIONS, PROVENANCE
# ============================================================

@dataclass
class RiskAssessment:
    score: int
    reasons: list[str]
    priority: str            # "CRITICAL" | "HIGH" | "MEDIUM" | "LOW"
    breakdown: dict = field(default_factory=dict)

    @property
    def explanation(self) -> str:
        return "; ".join(self.reasons)


@dataclass
class Action:
    action_type: str
    description: str
    priority: str
    payload: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "action_type": self.action_type,
            "description": self.description,
            "priority": self.priority,
            **self.payload,
        }


@dataclass
class ProvenanceEntry:
    source: str
    url: str
    snippet: str
    retrieved_at: str
    verification_method: str         # "direct_ingestion" | "cross_reference"
    claim_index: Optional[int] = None


# ============================================================
# RIGHTS-IMPACT CLASSIFIER
# ============================================================

@dataclass
class ViolationFlag:
    type: str
    name: str
    description: str
    matched_keywords: list[str]
    charter_citation: str
    treaty_citation: str
    severity: str            # "critical" | "high" | "medium"


@dataclass
class ComplianceIssue:
    citation: str            # section or article
    right: str
    concern: str


@dataclass
class ComplianceStatus:
    status: str = "REQUIRES_REVIEW"
    issues: list[ComplianceIssue] = field(default_factory=list)


@dataclass
class PopulationImpact:
    name: str
    matched_keywords: list[str]


@dataclass
class RightsClassification:
    violations: list[ViolationFlag]
    charter: ComplianceStatus
    human_rights: ComplianceStatus
    treaty: ComplianceStatus
    impacted_populations: list[PopulationImpact]
