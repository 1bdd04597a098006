"""
API Schemas — Request and Response Models

Pydantic models for The Eye API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


SOURCE_TYPE_PATTERN = "^(news|official|FOI|report|social|unknown)$"


# ============================================================
# ANALYZE — REQUEST
# ============================================================

class AnalyzeRequest(BaseModel):
    """POST /analyze request body."""
    text: str = Field("", max_length=200_000,
                      description="Document text. Empty text yields an empty report.")
    source_url_or_id: str = Field("unknown", max_length=2_000,
                                  description="Where the document came from.")
    fetch_date: str = Field(..., min_length=1,
                            description="ISO-8601 timestamp the document was fetched.")
    source_type: Optional[str] = Field(None, pattern=SOURCE_TYPE_PATTERN)
    metadata_overrides: Optional[dict] = None
    safety_checks: bool = Field(False, description="Attach privacy/legal/explainability checks.")

    model_config = {"json_schema_extra": {"examples": [
        {
            "text": "WSIB denied John Smith's claim for $50,000 in 2023.",
            "source_url_or_id": "https://example.org/story",
            "fetch_date": "2025-01-15T10:00:00Z",
        },
    ]}}

    def to_payload(self) -> dict:
        return self.model_dump(exclude={"safety_checks"}, exclude_none=True)


class AnalyzeBatchRequest(BaseModel):
    """POST /analyze/batch request body."""
    items: list[AnalyzeRequest] = Field(..., min_length=1, max_length=50)


# ============================================================
# ANALYZE — REPORT
# ============================================================

class JurisdictionModel(BaseModel):
    location: str
    level: str


class MetadataModel(BaseModel):
    title: str
    date: str
    publication_date: str
    source_url: str
    author: str
    source_type: str
    jurisdiction: JurisdictionModel
    language: str = "en"
    word_count: int = 0
    raw_metadata: dict = Field(default_factory=dict)


class PersonModel(BaseModel):
    full_name: str
    role: str
    context: str
    offset: int


class OrganizationModel(BaseModel):
    name: str
    category: str
    context: str
    offset: int


class MoneyModel(BaseModel):
    amount: str
    scale: str
    context: str
    offset: int


class DateModel(BaseModel):
    date: str
    context: str
    offset: int


class EntitiesModel(BaseModel):
    people: list[PersonModel] = Field(default_factory=list)
    organizations: list[OrganizationModel] = Field(default_factory=list)
    money: list[MoneyModel] = Field(default_factory=list)
    dates: list[DateModel] = Field(default_factory=list)


class RelationshipModel(BaseModel):
    type: str
    source: str
    target: str
    confidence: str
    distance: int
    evidence: str


class ClaimModel(BaseModel):
    claim_type: str
    matched_text: str
    claim_text: str
    offset: int
    alleged_actor: str
    alleged_victim: str
    date_of_event: Optional[str] = None
    quote: str
    source_snippet: str
    evidence_points: int
    evidence_strength: str


class SourceHitModel(BaseModel):
    source: str
    url: str
    snippet: str
    confidence: str
    last_checked: str


class CorroborationModel(BaseModel):
    claim: str
    claim_type: str
    corroborating_sources: list[SourceHitModel]
    corroboration_level: str
    needs_further_investigation: bool
    sources_checked: list[str] = Field(default_factory=list)
    sources_unavailable: list[str] = Field(default_factory=list)


class ProvenanceModel(BaseModel):
    source: str
    url: str
    snippet: str
    retrieved_at: str
    verification_method: str
    claim_index: Optional[int] = None


class AnalysisReport(BaseModel):
    """POST /analyze response body."""
    id: str
    title: str
    date: str
    jurisdiction: JurisdictionModel
    source_url: str
    source_type: str
    fetch_date: str
    metadata: MetadataModel
    entities: EntitiesModel
    relationships: list[RelationshipModel]
    claims: list[ClaimModel]
    corroboration: list[CorroborationModel]
    risk_score: int = Field(..., ge=0, le=100)
    risk_explanation: str
    risk_breakdown: dict
    priority: str
    suggested_actions: list[dict]
    provenance: list[ProvenanceModel]
    processing_time_ms: int
    processed_at: str
    version: str
    audit_hash: Optional[str] = None
    privacy_check: Optional[dict] = None
    legal_check: Optional[dict] = None
    explainability: Optional[dict] = None
    error: Optional[str] = None


class AnalyzeBatchResponse(BaseModel):
    """POST /analyze/batch response body."""
    results: list[AnalysisReport]
    total: int
    analyzed: int


# ============================================================
# CLASSIFY
# ============================================================

class ClassifyRequest(BaseModel):
    """POST /classify request body."""
    title: str = Field(..., max_length=1_000)
    description: str = Field("", max_length=20_000)

    model_config = {"json_schema_extra": {"examples": [
        {
            "title": "Benefit Reform",
            "description": "Plan to reduce income support for injured workers with disability.",
        },
    ]}}


class ViolationModel(BaseModel):
    type: str
    name: str
    description: str
    matched_keywords: list[str]
    charter_citation: str
    treaty_citation: str
    severity: str


class ComplianceIssueModel(BaseModel):
    citation: str
    right: str
    concern: str


class PopulationModel(BaseModel):
    name: str
    matched_keywords: list[str]


class ClassificationResponse(BaseModel):
    """POST /classify response body."""
    violations: list[ViolationModel]
    charter_status: str
    human_rights_status: str
    treaty_status: str
    issues: dict[str, list[ComplianceIssueModel]]
    impacted_populations: list[PopulationModel]
    audit_hash: Optional[str] = None


class RightsItem(BaseModel):
    title: str = Field(..., max_length=1_000)
    description: str = Field("", max_length=20_000)
    scope: str = "unknown"


class RightsReportRequest(BaseModel):
    """POST /classify/report request body."""
    items: list[RightsItem] = Field(..., min_length=1, max_length=500)


class PopulationCount(BaseModel):
    name: str
    count: int


class RightsSummary(BaseModel):
    total_items_analyzed: int
    violations_detected: int
    charter_concerns: int
    human_rights_concerns: int
    treaty_concerns: int
    populations_affected: list[PopulationCount]


class RightsReportResponse(BaseModel):
    """POST /classify/report response body."""
    analyses: list[dict]
    violations: dict[str, list[dict]]
    summary: RightsSummary
    audit_hash: Optional[str] = None


# ============================================================
# SOURCES
# ============================================================

class SourceDescriptor(BaseModel):
    name: str
    category: str
    url: str
    query_method: str
    queryable: bool
    organizations: list[str] = Field(default_factory=list)
    claim_types: list[str] = Field(default_factory=list)


class SourcesResponse(BaseModel):
    registry_version: str
    sources: list[SourceDescriptor]


# ============================================================
# AUDIT
# ============================================================

class AuditEntry(BaseModel):
    id: int
    prev_hash: str
    hash: str
    event_type: str
    data: dict
    timestamp: str
    analyzer_version: str


class AuditResponse(BaseModel):
    entries: list[AuditEntry]
    total_count: int


class ChainVerification(BaseModel):
    verified: bool
    entries_checked: int
    broken_links: list[dict]


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    analyzer_version: str
    rules_version: str
    registry_version: str
    lookup_backend: str
    audit_entries: int
