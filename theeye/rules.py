"""
Rule Tables — the analyzer's entire decision surface.

Every classification the pipeline makes is driven from a table in
this module:
  1. Extraction patterns (people, organizations, money, dates)
  2. Claim indicators and the evidence-strength rubric
  3. Metadata heuristics (source type, jurisdiction)
  4. Risk-scoring vocabulary
  5. Rights-impact tables (violation flags, compliance rules, populations)

Tables are ordered tuples of frozen rows. Order is meaningful: when two
rows could match, the first one in the table wins. Adding a category
means adding a row here, not touching the extraction code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

RULES_VERSION = "1.0.0"


# ============================================================
# ENTITY PATTERNS
# ============================================================

ROLE_TITLES = (
    "CEO", "President", "Minister", "Director", "VP", "Commissioner",
)

PERSON_PATTERN = re.compile(
    r"\b([A-Z][a-z]+\s+[A-Z][a-z]+)"
    r"(?:,?\s+(" + "|".join(ROLE_TITLES) + r")\b)?"
)

ORGANIZATION_PATTERN = re.compile(
    r"\b(?:WSIB|WSIAT|WCB|"
    r"Ministry\s+of\s+[A-Z][a-z]+|"
    r"Department\s+of\s+[A-Z][a-z]+|"
    r"[A-Z][a-z]+\s+Insurance)\b"
)


@dataclass(frozen=True)
class OrganizationCategory:
    category: str
    markers: tuple[str, ...]


ORGANIZATION_CATEGORIES: tuple[OrganizationCategory, ...] = (
    OrganizationCategory("workers_comp", ("WSIB", "WSIAT", "WCB")),
    OrganizationCategory("government", ("Ministry", "Department")),
    OrganizationCategory("insurance", ("Insurance",)),
)

MONEY_PATTERN = re.compile(
    r"\$\s*(\d[\d,]*(?:\.\d{2})?)\s*(thousand|million|billion)?",
    re.IGNORECASE,
)

_MONTHS = (
    "January|February|March|April|May|June|July|August|"
    "September|October|November|December"
)

# Metadata date detection: first ISO, then slash, then long-form
METADATA_DATE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(rf"(?:{_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}", re.IGNORECASE),
)

# Entity date scan: the three full forms, then a bare year
ENTITY_DATE_PATTERN = re.compile(
    r"\b\d{4}-\d{2}-\d{2}\b|"
    r"\b\d{1,2}/\d{1,2}/\d{4}\b|"
    rf"\b(?:{_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}\b|"
    r"\b(?:19|20)\d{2}\b",
    re.IGNORECASE,
)

# Date-of-event inside a claim window
EVENT_DATE_PATTERN = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b|\b(?:19|20)\d{2}\b")

YEAR_PATTERN = re.compile(r"(?:19|20)\d{2}")

ENTITY_CONTEXT_RADIUS = 100


# ============================================================
# CLAIM INDICATORS
# ============================================================

@dataclass(frozen=True)
class ClaimRule:
    """One allegation category and the phrases that signal it."""
    claim_type: str
    pattern: re.Pattern
    description: str


CLAIM_RULES: tuple[ClaimRule, ...] = (
    ClaimRule(
        claim_type="denial",
        pattern=re.compile(r"\b(?:denied|rejected|refused)", re.IGNORECASE),
        description="Benefit, claim or service was denied",
    ),
    ClaimRule(
        claim_type="fraud",
        pattern=re.compile(r"\b(?:fraud|corruption|bribe)", re.IGNORECASE),
        description="Fraud, corruption or bribery alleged",
    ),
    ClaimRule(
        claim_type="abuse",
        pattern=re.compile(r"\b(?:abuse|harassment|discrimination)", re.IGNORECASE),
        description="Abuse, harassment or discrimination alleged",
    ),
    ClaimRule(
        claim_type="negligence",
        pattern=re.compile(r"\b(?:negligence|failure to|failed to)", re.IGNORECASE),
        description="Negligence or failure of duty alleged",
    ),
    ClaimRule(
        claim_type="pattern",
        pattern=re.compile(r"\b(?:systemic|pattern of|repeatedly)", re.IGNORECASE),
        description="Systemic or repeated conduct alleged",
    ),
    ClaimRule(
        claim_type="violation",
        pattern=re.compile(r"\b(?:violation|breach|illegal)", re.IGNORECASE),
        description="Legal or policy violation alleged",
    ),
)

CLAIM_CONTEXT_RADIUS = 200
CLAIM_SNIPPET_RADIUS = 300

VICTIM_KEYWORDS = ("worker", "claimant", "recipient", "patient", "employee")

DEFINITIVE_LANGUAGE = re.compile(
    r"\b(?:proved|confirmed|documented|evidence shows)\b", re.IGNORECASE,
)


@dataclass(frozen=True)
class EvidenceRubric:
    person: int = 30
    organization: int = 20
    amount: int = 20
    date: int = 15
    definitive_language: int = 15
    high_threshold: int = 70
    medium_threshold: int = 40


EVIDENCE_RUBRIC = EvidenceRubric()


# ============================================================
# METADATA HEURISTICS
# ============================================================

@dataclass(frozen=True)
class SourceTypeRule:
    source_type: str
    url_markers: tuple[str, ...] = ()
    content_markers: tuple[str, ...] = ()


# URL rules are checked first in order; content rules only when no URL rule fires.
SOURCE_TYPE_RULES: tuple[SourceTypeRule, ...] = (
    SourceTypeRule("official", url_markers=("gov", "ontario.ca")),
    SourceTypeRule("FOI", url_markers=("foi", "freedom")),
    SourceTypeRule("news", url_markers=(
        "news", "cbc.ca", "ctvnews", "globalnews", "thestar", "theglobeandmail",
    )),
    SourceTypeRule("social", url_markers=("twitter", "facebook", "x.com", "reddit")),
    SourceTypeRule("FOI", content_markers=(
        "freedom of information", "access to information",
    )),
    SourceTypeRule("report", content_markers=("report", "annual")),
)


@dataclass(frozen=True)
class JurisdictionRule:
    keyword: str
    level: str


JURISDICTION_RULES: tuple[JurisdictionRule, ...] = (
    JurisdictionRule("Toronto", "city"),
    JurisdictionRule("Ontario", "province"),
    JurisdictionRule("Canada", "federal"),
    JurisdictionRule("WSIB", "province"),
    JurisdictionRule("Parliament", "federal"),
)

AUTHOR_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\bby\s+([A-Z][a-z]+\s+[A-Z][a-z]+)"),
    re.compile(r"\bauthor:\s*([A-Z][a-z]+\s+[A-Z][a-z]+)", re.IGNORECASE),
)

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200


# ============================================================
# RISK SCORING
# ============================================================

CRITICAL_CLAIM_TYPES = ("fraud", "abuse")
CURRENCY_SYMBOLS = ("$", "€", "£")
SAFETY_TERMS = ("safety", "harm")


@dataclass(frozen=True)
class RiskWeights:
    critical_claims: int = 30
    monetary: int = 20
    strong_corroboration: int = 25
    pattern: int = 15
    public_safety: int = 10


RISK_WEIGHTS = RiskWeights()

# (priority, minimum score), highest first
PRIORITY_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("CRITICAL", 70),
    ("HIGH", 50),
    ("MEDIUM", 30),
    ("LOW", 0),
)


# ============================================================
# RIGHTS-IMPACT TABLES
# ============================================================

@dataclass(frozen=True)
class ViolationRule:
    type: str
    name: str
    description: str
    charter_citation: str
    treaty_citation: str
    keywords: tuple[str, ...]


VIOLATION_RULES: tuple[ViolationRule, ...] = (
    ViolationRule(
        type="benefitReductions",
        name="Benefit Reductions",
        description="Any reduction in disability or workers' compensation benefits",
        charter_citation="Section 7 (security of person)",
        treaty_citation="Article 28 (adequate standard of living)",
        keywords=("reduce", "cut", "decrease", "lower", "cap", "freeze", "rollback"),
    ),
    ViolationRule(
        type="deemingPractices",
        name="Deeming Practices",
        description="Workers deemed capable of jobs they cannot perform",
        charter_citation="Section 7 (fundamental justice)",
        treaty_citation="Article 27 (work and employment)",
        keywords=("deem", "deemed", "deeming", "capable", "employable", "theoretical"),
    ),
    ViolationRule(
        type="appealsBarriers",
        name="Barriers to Appeals",
        description="Obstacles preventing workers from challenging decisions",
        charter_citation="Section 7 (access to justice)",
        treaty_citation="Article 13 (access to justice)",
        keywords=("backlog", "delay", "wait", "denied", "barrier", "inaccessible"),
    ),
    ViolationRule(
        type="medicalCareDenial",
        name="Denial of Medical Care",
        description="Refusal to authorize necessary medical treatment",
        charter_citation="Section 7 (security of person - Chaoulli)",
        treaty_citation="Article 25 (health)",
        keywords=("deny", "refuse", "terminate treatment", "cut off", "not approved"),
    ),
    ViolationRule(
        type="incomeInadequacy",
        name="Income Inadequacy",
        description="Benefits below poverty line",
        charter_citation="Section 7 (right to life)",
        treaty_citation="Article 28 (adequate standard of living)",
        keywords=("poverty", "inadequate", "below poverty", "insufficient", "starvation"),
    ),
    ViolationRule(
        type="discriminatoryRules",
        name="Discriminatory Eligibility Rules",
        description="Rules that disproportionately exclude disabled persons",
        charter_citation="Section 15 (equality rights)",
        treaty_citation="Article 5 (equality and non-discrimination)",
        keywords=("eligibility", "exclude", "criteria", "disqualify", "ineligible"),
    ),
)

# (minimum distinct keyword matches, severity), highest first
VIOLATION_SEVERITY_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (3, "critical"),
    (2, "high"),
    (1, "medium"),
)


@dataclass(frozen=True)
class ComplianceRule:
    """
    A keyword-combination rule. Fires when EVERY pattern in `requires`
    matches the text. On firing, the framework's status is raised to
    `status` (never lowered) and the issue is recorded.
    """
    framework: str           # "charter" | "human_rights" | "treaty"
    requires: tuple[re.Pattern, ...]
    status: str
    citation: str
    right: str
    concern: str


_DISABILITY = re.compile(r"disability|disabled|mental health|chronic", re.IGNORECASE)
_ACCESSIBILITY_SUBJECT = re.compile(r"disability|disabled|accessibility", re.IGNORECASE)

COMPLIANCE_RULES: tuple[ComplianceRule, ...] = (
    ComplianceRule(
        framework="charter",
        requires=(
            re.compile(r"deny|refuse|terminate|cut|reduce|inadequate|delay", re.IGNORECASE),
            re.compile(r"benefit|income|support|care|treatment", re.IGNORECASE),
        ),
        status="POTENTIAL_VIOLATION",
        citation="Section 7",
        right="Life, Liberty, Security of Person",
        concern="May deprive individuals of security of person through denial of essential support",
    ),
    ComplianceRule(
        framework="charter",
        requires=(
            _DISABILITY,
            re.compile(r"discriminat|deny|barrier|exclude|adverse", re.IGNORECASE),
        ),
        status="POTENTIAL_VIOLATION",
        citation="Section 15",
        right="Equality Rights",
        concern="May constitute discrimination based on disability",
    ),
    ComplianceRule(
        framework="human_rights",
        requires=(
            _DISABILITY,
            re.compile(
                r"discriminat|harass|refus\w*\s+(?:to\s+)?accommodat|failure to accommodate",
                re.IGNORECASE,
            ),
        ),
        status="POTENTIAL_VIOLATION",
        citation="Human Rights Code, Part I",
        right="Freedom from Discrimination (Disability)",
        concern="May breach the duty to accommodate persons with disabilities",
    ),
    ComplianceRule(
        framework="treaty",
        requires=(
            _ACCESSIBILITY_SUBJECT,
            re.compile(r"inaccessible|barrier|exclude", re.IGNORECASE),
        ),
        status="POTENTIAL_VIOLATION",
        citation="Article 9",
        right="Accessibility",
        concern="May fail accessibility requirements",
    ),
    ComplianceRule(
        framework="treaty",
        requires=(
            _ACCESSIBILITY_SUBJECT,
            re.compile(r"benefit|income|support|poverty", re.IGNORECASE),
        ),
        status="REQUIRES_ASSESSMENT",
        citation="Article 28",
        right="Adequate Standard of Living",
        concern="Must ensure adequate standard of living for persons with disabilities",
    ),
)

# Escalation order for compliance statuses
COMPLIANCE_STATUS_RANK = {
    "REQUIRES_REVIEW": 0,
    "REQUIRES_ASSESSMENT": 1,
    "POTENTIAL_VIOLATION": 2,
}


@dataclass(frozen=True)
class PopulationRule:
    name: str
    keywords: tuple[str, ...]


POPULATION_RULES: tuple[PopulationRule, ...] = (
    PopulationRule("Injured Workers", ("worker", "wsib", "wcb", "workplace", "injury", "claim")),
    PopulationRule("Persons with Disabilities", ("disability", "disabled", "odsp", "aish", "accessibility")),
    PopulationRule("Seniors", ("senior", "elderly", "aged", "pension", "retirement", "ltc")),
    PopulationRule("Indigenous Peoples", ("indigenous", "first nations", "inuit", "métis", "aboriginal", "treaty")),
    PopulationRule("Low-Income Canadians", ("poverty", "low-income", "welfare", "social assistance", "food bank")),
    PopulationRule("Mental Health Community", ("mental health", "psychiatric", "anxiety", "depression", "ptsd")),
    PopulationRule("Women", ("women", "gender", "female", "maternal", "pregnancy")),
    PopulationRule("Children", ("child", "youth", "minor", "school", "pediatric")),
)


def describe_rules() -> dict:
    """
    Return the rule tables in a JSON-friendly shape.

    Used by the GET /rules endpoint to expose the decision surface.
    """
    return {
        "rules_version": RULES_VERSION,
        "claim_types": [
            {"claim_type": r.claim_type, "pattern": r.pattern.pattern, "description": r.description}
            for r in CLAIM_RULES
        ],
        "victim_keywords": list(VICTIM_KEYWORDS),
        "evidence_rubric": {
            "person": EVIDENCE_RUBRIC.person,
            "organization": EVIDENCE_RUBRIC.organization,
            "amount": EVIDENCE_RUBRIC.amount,
            "date": EVIDENCE_RUBRIC.date,
            "definitive_language": EVIDENCE_RUBRIC.definitive_language,
            "high_threshold": EVIDENCE_RUBRIC.high_threshold,
            "medium_threshold": EVIDENCE_RUBRIC.medium_threshold,
        },
        "risk_weights": {
            "critical_claims": RISK_WEIGHTS.critical_claims,
            "monetary": RISK_WEIGHTS.monetary,
            "strong_corroboration": RISK_WEIGHTS.strong_corroboration,
            "pattern": RISK_WEIGHTS.pattern,
            "public_safety": RISK_WEIGHTS.public_safety,
        },
        "priority_thresholds": [
            {"priority": p, "min_score": s} for p, s in PRIORITY_THRESHOLDS
        ],
        "violation_flags": [
            {
                "type": r.type,
                "name": r.name,
                "charter_citation": r.charter_citation,
                "treaty_citation": r.treaty_citation,
                "keywords": list(r.keywords),
            }
            for r in VIOLATION_RULES
        ],
        "populations": [
            {"name": r.name, "keywords": list(r.keywords)} for r in POPULATION_RULES
        ],
    }
