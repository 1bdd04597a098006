"""
Safety & Forensics

Post-processing pass over a finished report: flags personal data,
possible legal privilege, and surfaces the strongest evidence for a
reviewer. Adds keys; never modifies existing ones.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone

LAWYER_REVIEW_THRESHOLD = 70
STRONGEST_EVIDENCE_COUNT = 3
EXCERPT_LENGTH = 150

PERSONAL_DATA_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("social_insurance_number", re.compile(r"\b\d{3}-\d{3}-\d{3}\b")),
    ("street_address", re.compile(r"\b\d{1,5}\s+[A-Z][a-z]+\s+(?:Street|Ave|Road)\b", re.IGNORECASE)),
    ("health_information", re.compile(r"medical records|health information", re.IGNORECASE)),
)

PRIVILEGE_KEYWORDS = (
    "solicitor-client",
    "attorney-client",
    "legal advice",
    "privileged communication",
)

METHODOLOGY = "Evidence-first investigative analysis with multi-source corroboration"


def apply_safety_checks(report: dict) -> dict:
    """Attach privacy_check, legal_check and explainability to `report` and return it."""
    serialized = json.dumps(report, default=str)

    personal = find_personal_data(serialized)
    report["privacy_check"] = {
        "contains_personal_data": bool(personal),
        "requires_redaction": False,
        "redaction_notes": personal,
    }

    needs_lawyer = report.get("risk_score", 0) >= LAWYER_REVIEW_THRESHOLD
    report["legal_check"] = {
        "potentially_privileged": is_potentially_privileged(serialized),
        "requires_lawyer_review": needs_lawyer,
        "lawyer_review_reason": (
            "High-risk allegations require legal review before publication"
            if needs_lawyer else None
        ),
    }

    report["explainability"] = {
        "strongest_evidence": strongest_evidence(report.get("corroboration", [])),
        "last_checked": datetime.now(timezone.utc).isoformat(),
        "methodology": METHODOLOGY,
    }
    return report


def find_personal_data(text: str) -> list[str]:
    """Names of the personal-data pattern classes present in `text`."""
    return [name for name, pattern in PERSONAL_DATA_PATTERNS if pattern.search(text)]


def is_potentially_privileged(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in PRIVILEGE_KEYWORDS)


def strongest_evidence(corroboration: list[dict], count: int = STRONGEST_EVIDENCE_COUNT) -> list[dict]:
    strong = [c for c in corroboration if c.get("corroboration_level") == "strong"]
    return [
        {
            "claim": c["claim"][:EXCERPT_LENGTH],
            "sources": [
                {
                    "name": s["source"],
                    "url": s["url"],
                    "quote": s["snippet"][:EXCERPT_LENGTH],
                }
                for s in c.get("corroborating_sources", [])
            ],
        }
        for c in strong[:count]
    ]
