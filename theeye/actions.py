"""
Action Generator

Turns claims, corroboration and the risk assessment into concrete
next steps a human operator can act on without further lookup.

Escalation actions (FOI request, oversight referral, media alert) are
emitted only when the document is CRITICAL or HIGH priority. An
evidence checklist is always emitted. Weakly corroborated claims are
additionally listed for further investigation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from theeye.models import Action, Claim, CorroborationResult, RiskAssessment, UNKNOWN
from theeye.rules import YEAR_PATTERN
from theeye.scorer import has_currency

ESCALATION_PRIORITIES = ("CRITICAL", "HIGH")
FOI_EXCERPT_CLAIMS = 3
FOI_EXCERPT_LENGTH = 100
PUBLIC_STATEMENT_MAX = 280
DEFAULT_TIME_RANGE = "Past 5 years"

RECOMMENDED_OUTLETS = ("CBC Marketplace", "CTV W5", "Globe & Mail")


@dataclass(frozen=True)
class FOIOffice:
    marker: str
    office: str


# First marker found in the most frequent actor wins; otherwise the fallback.
FOI_OFFICES: tuple[FOIOffice, ...] = (
    FOIOffice("WSIB", "WSIB Freedom of Information Office"),
    FOIOffice("Ministry", "Ontario Ministry FOI Office"),
)
FALLBACK_FOI_OFFICE = "Federal ATIP Office"


@dataclass(frozen=True)
class OversightBody:
    name: str
    url: str
    complaint_type: str


OMBUDSMAN = OversightBody(
    name="Ontario Ombudsman",
    url="https://www.ombudsman.on.ca/",
    complaint_type="Systemic investigation request",
)
INTEGRITY_COMMISSIONER = OversightBody(
    name="Public Sector Integrity Commissioner",
    url="https://psic-ispc.gc.ca/",
    complaint_type="Whistleblower disclosure",
)
AUDITOR_GENERAL = OversightBody(
    name="Provincial Auditor General",
    url="https://www.auditor.on.ca/",
    complaint_type="Request for value-for-money audit",
)


def generate_actions(
    claims: list[Claim],
    corroboration: list[CorroborationResult],
    risk: RiskAssessment,
) -> list[Action]:
    actions: list[Action] = []

    if risk.priority in ESCALATION_PRIORITIES and claims:
        actions.append(Action(
            action_type="file_foi_request",
            description="File Freedom of Information request for complete documentation",
            priority="immediate",
            payload={
                "template": build_foi_template(claims),
                "target": identify_foi_target(claims),
            },
        ))
        actions.append(Action(
            action_type="notify_oversight_body",
            description="Submit to Ombudsman/Auditor General/PSIC",
            priority="immediate",
            payload={
                "parties_to_notify": [
                    {"name": b.name, "url": b.url, "complaint_type": b.complaint_type}
                    for b in identify_oversight_bodies(claims)
                ],
            },
        ))
        actions.append(Action(
            action_type="prepare_media_alert",
            description="Prepare media package for investigative journalists",
            priority="high",
            payload={
                "recommended_outlets": list(RECOMMENDED_OUTLETS),
                "public_release_language": build_public_statement(claims),
            },
        ))

    actions.append(Action(
        action_type="build_evidence_checklist",
        description="Gather additional supporting documentation",
        priority="standard",
        payload={"checklist": build_evidence_checklist(claims, corroboration)},
    ))

    weak = [r for r in corroboration if r.corroboration_level == "weak"]
    if weak:
        actions.append(Action(
            action_type="flag_for_further_investigation",
            description="Claims requiring additional verification",
            priority="standard",
            payload={"targets": [r.claim for r in weak]},
        ))

    return actions


# ============================================================
# FOI REQUEST
# ============================================================

def build_foi_template(claims: list[Claim]) -> dict:
    actor = first_actor(claims)
    excerpts = "; ".join(
        c.claim_text[:FOI_EXCERPT_LENGTH] for c in claims[:FOI_EXCERPT_CLAIMS]
    )
    time_range = extract_time_range(claims)
    body = (
        "I am requesting the following records under [Access to Information Act / FOIA]:\n\n"
        f"1. All documents, emails, and communications related to: {excerpts}\n\n"
        f"2. Time period: {time_range}\n\n"
        "3. Format: Searchable PDF or CSV where applicable\n\n"
        "4. Fee waiver requested on grounds of public interest.\n\n"
        "Requester: [Your name and contact]"
    )
    return {
        "subject": f"Freedom of Information Request - {actor}",
        "request_body": body,
        "time_period": time_range,
        "estimated_cost": "$0-$25",
        "response_deadline": "30 days from submission",
    }


def first_actor(claims: list[Claim]) -> str:
    for claim in claims:
        if claim.alleged_actor != UNKNOWN:
            return claim.alleged_actor
    return UNKNOWN


def identify_foi_target(claims: list[Claim]) -> str:
    """Route by the most frequent named actor (ties go to the first seen)."""
    counts = Counter(c.alleged_actor for c in claims if c.alleged_actor != UNKNOWN)
    if not counts:
        return FALLBACK_FOI_OFFICE
    actor = counts.most_common(1)[0][0]
    for row in FOI_OFFICES:
        if row.marker in actor:
            return row.office
    return FALLBACK_FOI_OFFICE


def extract_time_range(claims: list[Claim]) -> str:
    years = []
    for claim in claims:
        if not claim.date_of_event:
            continue
        match = YEAR_PATTERN.search(claim.date_of_event)
        if match:
            years.append(int(match.group(0)))
    if not years:
        return DEFAULT_TIME_RANGE
    return f"{min(years)} to {max(years)}"


# ============================================================
# OVERSIGHT & MEDIA
# ============================================================

def identify_oversight_bodies(claims: list[Claim]) -> list[OversightBody]:
    bodies = [OMBUDSMAN]
    if any(c.claim_type == "fraud" for c in claims):
        bodies.append(INTEGRITY_COMMISSIONER)
    bodies.append(AUDITOR_GENERAL)
    return bodies


def build_public_statement(claims: list[Claim], max_length: int = PUBLIC_STATEMENT_MAX) -> str:
    first = claims[0]
    statement = (
        f"BREAKING: Investigation reveals {first.claim_type} allegations against "
        f"{first.alleged_actor}. {len(claims)} documented incidents. "
        "Full evidence available."
    )
    return statement[:max_length]


# ============================================================
# EVIDENCE CHECKLIST
# ============================================================

def build_evidence_checklist(
    claims: list[Claim],
    corroboration: list[CorroborationResult],
) -> list[dict]:
    checklist = []

    weak = [r for r in corroboration if r.corroboration_level == "weak"]
    if weak:
        checklist.append({
            "item": "Obtain primary source documents for weak claims",
            "count": len(weak),
            "priority": "high",
        })

    if any(has_currency(c) for c in claims):
        checklist.append({
            "item": "Obtain financial records, invoices, contracts",
            "priority": "high",
        })

    checklist.append({
        "item": "Collect witness testimonials with consent forms",
        "priority": "medium",
    })

    if any(c.claim_type in ("violation", "fraud") for c in claims):
        checklist.append({
            "item": "Seek legal review for potential litigation",
            "priority": "high",
        })

    return checklist
