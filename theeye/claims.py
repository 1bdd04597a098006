"""
Claim Extractor

Scans text against CLAIM_RULES. Every match of every indicator phrase
becomes its own claim: claims are evidence sightings, not unique
facts, so repeated phrases at different offsets are never merged.

For each match:
  - a ±200 char window is the claim text
  - the alleged actor is the first organization (then person) found
    in the window, in entity scan order
  - the alleged victim is the first victim-role keyword in the window
  - the event date is the first year or slash date in the window
  - evidence strength comes from the points rubric
"""

from __future__ import annotations

from typing import Optional

from theeye.entities import extract_context
from theeye.models import Claim, EntitySet, UNKNOWN
from theeye.rules import (
    CLAIM_CONTEXT_RADIUS,
    CLAIM_RULES,
    CLAIM_SNIPPET_RADIUS,
    DEFINITIVE_LANGUAGE,
    EVENT_DATE_PATTERN,
    EVIDENCE_RUBRIC,
    VICTIM_KEYWORDS,
    ClaimRule,
)


def extract_claims(
    text: str,
    entities: EntitySet,
    rules: tuple[ClaimRule, ...] = CLAIM_RULES,
) -> list[Claim]:
    """Return one claim per indicator match, in rule order then offset order."""
    claims: list[Claim] = []
    if not text:
        return claims

    for rule in rules:
        for match in rule.pattern.finditer(text):
            context = extract_context(text, match.start(), CLAIM_CONTEXT_RADIUS)
            points = evidence_points(context, entities)
            claims.append(Claim(
                claim_type=rule.claim_type,
                matched_text=match.group(0),
                claim_text=context,
                offset=match.start(),
                alleged_actor=find_actor(context, entities),
                alleged_victim=find_victim(context),
                date_of_event=find_event_date(context),
                quote=context,
                source_snippet=extract_context(text, match.start(), CLAIM_SNIPPET_RADIUS),
                evidence_points=points,
                evidence_strength=strength_bucket(points),
            ))

    return claims


def find_actor(context: str, entities: EntitySet) -> str:
    """Organizations take precedence over people; first match in scan order wins."""
    for org in entities.organizations:
        if org.name in context:
            return org.name
    for person in entities.people:
        if person.full_name in context:
            return person.full_name
    return UNKNOWN


def find_victim(context: str) -> str:
    lowered = context.lower()
    for keyword in VICTIM_KEYWORDS:
        if keyword in lowered:
            return keyword
    return UNKNOWN


def find_event_date(context: str) -> Optional[str]:
    match = EVENT_DATE_PATTERN.search(context)
    return match.group(0) if match else None


def evidence_points(context: str, entities: EntitySet) -> int:
    """
    Additive rubric. Each signal can only add points, so adding a
    named entity, amount, date or definitive phrase to a context never
    lowers its score.
    """
    points = 0
    if any(p.full_name in context for p in entities.people):
        points += EVIDENCE_RUBRIC.person
    if any(o.name in context for o in entities.organizations):
        points += EVIDENCE_RUBRIC.organization
    if any(m.amount in context for m in entities.money):
        points += EVIDENCE_RUBRIC.amount
    if any(d.date in context for d in entities.dates):
        points += EVIDENCE_RUBRIC.date
    if DEFINITIVE_LANGUAGE.search(context):
        points += EVIDENCE_RUBRIC.definitive_language
    return points


def strength_bucket(points: int) -> str:
    if points >= EVIDENCE_RUBRIC.high_threshold:
        return "High"
    if points >= EVIDENCE_RUBRIC.medium_threshold:
        return "Medium"
    return "Low"
