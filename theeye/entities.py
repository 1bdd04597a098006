"""
Entity Extractor

Independent pattern scans over the full text for people,
organizations, monetary amounts and dates. Each match keeps a
±100-character context window for later relationship and claim
grounding.

Deduplication is by exact canonical text within one document.
No fuzzy matching and no cross-document identity.
"""

from __future__ import annotations

from theeye.models import (
    DateMention,
    EntitySet,
    MonetaryAmount,
    Organization,
    Person,
    UNKNOWN,
)
from theeye.rules import (
    ENTITY_CONTEXT_RADIUS,
    ENTITY_DATE_PATTERN,
    MONEY_PATTERN,
    ORGANIZATION_CATEGORIES,
    ORGANIZATION_PATTERN,
    PERSON_PATTERN,
)


def extract_entities(text: str) -> EntitySet:
    """Run every entity scan and return the deduplicated lists."""
    if not text:
        return EntitySet()

    people = [
        Person(
            full_name=m.group(1),
            role=m.group(2) or UNKNOWN,
            context=extract_context(text, m.start()),
            offset=m.start(),
        )
        for m in PERSON_PATTERN.finditer(text)
    ]

    organizations = [
        Organization(
            name=m.group(0),
            category=classify_organization(m.group(0)),
            context=extract_context(text, m.start()),
            offset=m.start(),
        )
        for m in ORGANIZATION_PATTERN.finditer(text)
    ]

    money = [
        MonetaryAmount(
            amount=m.group(1),
            scale=(m.group(2) or "dollars").lower(),
            context=extract_context(text, m.start()),
            offset=m.start(),
        )
        for m in MONEY_PATTERN.finditer(text)
    ]

    dates = [
        DateMention(
            date=m.group(0),
            context=extract_context(text, m.start()),
            offset=m.start(),
        )
        for m in ENTITY_DATE_PATTERN.finditer(text)
    ]

    return EntitySet(
        people=deduplicate(people, "full_name"),
        organizations=deduplicate(organizations, "name"),
        money=deduplicate(money, "amount"),
        dates=deduplicate(dates, "date"),
    )


def classify_organization(name: str) -> str:
    for row in ORGANIZATION_CATEGORIES:
        if any(marker in name for marker in row.markers):
            return row.category
    return "other"


def extract_context(text: str, index: int, radius: int = ENTITY_CONTEXT_RADIUS) -> str:
    """Window of `radius` characters either side of `index`, stripped."""
    start = max(0, index - radius)
    end = min(len(text), index + radius)
    return text[start:end].strip()


def deduplicate(items: list, key: str) -> list:
    """Keep the first occurrence of each canonical value."""
    seen: set[str] = set()
    unique = []
    for item in items:
        value = getattr(item, key)
        if value in seen:
            continue
        seen.add(value)
        unique.append(item)
    return unique
