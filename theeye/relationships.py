"""
Relationship Mapper

Proximity inference between people and organizations: if the first
mention of a person and the first mention of an organization sit
within 200 characters of each other, emit an "employment" edge.

This is deliberately crude. It measures character distance, not
syntax, and its false positives are part of the signal downstream
scoring was tuned against. Keep it this simple.
"""

from __future__ import annotations

from theeye.entities import extract_context
from theeye.models import EntitySet, Relationship

LINK_DISTANCE = 200
HIGH_CONFIDENCE_DISTANCE = 50


def map_relationships(entities: EntitySet, text: str) -> list[Relationship]:
    relationships: list[Relationship] = []

    for person in entities.people:
        person_at = text.find(person.full_name)
        if person_at == -1:
            continue
        for org in entities.organizations:
            org_at = text.find(org.name)
            if org_at == -1:
                continue

            distance = abs(person_at - org_at)
            if distance >= LINK_DISTANCE:
                continue

            relationships.append(Relationship(
                type="employment",
                source=person.full_name,
                target=org.name,
                confidence="high" if distance < HIGH_CONFIDENCE_DISTANCE else "medium",
                distance=distance,
                evidence=extract_context(text, person_at),
            ))

    return relationships
