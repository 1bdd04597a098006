"""
Metadata Extractor

Derives title, date, author, source type and jurisdiction for a
Document. Caller-supplied overrides win field by field; everything
else is best-effort and falls back to explicit "unknown" placeholders.
There are no error conditions here.
"""

from __future__ import annotations

from typing import Optional

from theeye.models import Document, Jurisdiction, Metadata, UNKNOWN
from theeye.rules import (
    AUTHOR_PATTERNS,
    JURISDICTION_RULES,
    METADATA_DATE_PATTERNS,
    SOURCE_TYPE_RULES,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)

UNKNOWN_TITLE = "Unknown Document"


def extract_metadata(document: Document) -> Metadata:
    """Build the Metadata record for a document."""
    text = document.text
    overrides = document.metadata_overrides
    extracted_date = extract_date(text)

    return Metadata(
        title=overrides.get("title") or extract_title(text) or UNKNOWN_TITLE,
        date=overrides.get("date") or extracted_date or document.fetch_date,
        publication_date=(
            overrides.get("publication_date") or extracted_date or UNKNOWN
        ),
        source_url=document.source_id,
        author=overrides.get("author") or extract_author(text) or UNKNOWN,
        source_type=(
            document.source_type
            or detect_source_type(text, document.source_id)
        ),
        jurisdiction=_jurisdiction_override(overrides.get("jurisdiction"))
        or detect_jurisdiction(text),
        language=overrides.get("language") or "en",
        word_count=len(text.split()),
        raw_metadata=dict(overrides),
    )


def extract_title(text: str) -> Optional[str]:
    """First line longer than the minimum, truncated."""
    for line in text.split("\n"):
        stripped = line.strip()
        if len(stripped) > TITLE_MIN_LENGTH:
            return stripped[:TITLE_MAX_LENGTH]
    return None


def extract_date(text: str) -> Optional[str]:
    for pattern in METADATA_DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def extract_author(text: str) -> Optional[str]:
    for pattern in AUTHOR_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def detect_source_type(text: str, url: str) -> str:
    """
    Classify the source from its URL, then from its content.

    URL rules are tried first (in table order) so a government domain
    is "official" even when the page talks about annual reports.
    """
    url_lower = (url or "").lower()
    for rule in SOURCE_TYPE_RULES:
        if rule.url_markers and any(m in url_lower for m in rule.url_markers):
            return rule.source_type

    text_lower = text.lower()
    for rule in SOURCE_TYPE_RULES:
        if rule.content_markers and any(m in text_lower for m in rule.content_markers):
            return rule.source_type

    return UNKNOWN


def detect_jurisdiction(text: str) -> Jurisdiction:
    for rule in JURISDICTION_RULES:
        if rule.keyword in text:
            return Jurisdiction(location=rule.keyword, level=rule.level)
    return Jurisdiction()


def _jurisdiction_override(value) -> Optional[Jurisdiction]:
    """Accept either a place name or a {location, level} mapping."""
    if not value:
        return None
    if isinstance(value, dict):
        return Jurisdiction(
            location=value.get("location") or UNKNOWN,
            level=value.get("level") or UNKNOWN,
        )
    location = str(value)
    for rule in JURISDICTION_RULES:
        if rule.keyword.lower() == location.lower():
            return Jurisdiction(location=location, level=rule.level)
    return Jurisdiction(location=location, level=UNKNOWN)
