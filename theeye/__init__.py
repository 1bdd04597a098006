"""
The Eye — Evidence-First Document Analyzer

Turns unstructured documents into structured, sourced findings:
entities, allegations, corroboration, a risk score and follow-up
actions. A companion classifier flags rights-impact concerns in short
dataset, bill and policy descriptions.

Public API:
  - analyze_document:    Full pipeline over one document (async)
  - classify_item:       Rights-impact classification of a title/description
  - build_rights_report: Aggregate classification over many items
  - apply_safety_checks: Privacy/legal/explainability pass over a report
  - SourceLookup:        Abstract corroboration backend for swapping
  - AuditChain:          SHA-256 hash-chained tamper-evident logging

Usage:
    from theeye import analyze_document, classify_item
    from theeye import SourceLookup, get_lookup
"""

__version__ = "1.0.0"

from theeye.models import Document, DocumentContractError
from theeye.processor import analyze_document
from theeye.violations import classify_item, classification_to_dict, build_rights_report
from theeye.safety import apply_safety_checks
from theeye.sources import SOURCE_REGISTRY, REGISTRY_VERSION, AuthoritativeSource
from theeye.lookup import SourceLookup, NullLookup
from theeye.lookup.factory import get_lookup
from theeye.audit import AuditChain, audit_chain

__all__ = [
    "Document",
    "DocumentContractError",
    "analyze_document",
    "classify_item",
    "classification_to_dict",
    "build_rights_report",
    "apply_safety_checks",
    "SOURCE_REGISTRY",
    "REGISTRY_VERSION",
    "AuthoritativeSource",
    "SourceLookup",
    "NullLookup",
    "get_lookup",
    "AuditChain",
    "audit_chain",
]
