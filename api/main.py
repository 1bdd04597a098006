"""
The Eye API — Main Application

POST /analyze          — Run the analysis pipeline over one document
POST /analyze/batch    — Analyze several documents concurrently
POST /classify         — Rights-impact classification of one item
POST /classify/report  — Aggregate rights-impact report over many items
GET  /sources          — Corroboration source registry
GET  /rules            — Rule tables behind every decision
GET  /audit            — Recent audit chain entries
GET  /audit/verify     — Verify chain integrity
GET  /health           — Health check
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from theeye.audit import audit_chain
from theeye.config import ANALYZER_VERSION, settings
from theeye.logging import setup_logging, get_logger
from theeye.lookup import SourceLookup
from theeye.models import DocumentContractError, UNKNOWN
from theeye.processor import analyze_document, default_lookup
from theeye.provenance import ingestion_entry
from theeye.rules import RULES_VERSION, describe_rules
from theeye.sources import REGISTRY_VERSION, describe_registry
from theeye.violations import build_rights_report, classification_to_dict, classify_item
from theeye.schemas.analysis import (
    AnalyzeRequest,
    AnalyzeBatchRequest,
    AnalysisReport,
    AnalyzeBatchResponse,
    ClassifyRequest,
    ClassificationResponse,
    RightsReportRequest,
    RightsReportResponse,
    SourcesResponse,
    AuditResponse,
    ChainVerification,
    HealthResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire up dependencies on startup."""
    setup_logging()
    lookup = _get_lookup()
    logger.info("The Eye API starting",
                extra={"source": lookup.name})
    yield
    logger.info("The Eye API shutting down")


app = FastAPI(
    title="The Eye API",
    description="Evidence-first document analysis: entities, claims, corroboration, risk",
    version=ANALYZER_VERSION,
    lifespan=lifespan,
)

# CORS: set THEEYE_CORS_ORIGINS in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(DocumentContractError)
async def contract_error_handler(request: Request, exc: DocumentContractError):
    """Caller broke the input contract; nothing was analyzed."""
    logger.info(
        "Rejected document input",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error. The document could not be analyzed.",
        },
    )


# Lazy lookup backend
_lookup: Optional[SourceLookup] = None


def _get_lookup() -> SourceLookup:
    global _lookup
    if _lookup is None:
        _lookup = default_lookup()
    return _lookup


def _failed_report(item: AnalyzeRequest, exc: BaseException) -> dict:
    """Placeholder for a batch item that could not be analyzed.

    Keeps the report shape, including the document as provenance entry zero.
    """
    source_id = item.source_url_or_id or UNKNOWN
    jurisdiction = {"location": UNKNOWN, "level": UNKNOWN}
    return {
        "id": "error",
        "title": "Unknown Document",
        "date": item.fetch_date,
        "jurisdiction": jurisdiction,
        "source_url": source_id,
        "source_type": item.source_type or UNKNOWN,
        "fetch_date": item.fetch_date,
        "metadata": {
            "title": "Unknown Document",
            "date": item.fetch_date,
            "publication_date": UNKNOWN,
            "source_url": source_id,
            "author": UNKNOWN,
            "source_type": item.source_type or UNKNOWN,
            "jurisdiction": jurisdiction,
        },
        "entities": {"people": [], "organizations": [], "money": [], "dates": []},
        "relationships": [],
        "claims": [],
        "corroboration": [],
        "risk_score": 0,
        "risk_explanation": "",
        "risk_breakdown": {},
        "priority": "LOW",
        "suggested_actions": [],
        "provenance": [asdict(ingestion_entry(source_id, item.text, item.fetch_date))],
        "processing_time_ms": 0,
        "processed_at": datetime.now(timezone.utc).isoformat(),
        "version": ANALYZER_VERSION,
        "error": f"Analysis failed for this item: {type(exc).__name__}",
    }


# ============================================================
# ANALYZE
# ============================================================

@app.post("/analyze", response_model=AnalysisReport)
async def analyze(request: AnalyzeRequest):
    """Analyze one document."""
    start = time.time()

    report = await analyze_document(
        request.to_payload(),
        lookup=_get_lookup(),
        safety_checks=request.safety_checks,
    )

    report["audit_hash"] = audit_chain.log(
        event_type="analyze",
        data={
            "report_id": report["id"],
            "risk_score": report["risk_score"],
            "priority": report["priority"],
            "claims_count": len(report["claims"]),
            "source_type": report["source_type"],
        },
    )

    duration = int((time.time() - start) * 1000)
    logger.info(
        f"Analysis complete: score={report['risk_score']} priority={report['priority']}",
        extra={
            "report_id": report["id"],
            "risk_score": report["risk_score"],
            "priority": report["priority"],
            "claims_count": len(report["claims"]),
            "audit_hash": report["audit_hash"],
            "duration_ms": duration,
        },
    )
    return report


@app.post("/analyze/batch", response_model=AnalyzeBatchResponse)
async def analyze_batch(request: AnalyzeBatchRequest):
    """Analyze multiple documents concurrently."""
    lookup = _get_lookup()

    results = await asyncio.gather(
        *[
            analyze_document(item.to_payload(), lookup=lookup,
                             safety_checks=item.safety_checks)
            for item in request.items
        ],
        return_exceptions=True,
    )

    successful = [r for r in results if isinstance(r, dict)]
    batch_hash = audit_chain.log(
        event_type="analyze_batch",
        data={
            "total": len(request.items),
            "analyzed": len(successful),
            "errors": len(results) - len(successful),
            "report_ids": [r["id"] for r in successful],
            "priorities": [r["priority"] for r in successful],
        },
    )

    clean_results = []
    for item, r in zip(request.items, results):
        if isinstance(r, dict):
            r["audit_hash"] = batch_hash
            clean_results.append(r)
        else:
            logger.warning(
                "Batch analysis item failed",
                extra={"error": str(r), "error_type": type(r).__name__},
            )
            clean_results.append(_failed_report(item, r))

    logger.info(
        f"Batch complete: {len(successful)}/{len(request.items)} analyzed",
        extra={"items_count": len(request.items), "audit_hash": batch_hash},
    )

    return {
        "results": clean_results,
        "total": len(request.items),
        "analyzed": len(successful),
    }


# ============================================================
# CLASSIFY
# ============================================================

@app.post("/classify", response_model=ClassificationResponse)
async def classify(request: ClassifyRequest):
    """Rights-impact classification of one dataset, bill or policy item."""
    result = classification_to_dict(classify_item(request.title, request.description))

    result["audit_hash"] = audit_chain.log(
        event_type="classify",
        data={
            "title": request.title[:200],
            "violations": [v["type"] for v in result["violations"]],
            "charter_status": result["charter_status"],
            "human_rights_status": result["human_rights_status"],
            "treaty_status": result["treaty_status"],
        },
    )
    return result


@app.post("/classify/report", response_model=RightsReportResponse)
async def classify_report(request: RightsReportRequest):
    """Classify every item and aggregate for periodic reporting."""
    report = build_rights_report([item.model_dump() for item in request.items])

    report["audit_hash"] = audit_chain.log(
        event_type="classify_report",
        data=report["summary"],
    )
    logger.info(
        f"Rights report built: {report['summary']['violations_detected']} violations",
        extra={"items_count": len(request.items), "audit_hash": report["audit_hash"]},
    )
    return report


# ============================================================
# REFERENCE DATA
# ============================================================

@app.get("/sources", response_model=SourcesResponse)
async def get_sources():
    """Return the corroboration source registry."""
    return describe_registry()


@app.get("/rules")
async def get_rules():
    """Return every rule table the analyzer decides with."""
    return describe_rules()


# ============================================================
# AUDIT & HEALTH
# ============================================================

@app.get("/audit", response_model=AuditResponse)
async def get_audit(
    limit: int = Query(20, ge=1, le=100),
    event_type: Optional[str] = None,
):
    """Get recent audit chain entries."""
    entries = audit_chain.get_recent(limit=limit, event_type=event_type)
    return {
        "entries": entries,
        "total_count": audit_chain.get_count(),
    }


@app.get("/audit/verify", response_model=ChainVerification)
async def verify_audit(limit: int = Query(100, ge=1, le=1000)):
    """Verify integrity of the audit chain."""
    return audit_chain.verify_chain(limit=limit)


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": app.version,
        "analyzer_version": ANALYZER_VERSION,
        "rules_version": RULES_VERSION,
        "registry_version": REGISTRY_VERSION,
        "lookup_backend": _get_lookup().name,
        "audit_entries": audit_chain.get_count(),
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security and version headers to all responses."""
    response = await call_next(request)
    response.headers["X-TheEye-Version"] = ANALYZER_VERSION
    response.headers["X-Rules-Version"] = RULES_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 2_097_152  # 2 MB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject requests exceeding 2MB, by Content-Length or by actual body."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > _MAX_BODY_BYTES:
        return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} -> {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
