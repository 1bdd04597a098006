"""
End-to-end pipeline tests.

Every run uses a deterministic lookup backend, so two runs over the
same document must agree on everything but id, timing and timestamp.
"""

import asyncio

import pytest
from theeye.lookup import NullLookup
from theeye.lookup.fixture import FixtureLookup, FixtureRecord
from theeye.models import DocumentContractError
from theeye import processor
from theeye.processor import analyze_document, report_id

FETCH = "2025-01-15T10:00:00Z"

SCENARIO = "WSIB denied John Smith's claim for $50,000 in 2023."

CRITICAL_TEXT = (
    "Ministry of Labour officials were accused of fraud and a systemic pattern "
    "of abuse against injured workers, causing serious harm. Records show "
    "$2 million was diverted in 2021."
)

RECORDS = [
    FixtureRecord(
        source="Ontario Auditor General Reports",
        url="https://www.auditor.on.ca/en/2022",
        snippet="Audit identified diverted program funds.",
        keywords=("fraud",),
        retrieved_at="2025-01-03T00:00:00Z",
    ),
    FixtureRecord(
        source="CanLII Legal Decisions",
        url="https://www.canlii.org/en/on/onwsiat/2022",
        snippet="Tribunal decision on misappropriation.",
        keywords=("fraud",),
        retrieved_at="2025-01-04T00:00:00Z",
        confidence="high",
    ),
]

VOLATILE = ("id", "processing_time_ms", "processed_at")


def _payload(text, **kw):
    return {"text": text, "source_url_or_id": "https://example.org/doc", "fetch_date": FETCH, **kw}


class TestReportShape:

    @pytest.mark.asyncio
    async def test_top_level_fields(self):
        report = await analyze_document(_payload(SCENARIO), NullLookup())
        for key in (
            "id", "metadata", "entities", "relationships", "claims", "corroboration",
            "risk_score", "risk_explanation", "priority", "suggested_actions",
            "provenance", "processing_time_ms", "processed_at",
            "title", "date", "jurisdiction", "source_url", "source_type",
            "fetch_date", "version",
        ):
            assert key in report
        assert set(report["entities"]) == {"people", "organizations", "money", "dates"}

    @pytest.mark.asyncio
    async def test_id_format(self):
        report = await analyze_document(_payload(SCENARIO), NullLookup())
        prefix, millis, digest = report["id"].split("_")
        assert prefix == "eye"
        assert millis.isdigit()
        assert len(digest) == 12

    def test_id_depends_on_content(self):
        assert report_id("a").split("_")[2] != report_id("b").split("_")[2]


class TestScenario:

    @pytest.mark.asyncio
    async def test_denial_scenario(self):
        report = await analyze_document(_payload(SCENARIO), NullLookup())
        assert [p["full_name"] for p in report["entities"]["people"]] == ["John Smith"]
        assert [o["name"] for o in report["entities"]["organizations"]] == ["WSIB"]
        assert [m["amount"] for m in report["entities"]["money"]] == ["50,000"]
        assert [d["date"] for d in report["entities"]["dates"]] == ["2023"]
        assert len(report["claims"]) == 1
        claim = report["claims"][0]
        assert claim["claim_type"] == "denial"
        assert claim["alleged_actor"] == "WSIB"
        assert claim["evidence_strength"] == "High"

    @pytest.mark.asyncio
    async def test_denial_scenario_risk(self):
        report = await analyze_document(_payload(SCENARIO), NullLookup())
        assert report["risk_score"] == 20
        assert report["priority"] == "LOW"
        types = [a["action_type"] for a in report["suggested_actions"]]
        assert types == ["build_evidence_checklist", "flag_for_further_investigation"]

    @pytest.mark.asyncio
    async def test_critical_scenario(self):
        report = await analyze_document(_payload(CRITICAL_TEXT), NullLookup())
        assert [c["claim_type"] for c in report["claims"]] == ["fraud", "abuse", "pattern", "pattern"]
        assert report["risk_score"] == 75
        assert report["priority"] == "CRITICAL"
        assert report["risk_explanation"] == (
            "2 critical allegations; Significant financial amounts involved; "
            "Indicates systematic pattern; Public safety implications"
        )
        types = [a["action_type"] for a in report["suggested_actions"]]
        assert types[:3] == ["file_foi_request", "notify_oversight_body", "prepare_media_alert"]
        foi = report["suggested_actions"][0]
        assert foi["target"] == "Ontario Ministry FOI Office"

    @pytest.mark.asyncio
    async def test_corroborated_scenario(self):
        report = await analyze_document(_payload(CRITICAL_TEXT), FixtureLookup(RECORDS))
        levels = [r["corroboration_level"] for r in report["corroboration"]]
        assert levels == ["strong", "moderate", "strong", "strong"]
        assert report["risk_score"] == 100
        assert "3 strongly corroborated claims" in report["risk_explanation"]
        prov = report["provenance"]
        assert prov[0]["source"] == "https://example.org/doc"
        assert len(prov) == 1 + 2 + 1 + 2 + 2

    @pytest.mark.asyncio
    async def test_weak_claims_flagged(self):
        report = await analyze_document(_payload(CRITICAL_TEXT), FixtureLookup(RECORDS))
        flag = [a for a in report["suggested_actions"]
                if a["action_type"] == "flag_for_further_investigation"]
        assert flag == []


class TestEmptyInput:

    @pytest.mark.asyncio
    async def test_empty_string(self):
        report = await analyze_document(_payload(""), NullLookup())
        assert all(v == [] for v in report["entities"].values())
        assert report["claims"] == []
        assert report["relationships"] == []
        assert report["risk_score"] == 0
        assert report["priority"] == "LOW"
        assert len(report["provenance"]) == 1
        assert report["title"] == "Unknown Document"
        assert report["metadata"]["author"] == "unknown"

    @pytest.mark.asyncio
    async def test_missing_text(self):
        report = await analyze_document({"fetch_date": FETCH}, NullLookup())
        assert report["provenance"][0]["source"] == "unknown"


class TestContract:

    @pytest.mark.asyncio
    async def test_missing_fetch_date_fails_fast(self):
        with pytest.raises(DocumentContractError):
            await analyze_document({"text": SCENARIO}, NullLookup())

    @pytest.mark.asyncio
    async def test_bad_source_type_fails_fast(self):
        with pytest.raises(DocumentContractError):
            await analyze_document(_payload(SCENARIO, source_type="rumour"), NullLookup())


class TestDeterminism:

    @pytest.mark.asyncio
    async def test_idempotent(self):
        first = await analyze_document(_payload(CRITICAL_TEXT), FixtureLookup(RECORDS))
        second = await analyze_document(_payload(CRITICAL_TEXT), FixtureLookup(RECORDS))
        for key in VOLATILE:
            first.pop(key)
            second.pop(key)
        assert first == second

    @pytest.mark.asyncio
    async def test_concurrent_documents_independent(self):
        reports = await asyncio.gather(
            analyze_document(_payload(SCENARIO), NullLookup()),
            analyze_document(_payload(CRITICAL_TEXT), NullLookup()),
            analyze_document(_payload(""), NullLookup()),
        )
        assert [len(r["claims"]) for r in reports] == [1, 4, 0]


class TestSafetyOption:

    @pytest.mark.asyncio
    async def test_safety_checks_attached(self):
        report = await analyze_document(
            _payload(CRITICAL_TEXT), FixtureLookup(RECORDS), safety_checks=True,
        )
        assert report["legal_check"]["requires_lawyer_review"] is True
        assert len(report["explainability"]["strongest_evidence"]) == 3

    @pytest.mark.asyncio
    async def test_safety_checks_off_by_default(self):
        report = await analyze_document(_payload(SCENARIO), NullLookup())
        assert "privacy_check" not in report


class TestOverrideContract:

    @pytest.mark.asyncio
    async def test_string_overrides_applied(self):
        report = await analyze_document(
            _payload(SCENARIO, metadata_overrides={"title": "Denial letter", "author": "Desk"}),
            NullLookup(),
        )
        assert report["title"] == "Denial letter"
        assert report["metadata"]["author"] == "Desk"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"title": 123},
        {"date": ["2023"]},
        {"jurisdiction": 7},
        {"jurisdiction": {"location": 7}},
    ])
    async def test_non_string_override_fails_fast(self, overrides):
        with pytest.raises(DocumentContractError):
            await analyze_document(_payload(SCENARIO, metadata_overrides=overrides), NullLookup())

    @pytest.mark.asyncio
    async def test_jurisdiction_mapping_override(self):
        report = await analyze_document(
            _payload(SCENARIO, metadata_overrides={
                "jurisdiction": {"location": "Ontario", "level": "province"},
            }),
            NullLookup(),
        )
        assert report["jurisdiction"] == {"location": "Ontario", "level": "province"}


class TestUnusualText:

    @pytest.mark.asyncio
    async def test_lone_surrogate_still_reported(self):
        report = await analyze_document(_payload("WSIB denied \ud800 claim"), NullLookup())
        assert report["id"].startswith("eye_")
        assert report["claims"][0]["claim_type"] == "denial"

    def test_report_id_surrogate(self):
        assert len(report_id("\ud800").split("_")[2]) == 12


class TestDefaultLookup:

    def test_built_once(self):
        assert processor.default_lookup() is processor.default_lookup()

    @pytest.mark.asyncio
    async def test_used_when_no_lookup_given(self, monkeypatch):
        backend = FixtureLookup(RECORDS)
        monkeypatch.setattr(processor, "_default_lookup", backend)
        report = await analyze_document(_payload(CRITICAL_TEXT))
        assert report["risk_score"] == 100
