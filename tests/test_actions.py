"""
Tests for the Action Generator.

Escalations (FOI, oversight, media) appear only for CRITICAL or HIGH
documents. Weak claims always land in the further-investigation list.
"""

from theeye.actions import (
    build_public_statement,
    extract_time_range,
    generate_actions,
    identify_foi_target,
    identify_oversight_bodies,
)
from theeye.models import Claim, CorroborationResult, RiskAssessment


def make_claim(claim_type="denial", actor="WSIB", text="The claim was denied.",
               snippet=None, date=None):
    return Claim(
        claim_type=claim_type,
        matched_text="x",
        claim_text=text,
        offset=0,
        alleged_actor=actor,
        alleged_victim="unknown",
        date_of_event=date,
        quote=text,
        source_snippet=snippet if snippet is not None else text,
        evidence_points=0,
        evidence_strength="Low",
    )


def make_result(claim, level="weak"):
    return CorroborationResult(
        claim=claim.claim_text,
        claim_type=claim.claim_type,
        corroborating_sources=[],
        corroboration_level=level,
        needs_further_investigation=level == "weak",
    )


def risk(priority, score):
    return RiskAssessment(score=score, reasons=[], priority=priority)


def _types(actions):
    return [a.action_type for a in actions]


class TestEscalation:

    def test_high_priority_escalates(self):
        claim = make_claim("fraud")
        actions = generate_actions([claim], [make_result(claim, "strong")], risk("HIGH", 55))
        assert _types(actions) == [
            "file_foi_request",
            "notify_oversight_body",
            "prepare_media_alert",
            "build_evidence_checklist",
        ]

    def test_low_priority_does_not_escalate(self):
        claim = make_claim()
        actions = generate_actions([claim], [make_result(claim)], risk("LOW", 0))
        assert "file_foi_request" not in _types(actions)
        assert "notify_oversight_body" not in _types(actions)
        assert "prepare_media_alert" not in _types(actions)

    def test_medium_priority_does_not_escalate(self):
        claim = make_claim()
        actions = generate_actions([claim], [make_result(claim, "strong")], risk("MEDIUM", 45))
        assert _types(actions) == ["build_evidence_checklist"]

    def test_checklist_always_present(self):
        actions = generate_actions([], [], risk("LOW", 0))
        assert _types(actions) == ["build_evidence_checklist"]


class TestWeakClaims:

    def test_weak_claim_flagged(self):
        claim = make_claim(text="Weak allegation text")
        actions = generate_actions([claim], [make_result(claim)], risk("LOW", 0))
        flag = [a for a in actions if a.action_type == "flag_for_further_investigation"][0]
        assert flag.payload["targets"] == ["Weak allegation text"]

    def test_weak_claim_flagged_even_when_escalating(self):
        strong = make_claim("fraud", text="strong one")
        weak = make_claim("denial", text="weak one")
        actions = generate_actions(
            [strong, weak],
            [make_result(strong, "strong"), make_result(weak, "weak")],
            risk("CRITICAL", 80),
        )
        flag = [a for a in actions if a.action_type == "flag_for_further_investigation"][0]
        assert flag.payload["targets"] == ["weak one"]

    def test_no_flag_without_weak_claims(self):
        claim = make_claim()
        actions = generate_actions([claim], [make_result(claim, "moderate")], risk("LOW", 0))
        assert "flag_for_further_investigation" not in _types(actions)


class TestFOI:

    def test_template_fields(self):
        claim = make_claim(date="2021")
        actions = generate_actions([claim], [make_result(claim)], risk("HIGH", 50))
        foi = actions[0].to_dict()
        assert foi["template"]["subject"] == "Freedom of Information Request - WSIB"
        assert foi["template"]["time_period"] == "2021 to 2021"
        assert foi["target"] == "WSIB Freedom of Information Office"
        assert foi["priority"] == "immediate"

    def test_target_routing(self):
        assert identify_foi_target([make_claim(actor="Ministry of Health")]) == "Ontario Ministry FOI Office"
        assert identify_foi_target([make_claim(actor="Acme Insurance")]) == "Federal ATIP Office"
        assert identify_foi_target([make_claim(actor="unknown")]) == "Federal ATIP Office"

    def test_target_uses_most_frequent_actor(self):
        claims = [
            make_claim(actor="Ministry of Health"),
            make_claim(actor="WSIB"),
            make_claim(actor="WSIB"),
        ]
        assert identify_foi_target(claims) == "WSIB Freedom of Information Office"

    def test_time_range(self):
        claims = [make_claim(date="2019"), make_claim(date="3/4/2022"), make_claim()]
        assert extract_time_range(claims) == "2019 to 2022"

    def test_default_time_range(self):
        assert extract_time_range([make_claim()]) == "Past 5 years"


class TestOversightAndMedia:

    def test_bodies_without_fraud(self):
        names = [b.name for b in identify_oversight_bodies([make_claim("denial")])]
        assert names == ["Ontario Ombudsman", "Provincial Auditor General"]

    def test_bodies_with_fraud(self):
        names = [b.name for b in identify_oversight_bodies([make_claim("fraud")])]
        assert names == [
            "Ontario Ombudsman",
            "Public Sector Integrity Commissioner",
            "Provincial Auditor General",
        ]

    def test_public_statement(self):
        statement = build_public_statement([make_claim("fraud"), make_claim()])
        assert statement.startswith("BREAKING: Investigation reveals fraud allegations against WSIB.")
        assert "2 documented incidents" in statement
        assert len(statement) <= 280

    def test_public_statement_truncated(self):
        long_actor = make_claim(actor="A" * 400)
        assert len(build_public_statement([long_actor])) == 280


class TestChecklist:

    def _checklist(self, claims, levels):
        results = [make_result(c, lvl) for c, lvl in zip(claims, levels)]
        actions = generate_actions(claims, results, risk("LOW", 0))
        return [a for a in actions if a.action_type == "build_evidence_checklist"][0].payload["checklist"]

    def test_witness_always(self):
        items = [i["item"] for i in self._checklist([], [])]
        assert items == ["Collect witness testimonials with consent forms"]

    def test_full_checklist(self):
        claims = [make_claim("violation", snippet="$9 lost"), make_claim()]
        checklist = self._checklist(claims, ["weak", "weak"])
        assert [i["item"] for i in checklist] == [
            "Obtain primary source documents for weak claims",
            "Obtain financial records, invoices, contracts",
            "Collect witness testimonials with consent forms",
            "Seek legal review for potential litigation",
        ]
        assert checklist[0]["count"] == 2
