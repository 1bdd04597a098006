"""
Tests for the Claim Extractor.

Claims are sightings: every indicator match is its own claim, ordered
by rule then by offset. Evidence strength only ever grows as signals
are added to a claim's window.
"""

import pytest
from theeye.claims import extract_claims, find_victim, strength_bucket
from theeye.entities import extract_entities

SCENARIO = "WSIB denied John Smith's claim for $50,000 in 2023."


def _claims(text):
    return extract_claims(text, extract_entities(text))


class TestScenario:

    def test_single_denial_claim(self):
        claims = _claims(SCENARIO)
        assert len(claims) == 1
        assert claims[0].claim_type == "denial"
        assert claims[0].matched_text == "denied"

    def test_actor_is_organization(self):
        assert _claims(SCENARIO)[0].alleged_actor == "WSIB"

    def test_high_evidence_strength(self):
        claim = _claims(SCENARIO)[0]
        assert claim.evidence_points == 85
        assert claim.evidence_strength == "High"

    def test_event_date(self):
        assert _claims(SCENARIO)[0].date_of_event == "2023"


class TestExtraction:

    def test_no_claims_in_neutral_text(self):
        assert _claims("The committee met on Tuesday to discuss the agenda.") == []

    def test_empty_text(self):
        assert _claims("") == []

    def test_repeated_phrase_is_two_claims(self):
        claims = _claims("Benefits were denied. Appeals were denied again.")
        assert [c.claim_type for c in claims] == ["denial", "denial"]
        assert claims[0].offset < claims[1].offset

    def test_rule_order_then_offset(self):
        claims = _claims("An illegal payment. Then fraud. Then a claim was rejected.")
        assert [c.claim_type for c in claims] == ["denial", "fraud", "violation"]

    def test_case_insensitive(self):
        assert _claims("SYSTEMIC problems")[0].claim_type == "pattern"

    def test_all_claim_types(self):
        text = ("denied. fraud. harassment. negligence. repeatedly. breach.")
        types = [c.claim_type for c in _claims(text)]
        assert types == ["denial", "fraud", "abuse", "negligence", "pattern", "violation"]

    def test_windows(self):
        text = "a" * 400 + " denied " + "b" * 400
        claim = _claims(text)[0]
        assert len(claim.claim_text) <= 400
        assert len(claim.source_snippet) <= 600
        assert len(claim.source_snippet) > len(claim.claim_text)


class TestActorAndVictim:

    def test_unknown_actor(self):
        assert _claims("The request was denied.")[0].alleged_actor == "unknown"

    def test_person_when_no_organization(self):
        assert _claims("Jane Doe denied everything.")[0].alleged_actor == "Jane Doe"

    def test_organization_beats_person(self):
        claim = _claims("Jane Doe said the WSIB denied it.")[0]
        assert claim.alleged_actor == "WSIB"

    def test_victim_keyword(self):
        assert _claims("The injured worker was denied.")[0].alleged_victim == "worker"

    def test_victim_first_in_keyword_order(self):
        assert find_victim("the patient and the claimant") == "claimant"

    def test_no_victim(self):
        assert find_victim("nobody here") == "unknown"


class TestEvidenceStrength:

    @pytest.mark.parametrize("points,bucket", [
        (0, "Low"), (39, "Low"), (40, "Medium"), (69, "Medium"), (70, "High"), (100, "High"),
    ])
    def test_buckets(self, points, bucket):
        assert strength_bucket(points) == bucket

    def test_adding_signals_never_lowers_strength(self):
        order = {"Low": 0, "Medium": 1, "High": 2}
        steps = [
            "The claim was denied.",
            "The claim was denied by WSIB.",
            "The claim was denied by WSIB for $5,000.",
            "The claim was denied by WSIB for $5,000 in 2022.",
            "Records confirmed the claim was denied by WSIB for $5,000 in 2022.",
        ]
        ranks = [order[_claims(t)[0].evidence_strength] for t in steps]
        points = [_claims(t)[0].evidence_points for t in steps]
        assert ranks == sorted(ranks)
        assert points == sorted(points)
        assert ranks[-1] == 2

    def test_definitive_language_adds_points(self):
        plain = _claims("The claim was denied.")[0].evidence_points
        definitive = _claims("Documents confirmed the claim was denied.")[0].evidence_points
        assert definitive == plain + 15
