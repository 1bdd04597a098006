"""
Tests for the Entity Extractor and the Relationship Mapper.

The relationship heuristic is character distance only. These tests
pin that behavior, false positives included.
"""

from theeye.entities import classify_organization, extract_context, extract_entities
from theeye.relationships import map_relationships

SCENARIO = "WSIB denied John Smith's claim for $50,000 in 2023."


class TestScenario:
    """The reference sentence yields one of each entity kind."""

    def test_person(self):
        e = extract_entities(SCENARIO)
        assert [p.full_name for p in e.people] == ["John Smith"]
        assert e.people[0].role == "unknown"

    def test_organization(self):
        e = extract_entities(SCENARIO)
        assert [o.name for o in e.organizations] == ["WSIB"]
        assert e.organizations[0].category == "workers_comp"

    def test_money(self):
        e = extract_entities(SCENARIO)
        assert [m.amount for m in e.money] == ["50,000"]
        assert e.money[0].scale == "dollars"

    def test_date(self):
        e = extract_entities(SCENARIO)
        assert [d.date for d in e.dates] == ["2023"]


class TestPeople:

    def test_role_detected(self):
        e = extract_entities("Jane Doe, Minister of Labour, spoke today.")
        assert e.people[0].full_name == "Jane Doe"
        assert e.people[0].role == "Minister"

    def test_deduplicated(self):
        e = extract_entities("Jane Doe said no. then Jane Doe said yes.")
        assert len(e.people) == 1
        assert e.people[0].offset == 0


class TestOrganizations:

    def test_categories(self):
        assert classify_organization("WSIAT") == "workers_comp"
        assert classify_organization("Ministry of Health") == "government"
        assert classify_organization("Department of Finance") == "government"
        assert classify_organization("Acme Insurance") == "insurance"

    def test_multiword_orgs(self):
        e = extract_entities("The Ministry of Labour and Acme Insurance disagreed.")
        names = [o.name for o in e.organizations]
        assert names == ["Ministry of Labour", "Acme Insurance"]

    def test_deduplicated(self):
        e = extract_entities("WSIB said one thing. WSIB did another.")
        assert len(e.organizations) == 1


class TestMoneyAndDates:

    def test_scale(self):
        e = extract_entities("A budget of $12 million was approved.")
        assert e.money[0].amount == "12"
        assert e.money[0].scale == "million"

    def test_date_forms(self):
        e = extract_entities("Filed 2021-04-02, heard 5/6/2022, closed March 3, 2023.")
        dates = [d.date for d in e.dates]
        assert dates == ["2021-04-02", "5/6/2022", "March 3, 2023"]

    def test_context_window(self):
        text = "x" * 300 + "$10" + "y" * 300
        e = extract_entities(text)
        assert len(e.money[0].context) == 200


class TestEmpty:

    def test_empty_text(self):
        e = extract_entities("")
        assert e.is_empty()

    def test_context_clamped_at_edges(self):
        assert extract_context("  abc  ", 0, radius=100) == "abc"


# ============================================================
# RELATIONSHIPS
# ============================================================

class TestRelationships:

    def test_close_pair_is_high_confidence(self):
        e = extract_entities(SCENARIO)
        rels = map_relationships(e, SCENARIO)
        assert len(rels) == 1
        assert rels[0].type == "employment"
        assert rels[0].source == "John Smith"
        assert rels[0].target == "WSIB"
        assert rels[0].confidence == "high"
        assert rels[0].distance == SCENARIO.find("John Smith")

    def test_medium_confidence_band(self):
        text = "John Smith " + "z" * 80 + " WSIB"
        rels = map_relationships(extract_entities(text), text)
        assert rels[0].confidence == "medium"

    def test_far_apart_not_linked(self):
        text = "John Smith " + "z" * 250 + " WSIB"
        assert map_relationships(extract_entities(text), text) == []

    def test_proximity_only(self):
        """Co-occurrence is enough, even when the sentence says otherwise."""
        text = "John Smith has never worked for WSIB."
        rels = map_relationships(extract_entities(text), text)
        assert len(rels) == 1

    def test_no_entities(self):
        assert map_relationships(extract_entities(""), "") == []
