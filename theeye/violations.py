"""
Rights-Impact Classifier

Companion pass for dataset, bill and policy descriptions. Runs the
same "scan against a keyword table -> severity bucket -> explanation"
pattern as the claim pipeline, over a different input shape:

  1. Violation flags: VIOLATION_RULES, severity from the number of
     distinct keywords that matched (>=3 critical, 2 high, 1 medium).
  2. Compliance: COMPLIANCE_RULES keyword combinations raise the
     Charter, domestic human-rights and treaty statuses. A status only
     ever escalates.
  3. Impacted populations: POPULATION_RULES, for aggregate reporting.
"""

from __future__ import annotations

from dataclasses import asdict

from theeye.models import (
    ComplianceIssue,
    ComplianceStatus,
    PopulationImpact,
    RightsClassification,
    ViolationFlag,
)
from theeye.rules import (
    COMPLIANCE_RULES,
    COMPLIANCE_STATUS_RANK,
    POPULATION_RULES,
    VIOLATION_RULES,
    VIOLATION_SEVERITY_THRESHOLDS,
)

FRAMEWORKS = ("charter", "human_rights", "treaty")


def classify_item(title: str = "", description: str = "") -> RightsClassification:
    """Classify one `{title, description}` item."""
    text = f"{title or ''} {description or ''}"
    statuses = assess_compliance(text)
    return RightsClassification(
        violations=detect_violations(text),
        charter=statuses["charter"],
        human_rights=statuses["human_rights"],
        treaty=statuses["treaty"],
        impacted_populations=identify_impacted_populations(text),
    )


def detect_violations(text: str) -> list[ViolationFlag]:
    lowered = text.lower()
    flags = []
    for rule in VIOLATION_RULES:
        matched = [kw for kw in rule.keywords if kw in lowered]
        if not matched:
            continue
        flags.append(ViolationFlag(
            type=rule.type,
            name=rule.name,
            description=rule.description,
            matched_keywords=matched,
            charter_citation=rule.charter_citation,
            treaty_citation=rule.treaty_citation,
            severity=violation_severity(len(matched)),
        ))
    return flags


def violation_severity(match_count: int) -> str:
    for minimum, severity in VIOLATION_SEVERITY_THRESHOLDS:
        if match_count >= minimum:
            return severity
    return "medium"


def assess_compliance(text: str) -> dict[str, ComplianceStatus]:
    statuses = {name: ComplianceStatus() for name in FRAMEWORKS}
    for rule in COMPLIANCE_RULES:
        if not all(p.search(text) for p in rule.requires):
            continue
        current = statuses[rule.framework]
        if COMPLIANCE_STATUS_RANK[rule.status] > COMPLIANCE_STATUS_RANK[current.status]:
            current.status = rule.status
        current.issues.append(ComplianceIssue(
            citation=rule.citation,
            right=rule.right,
            concern=rule.concern,
        ))
    return statuses


def identify_impacted_populations(text: str) -> list[PopulationImpact]:
    lowered = text.lower()
    populations = []
    for rule in POPULATION_RULES:
        matched = [kw for kw in rule.keywords if kw in lowered]
        if matched:
            populations.append(PopulationImpact(name=rule.name, matched_keywords=matched))
    return populations


def classification_to_dict(result: RightsClassification) -> dict:
    """Flatten to the wire shape: statuses as strings, issues grouped separately."""
    return {
        "violations": [asdict(v) for v in result.violations],
        "charter_status": result.charter.status,
        "human_rights_status": result.human_rights.status,
        "treaty_status": result.treaty.status,
        "issues": {
            "charter": [asdict(i) for i in result.charter.issues],
            "human_rights": [asdict(i) for i in result.human_rights.issues],
            "treaty": [asdict(i) for i in result.treaty.issues],
        },
        "impacted_populations": [asdict(p) for p in result.impacted_populations],
    }


# ============================================================
# AGGREGATE REPORT
# ============================================================

def build_rights_report(items: list[dict]) -> dict:
    """
    Classify a batch of items and aggregate for periodic reporting.

    Each item is a mapping with title, description and an optional
    scope. Violations are bucketed by severity and carry the title of
    the item that raised them.
    """
    buckets: dict[str, list[dict]] = {"critical": [], "high": [], "medium": []}
    analyses = []
    population_counts: dict[str, int] = {}
    concerns = {name: 0 for name in FRAMEWORKS}

    for item in items:
        title = item.get("title", "")
        result = classify_item(title, item.get("description", ""))
        flat = classification_to_dict(result)
        analyses.append({
            "title": title,
            "scope": item.get("scope", "unknown"),
            **flat,
        })

        for violation in flat["violations"]:
            buckets[violation["severity"]].append({**violation, "source": title})

        for name in FRAMEWORKS:
            if flat[f"{name}_status"] == "POTENTIAL_VIOLATION":
                concerns[name] += 1

        for pop in result.impacted_populations:
            population_counts[pop.name] = population_counts.get(pop.name, 0) + 1

    order = {rule.name: i for i, rule in enumerate(POPULATION_RULES)}
    populations = sorted(
        population_counts.items(), key=lambda kv: (-kv[1], order[kv[0]]),
    )

    return {
        "analyses": analyses,
        "violations": buckets,
        "summary": {
            "total_items_analyzed": len(items),
            "violations_detected": sum(len(b) for b in buckets.values()),
            "charter_concerns": concerns["charter"],
            "human_rights_concerns": concerns["human_rights"],
            "treaty_concerns": concerns["treaty"],
            "populations_affected": [
                {"name": name, "count": count} for name, count in populations
            ],
        },
    }
