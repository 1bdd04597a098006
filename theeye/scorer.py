"""
Risk Score Calculator

Computes a 0-100 risk score from claims and corroboration results.
Separated from the processor for single-responsibility.

Score = sum of the factors that fire, each added at most once:
  - any fraud/abuse claim
  - any claim snippet carrying a currency amount
  - at least one strongly corroborated claim
  - any pattern/systemic claim
  - any claim mentioning safety or harm
No factor subtracts, so the score is monotonic in its inputs.
"""

from __future__ import annotations

from theeye.models import Claim, CorroborationResult, RiskAssessment
from theeye.rules import (
    CRITICAL_CLAIM_TYPES,
    CURRENCY_SYMBOLS,
    PRIORITY_THRESHOLDS,
    RISK_WEIGHTS,
    SAFETY_TERMS,
)


def calculate_risk_score(
    claims: list[Claim],
    corroboration: list[CorroborationResult],
) -> RiskAssessment:
    """
    Calculate the risk assessment for one document.

    Reasons are appended in factor order, so the explanation for a
    given input is always identical.

    Scoring:
      Start at 0.
      Critical allegations (fraud/abuse):   +30
      Monetary amounts in evidence:          +20
      Strong corroboration (>=1 claim):      +25
      Systemic pattern claim:                +15
      Public safety language:                +10
      Cap at 100.
    """
    score = 0
    reasons: list[str] = []
    breakdown: dict = {
        "critical_claims": 0,
        "monetary": 0,
        "strong_corroboration": 0,
        "pattern": 0,
        "public_safety": 0,
    }

    # Factor 1: critical allegations
    critical = [c for c in claims if c.claim_type in CRITICAL_CLAIM_TYPES]
    if critical:
        score += RISK_WEIGHTS.critical_claims
        breakdown["critical_claims"] = RISK_WEIGHTS.critical_claims
        reasons.append(f"{len(critical)} critical allegations")

    # Factor 2: money
    if any(has_currency(c) for c in claims):
        score += RISK_WEIGHTS.monetary
        breakdown["monetary"] = RISK_WEIGHTS.monetary
        reasons.append("Significant financial amounts involved")

    # Factor 3: corroboration strength
    strong = sum(1 for r in corroboration if r.corroboration_level == "strong")
    if strong > 0:
        score += RISK_WEIGHTS.strong_corroboration
        breakdown["strong_corroboration"] = RISK_WEIGHTS.strong_corroboration
        reasons.append(f"{strong} strongly corroborated claims")

    # Factor 4: systemic pattern
    if any(c.claim_type == "pattern" for c in claims):
        score += RISK_WEIGHTS.pattern
        breakdown["pattern"] = RISK_WEIGHTS.pattern
        reasons.append("Indicates systematic pattern")

    # Factor 5: public safety
    if any(mentions_safety(c) for c in claims):
        score += RISK_WEIGHTS.public_safety
        breakdown["public_safety"] = RISK_WEIGHTS.public_safety
        reasons.append("Public safety implications")

    final = max(0, min(100, score))
    breakdown["final_score"] = final
    return RiskAssessment(
        score=final,
        reasons=reasons,
        priority=priority_for(final),
        breakdown=breakdown,
    )


def priority_for(score: int) -> str:
    for priority, minimum in PRIORITY_THRESHOLDS:
        if score >= minimum:
            return priority
    return "LOW"


def has_currency(claim: Claim) -> bool:
    return any(symbol in claim.source_snippet for symbol in CURRENCY_SYMBOLS)


def mentions_safety(claim: Claim) -> bool:
    lowered = claim.claim_text.lower()
    return any(term in lowered for term in SAFETY_TERMS)
