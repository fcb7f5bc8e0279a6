"""Decision mapping from final score and confidence."""

from __future__ import annotations

from recruiter_trust_agent.config.scoring import DecisionThresholds
from recruiter_trust_agent.domain.results import Decision


def route_decision(final_score: int, confidence: int, thresholds: DecisionThresholds) -> Decision:
    # Low confidence wins over any score, even when confidence minimums are configured below it.
    if confidence < thresholds.low_confidence_min:
        return "pending_review"
    if final_score >= thresholds.approve_score and confidence >= thresholds.approve_confidence_min:
        return "approve"
    if final_score < thresholds.flag_score and confidence >= thresholds.flag_confidence_min:
        return "flag"
    return "pending_review"


def recommendation_for(
    decision: Decision,
    *,
    final_score: int,
    confidence: int,
    thresholds: DecisionThresholds,
) -> str:
    if decision == "approve":
        return "High confidence legitimate recruiter"
    if decision == "flag":
        return "Low score with sufficient confidence - likely spam"
    if confidence < thresholds.low_confidence_min:
        return "Low confidence - requires human review"
    if thresholds.flag_score <= final_score < thresholds.approve_score:
        return "Moderate score - requires human review"
    if final_score >= thresholds.approve_score:
        return "High score but insufficient confidence - requires human review"
    return "Low score but insufficient confidence - requires human review"
