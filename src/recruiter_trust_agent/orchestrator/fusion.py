"""Score fusion across the rule-based, semantic and external sources."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

from recruiter_trust_agent.config.scoring import ConfidencePolicy, ScoringWeights
from recruiter_trust_agent.domain.results import RawScores, ScoreBreakdown
from recruiter_trust_agent.scoring.rounding import round_half_up


def _bounded_score(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    if value > 100:
        return 100.0
    return value


@dataclass(frozen=True)
class FusedScore:
    final_score: int
    breakdown: ScoreBreakdown


def fuse_source_scores(
    *,
    rule_based_score: float,
    semantic_score: float,
    external_score: float,
    weights: ScoringWeights,
) -> FusedScore:
    raw = RawScores(
        rule_based=_bounded_score(rule_based_score),
        semantic=_bounded_score(semantic_score),
        external=_bounded_score(external_score),
    )
    rule_weighted = raw.rule_based * weights.rule_based
    semantic_weighted = raw.semantic * weights.semantic
    external_weighted = raw.external * weights.external
    total = rule_weighted + semantic_weighted + external_weighted
    final_score = max(0, min(100, round_half_up(total)))
    return FusedScore(
        final_score=final_score,
        breakdown=ScoreBreakdown(
            rule_based_weighted=round(rule_weighted, 2),
            semantic_weighted=round(semantic_weighted, 2),
            external_weighted=round(external_weighted, 2),
            weights=weights,
            raw_scores=raw,
        ),
    )


def population_stddev(values: tuple[float, ...] | list[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((value - mean) ** 2 for value in values) / len(values))


def compute_confidence(
    *,
    semantic_confidence: float | None,
    raw_scores: RawScores,
    policy: ConfidencePolicy,
) -> int:
    """Start from the semantic confidence, penalize source disagreement and reward strong agreement."""

    confidence = float(semantic_confidence or 0.0)
    scores = raw_scores.as_tuple()
    spread = population_stddev(scores)
    if spread > policy.high_stddev:
        confidence -= policy.high_penalty
    elif spread > policy.medium_stddev:
        confidence -= policy.medium_penalty

    if all(score >= policy.agreement_high for score in scores) or all(score < policy.agreement_low for score in scores):
        confidence += policy.agreement_bonus
    return max(0, min(100, round_half_up(confidence)))
