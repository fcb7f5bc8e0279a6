import pytest

from recruiter_trust_agent.config.scoring import ConfidencePolicy, DecisionThresholds, ScoringWeights
from recruiter_trust_agent.domain.results import RawScores
from recruiter_trust_agent.orchestrator.fusion import compute_confidence, fuse_source_scores, population_stddev
from recruiter_trust_agent.orchestrator.verdict_routing import recommendation_for, route_decision
from recruiter_trust_agent.scoring.rounding import round_half_up


@pytest.mark.parametrize(
    "scores",
    [(0, 0, 0), (100, 100, 100), (100, 0, 55.5), (12.4, 99.9, 63.2)],
)
def test_final_score_stays_in_range(scores):
    fused = fuse_source_scores(
        rule_based_score=scores[0],
        semantic_score=scores[1],
        external_score=scores[2],
        weights=ScoringWeights(rule_based=0.33, semantic=0.34, external=0.34),
    )
    assert 0 <= fused.final_score <= 100


def test_weighted_breakdown():
    fused = fuse_source_scores(
        rule_based_score=80,
        semantic_score=60,
        external_score=40,
        weights=ScoringWeights(),
    )
    assert fused.breakdown.rule_based_weighted == 24
    assert fused.breakdown.semantic_weighted == 24
    assert fused.breakdown.external_weighted == 12
    assert fused.final_score == 60
    assert fused.breakdown.raw_scores.as_tuple() == (80, 60, 40)


def test_out_of_range_inputs_are_clamped():
    fused = fuse_source_scores(
        rule_based_score=150,
        semantic_score=-20,
        external_score="n/a",
        weights=ScoringWeights(),
    )
    assert fused.breakdown.raw_scores.as_tuple() == (100, 0, 0)
    assert fused.final_score == 30


def test_population_stddev():
    assert population_stddev([50, 50, 50]) == 0
    assert population_stddev([80, 80, 20]) == pytest.approx(28.284, abs=0.001)


def test_agreement_raises_confidence_over_one_outlier():
    policy = ConfidencePolicy()
    agreeing = compute_confidence(
        semantic_confidence=80,
        raw_scores=RawScores(rule_based=80, semantic=80, external=80),
        policy=policy,
    )
    outlier = compute_confidence(
        semantic_confidence=80,
        raw_scores=RawScores(rule_based=80, semantic=80, external=20),
        policy=policy,
    )
    assert agreeing == 90
    assert outlier == 65
    assert agreeing > outlier


def test_high_spread_penalty_is_strictly_larger():
    policy = ConfidencePolicy()
    medium = compute_confidence(
        semantic_confidence=60,
        raw_scores=RawScores(rule_based=50, semantic=50, external=80),
        policy=policy,
    )
    high = compute_confidence(
        semantic_confidence=60,
        raw_scores=RawScores(rule_based=50, semantic=50, external=100),
        policy=policy,
    )
    assert medium == 52
    assert high == 45
    assert high < medium


def test_agreement_bonus_boundaries():
    policy = ConfidencePolicy()
    at_high = RawScores(rule_based=70, semantic=70, external=70)
    all_low = RawScores(rule_based=39, semantic=35, external=30)
    at_low = RawScores(rule_based=40, semantic=40, external=40)
    assert compute_confidence(semantic_confidence=50, raw_scores=at_high, policy=policy) == 60
    assert compute_confidence(semantic_confidence=50, raw_scores=all_low, policy=policy) == 60
    assert compute_confidence(semantic_confidence=50, raw_scores=at_low, policy=policy) == 50


def test_confidence_is_clamped():
    policy = ConfidencePolicy()
    assert compute_confidence(semantic_confidence=100, raw_scores=RawScores(rule_based=90, semantic=90, external=90), policy=policy) == 100
    assert compute_confidence(semantic_confidence=None, raw_scores=RawScores(rule_based=0, semantic=50, external=100), policy=policy) == 0


@pytest.mark.parametrize(
    ("score", "confidence", "expected"),
    [
        (70, 70, "approve"),
        (69, 70, "pending_review"),
        (39, 60, "flag"),
        (39, 59, "pending_review"),
        (95, 49, "pending_review"),
        (10, 49, "pending_review"),
        (55, 90, "pending_review"),
    ],
)
def test_decision_boundaries(score, confidence, expected):
    assert route_decision(score, confidence, DecisionThresholds()) == expected


def test_low_confidence_overrides_lenient_minimums():
    thresholds = DecisionThresholds(approve_confidence_min=30, flag_confidence_min=30, low_confidence_min=50)
    assert route_decision(90, 45, thresholds) == "pending_review"
    assert route_decision(90, 55, thresholds) == "approve"


def test_recommendations_explain_the_outcome():
    thresholds = DecisionThresholds()
    assert "legitimate" in recommendation_for("approve", final_score=80, confidence=80, thresholds=thresholds)
    assert "spam" in recommendation_for("flag", final_score=20, confidence=80, thresholds=thresholds)
    assert recommendation_for("pending_review", final_score=80, confidence=30, thresholds=thresholds).startswith(
        "Low confidence"
    )
    assert recommendation_for("pending_review", final_score=55, confidence=80, thresholds=thresholds).startswith(
        "Moderate score"
    )


def test_halves_round_up():
    fused = fuse_source_scores(
        rule_based_score=71,
        semantic_score=70,
        external_score=50,
        weights=ScoringWeights(rule_based=0.5, semantic=0.5, external=0.0),
    )
    assert fused.final_score == 71
    assert round_half_up(70.5) == 71
    assert round_half_up(69.49) == 69
    confidence = compute_confidence(
        semantic_confidence=64.5,
        raw_scores=RawScores(rule_based=50, semantic=52, external=54),
        policy=ConfidencePolicy(),
    )
    assert confidence == 65
