"""Immutable scoring configuration: source weights, decision thresholds, confidence policy."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

WEIGHT_SUM_TOLERANCE = 0.01


class ScoringWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_based: float = Field(default=0.3, ge=0.0, le=1.0)
    semantic: float = Field(default=0.4, ge=0.0, le=1.0)
    external: float = Field(default=0.3, ge=0.0, le=1.0)

    @property
    def total(self) -> float:
        return self.rule_based + self.semantic + self.external

    def sums_to_one(self, tolerance: float = WEIGHT_SUM_TOLERANCE) -> bool:
        return abs(self.total - 1.0) <= tolerance


class DecisionThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    approve_score: int = Field(default=70, ge=0, le=100)
    flag_score: int = Field(default=40, ge=0, le=100)
    approve_confidence_min: int = Field(default=70, ge=0, le=100)
    flag_confidence_min: int = Field(default=60, ge=0, le=100)
    low_confidence_min: int = Field(default=50, ge=0, le=100)


class ConfidencePolicy(BaseModel):
    """Adjustments applied to the semantic confidence when sources agree or disagree."""

    model_config = ConfigDict(frozen=True)

    medium_stddev: float = Field(default=10.0, ge=0.0)
    high_stddev: float = Field(default=20.0, ge=0.0)
    medium_penalty: int = Field(default=8, ge=0, le=100)
    high_penalty: int = Field(default=15, ge=0, le=100)
    agreement_bonus: int = Field(default=10, ge=0, le=100)
    agreement_high: int = Field(default=70, ge=0, le=100)
    agreement_low: int = Field(default=40, ge=0, le=100)


class ScoringConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: DecisionThresholds = Field(default_factory=DecisionThresholds)
    confidence: ConfidencePolicy = Field(default_factory=ConfidencePolicy)

    def weight_warnings(self) -> list[str]:
        if self.weights.sums_to_one():
            return []
        return [
            "Scoring weights do not sum to 1.0 "
            f"(rule_based={self.weights.rule_based}, semantic={self.weights.semantic}, "
            f"external={self.weights.external}, total={self.weights.total:.3f})."
        ]
