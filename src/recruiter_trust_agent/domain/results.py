"""Scoring result structures shared by the engine, adapters and callers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal
import uuid

from pydantic import BaseModel, ConfigDict, Field

from recruiter_trust_agent.config.scoring import ScoringWeights

SourceName = Literal["rule_based", "semantic", "external"]
Decision = Literal["approve", "flag", "pending_review"]
Severity = Literal["high", "medium", "low"]
Channel = Literal["email", "phone", "company", "domain"]

SUBJECT_STATUS_BY_DECISION: dict[str, str] = {
    "approve": "approved",
    "flag": "flagged",
    "pending_review": "pending",
}


def utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class RuleFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    severity: Severity
    message: str
    impact: int = 0


class PartialResult(BaseModel):
    """One source's contribution to a scoring run."""

    model_config = ConfigDict(frozen=True)

    source: SourceName
    score: float = Field(ge=0, le=100)
    confidence: float | None = Field(default=None, ge=0, le=100)
    flags: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    latency_ms: int = Field(default=0, ge=0)

    @property
    def degraded(self) -> bool:
        return self.error is not None


class ChannelCheck(BaseModel):
    """Outcome of one external verification channel."""

    model_config = ConfigDict(frozen=True)

    channel: Channel
    score: float = Field(ge=0, le=100)
    valid: bool = False
    confidence: float = Field(default=0, ge=0, le=100)
    provider: str = ""
    detail: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    api_called: bool = False
    fallback: bool = False
    latency_ms: int = Field(default=0, ge=0)


class SourceError(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    error: str
    timestamp: str = Field(default_factory=utc_now)


class RawScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_based: float
    semantic: float
    external: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.rule_based, self.semantic, self.external)


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_based_weighted: float
    semantic_weighted: float
    external_weighted: float
    weights: ScoringWeights
    raw_scores: RawScores


class ProcessingMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_ms: int = 0
    rule_based_ms: int = 0
    semantic_ms: int = 0
    external_ms: int = 0
    api_calls_count: int = 0
    errors: list[SourceError] = Field(default_factory=list)


class DecisionRecord(BaseModel):
    """Full, immutable outcome of one decision run for a subject."""

    model_config = ConfigDict(frozen=True)

    record_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    subject_id: str
    final_score: int = Field(ge=0, le=100)
    decision: Decision
    confidence: int = Field(ge=0, le=100)
    recommendation: str = ""
    breakdown: ScoreBreakdown
    partial_results: list[PartialResult] = Field(default_factory=list)
    processing_metrics: ProcessingMetrics = Field(default_factory=ProcessingMetrics)
    created_at: str = Field(default_factory=utc_now)

    @property
    def subject_status(self) -> str:
        return SUBJECT_STATUS_BY_DECISION[self.decision]

    def partial(self, source: SourceName) -> PartialResult | None:
        for item in self.partial_results:
            if item.source == source:
                return item
        return None


class BatchItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject_id: str
    success: bool
    record: DecisionRecord | None = None
    error: str | None = None


class BatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    successful: int = 0
    failed: int = 0
    results: list[BatchItem] = Field(default_factory=list)

    @classmethod
    def from_items(cls, items: list[BatchItem]) -> "BatchResult":
        successful = sum(1 for item in items if item.success)
        return cls(total=len(items), successful=successful, failed=len(items) - successful, results=list(items))
