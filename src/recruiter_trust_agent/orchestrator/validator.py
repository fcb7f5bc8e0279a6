"""Guardrails for semantic assessor payloads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import math
from typing import Any

_ALLOWED_RECOMMENDATIONS = {"approve", "flag", "manual_review"}
DEFAULT_SCORE = 50.0
DEFAULT_CONFIDENCE = 0.0


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    severity: str = "warning"


@dataclass
class NormalizedJudgement:
    score: float
    confidence: float
    reasoning: str
    recommendation: str
    red_flags: list[str] = field(default_factory=list)
    positive_indicators: list[str] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)


def _bounded_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number) or number < 0 or number > 100:
        return None
    return number


def _string_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class SemanticPayloadValidator:
    """Normalizes an untrusted model payload, recording every field it had to repair."""

    def __init__(self, *, max_reasoning_chars: int = 2000) -> None:
        self.max_reasoning_chars = max(1, int(max_reasoning_chars))

    def normalize(self, payload: Mapping[str, Any]) -> NormalizedJudgement:
        issues: list[ValidationIssue] = []

        score = _bounded_number(payload.get("score"))
        if score is None:
            issues.append(
                ValidationIssue(
                    code="invalid_score",
                    message=f"Score must be a number in [0, 100], got {payload.get('score')!r}.",
                    severity="error",
                )
            )
            score = DEFAULT_SCORE

        confidence = _bounded_number(payload.get("confidence"))
        if confidence is None:
            issues.append(
                ValidationIssue(
                    code="invalid_confidence",
                    message=f"Confidence must be a number in [0, 100], got {payload.get('confidence')!r}.",
                    severity="error",
                )
            )
            confidence = DEFAULT_CONFIDENCE

        raw_reasoning = payload.get("reasoning")
        reasoning = raw_reasoning.strip() if isinstance(raw_reasoning, str) else ""
        if not reasoning:
            issues.append(ValidationIssue(code="missing_reasoning", message="No reasoning provided."))
            reasoning = "No reasoning provided"
        elif len(reasoning) > self.max_reasoning_chars:
            issues.append(
                ValidationIssue(
                    code="reasoning_truncated",
                    message=f"Reasoning exceeded {self.max_reasoning_chars} characters.",
                )
            )
            reasoning = reasoning[: self.max_reasoning_chars]

        lists: dict[str, list[str]] = {}
        for key in ("red_flags", "positive_indicators"):
            raw = payload.get(key)
            cleaned = _string_list(raw)
            if cleaned is None:
                if raw is not None:
                    issues.append(ValidationIssue(code=f"invalid_{key}", message=f"{key} must be a list of strings."))
                cleaned = []
            lists[key] = list(dict.fromkeys(cleaned))

        recommendation = str(payload.get("recommendation", "")).strip().lower()
        if recommendation not in _ALLOWED_RECOMMENDATIONS:
            issues.append(
                ValidationIssue(
                    code="invalid_recommendation",
                    message=f"Unexpected recommendation value: {payload.get('recommendation')!r}.",
                )
            )
            recommendation = "manual_review"

        return NormalizedJudgement(
            score=score,
            confidence=confidence,
            reasoning=reasoning,
            recommendation=recommendation,
            red_flags=lists["red_flags"],
            positive_indicators=lists["positive_indicators"],
            issues=issues,
        )
