"""Adapter that turns one semantic provider call into a bounded, validated source result."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from recruiter_trust_agent.domain.results import PartialResult
from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.orchestrator.degrade import run_guarded
from recruiter_trust_agent.orchestrator.prompts import build_rule_context
from recruiter_trust_agent.orchestrator.validator import (
    DEFAULT_CONFIDENCE,
    DEFAULT_SCORE,
    SemanticPayloadValidator,
)
from recruiter_trust_agent.providers.semantic import SemanticProvider

logger = logging.getLogger(__name__)

LLM_ANALYSIS_FAILED = "LLM_ANALYSIS_FAILED"
PROVIDER_UNAVAILABLE = "semantic provider unavailable"


def degraded_semantic_result(error: str, *, latency_ms: int = 0, details: dict[str, Any] | None = None) -> PartialResult:
    return PartialResult(
        source="semantic",
        score=DEFAULT_SCORE,
        confidence=DEFAULT_CONFIDENCE,
        flags=[LLM_ANALYSIS_FAILED],
        details={"reasoning": f"LLM analysis failed: {error}", **(details or {})},
        error=error,
        latency_ms=latency_ms,
    )


class SemanticAssessor:
    def __init__(
        self,
        provider: SemanticProvider | None,
        *,
        timeout_s: float = 30.0,
        max_reasoning_chars: int = 2000,
    ) -> None:
        self._provider = provider
        self._timeout_s = timeout_s
        self._validator = SemanticPayloadValidator(max_reasoning_chars=max_reasoning_chars)

    async def assess(self, subject: Subject, rule_context: PartialResult | None = None) -> PartialResult:
        """Run exactly one provider call; every failure degrades to a neutral, zero-confidence result."""

        if self._provider is None:
            logger.warning("Semantic assessment skipped for subject %s: %s", subject.id, PROVIDER_UNAVAILABLE)
            return degraded_semantic_result(PROVIDER_UNAVAILABLE)

        context = ""
        if rule_context is not None:
            context = build_rule_context(len(rule_context.flags), rule_context.score)

        provider = self._provider
        outcome = await run_guarded(
            "semantic assessment",
            lambda: provider.score(subject, context),
            timeout_s=self._timeout_s,
        )
        if not outcome.ok:
            return degraded_semantic_result(outcome.error or "unknown error", latency_ms=outcome.latency_ms)

        payload = outcome.value
        if not isinstance(payload, Mapping):
            error = f"semantic provider returned {type(payload).__name__}, expected a mapping"
            logger.warning("Semantic assessment degraded for subject %s: %s", subject.id, error)
            return degraded_semantic_result(error, latency_ms=outcome.latency_ms)

        judgement = self._validator.normalize(payload)
        if judgement.issues:
            logger.warning(
                "Semantic payload for subject %s needed %d corrections: %s",
                subject.id,
                len(judgement.issues),
                ", ".join(issue.code for issue in judgement.issues),
            )
        details: dict[str, Any] = {
            "reasoning": judgement.reasoning,
            "recommendation": judgement.recommendation,
            "red_flags": judgement.red_flags,
            "positive_indicators": judgement.positive_indicators,
            "validation_issues": [
                {"code": issue.code, "message": issue.message, "severity": issue.severity}
                for issue in judgement.issues
            ],
            "context": context,
        }
        for key in ("model", "token_usage"):
            if key in payload:
                details[key] = payload[key]
        blocking = [issue.code for issue in judgement.issues if issue.severity == "error"]
        flags = list(judgement.red_flags)
        error: str | None = None
        if blocking:
            error = f"invalid semantic payload: {', '.join(blocking)}"
            flags.insert(0, LLM_ANALYSIS_FAILED)
        return PartialResult(
            source="semantic",
            score=judgement.score,
            confidence=judgement.confidence,
            flags=flags,
            details=details,
            error=error,
            latency_ms=outcome.latency_ms,
        )

    async def check_connection(self) -> dict[str, Any]:
        if self._provider is None:
            return {"status": "not_configured", "message": PROVIDER_UNAVAILABLE}
        outcome = await run_guarded(
            "semantic connection check",
            self._provider.check_connection,
            timeout_s=self._timeout_s,
        )
        if not outcome.ok or outcome.value is None:
            return {"status": "error", "message": outcome.error or "no response"}
        return outcome.value
