"""Decision engine: runs the three sources for one subject and merges them into a decision."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from recruiter_trust_agent.config.scoring import ScoringConfiguration
from recruiter_trust_agent.core.errors import InvalidSubjectError
from recruiter_trust_agent.core.logging_config import elapsed_ms
from recruiter_trust_agent.domain.results import (
    DecisionRecord,
    PartialResult,
    ProcessingMetrics,
    SourceError,
)
from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.infra.store import DecisionStore, SubjectRepository
from recruiter_trust_agent.orchestrator.degrade import run_guarded
from recruiter_trust_agent.orchestrator.fusion import compute_confidence, fuse_source_scores
from recruiter_trust_agent.orchestrator.semantic import SemanticAssessor
from recruiter_trust_agent.orchestrator.verdict_routing import recommendation_for, route_decision
from recruiter_trust_agent.orchestrator.verification import ALL_CHANNELS_FAILED_SCORE, ExternalVerificationAggregator
from recruiter_trust_agent.scoring.rules import RuleEngine

logger = logging.getLogger(__name__)


def collect_source_errors(results: list[PartialResult]) -> list[SourceError]:
    errors: list[SourceError] = []
    for result in results:
        if result.error is not None:
            errors.append(SourceError(source=result.source, error=result.error))
        channel_errors = result.details.get("channel_errors") if result.source == "external" else None
        if isinstance(channel_errors, dict):
            for channel, error in channel_errors.items():
                errors.append(SourceError(source=f"external.{channel}", error=str(error)))
    return errors


class DecisionEngine:
    """Scores one subject at a time from an injected, immutable configuration.

    The external verification fan-out starts first and runs as its own task;
    the rule engine runs inline, then the semantic assessor runs with the rule
    result as context. Source failures never escape ``decide``; only an invalid
    subject raises.
    """

    def __init__(
        self,
        *,
        repository: SubjectRepository,
        aggregator: ExternalVerificationAggregator,
        assessor: SemanticAssessor,
        configuration: ScoringConfiguration | None = None,
        rules: RuleEngine | None = None,
        store: DecisionStore | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._repository = repository
        self._aggregator = aggregator
        self._assessor = assessor
        self._configuration = configuration or ScoringConfiguration()
        self._rules = rules or RuleEngine()
        self._store = store
        self._client = client

    @property
    def store(self) -> DecisionStore | None:
        return self._store

    def get_configuration(self) -> ScoringConfiguration:
        return self._configuration

    async def _resolve_subject(self, subject_id: str) -> Subject:
        key = (subject_id or "").strip()
        if not key:
            raise InvalidSubjectError(subject_id, "subject id is empty")
        subject = await self._repository.get(key)
        if subject is None:
            raise InvalidSubjectError(key, "subject not found")
        if not subject.has_identity():
            raise InvalidSubjectError(key, "no full name, company name or business email")
        return subject

    async def _verify_external(self, subject: Subject) -> PartialResult:
        outcome = await run_guarded("external verification", lambda: self._aggregator.verify(subject))
        if outcome.ok and outcome.value is not None:
            return outcome.value
        return PartialResult(
            source="external",
            score=ALL_CHANNELS_FAILED_SCORE,
            confidence=0,
            details={"all_channels_failed": True},
            error=outcome.error or "external verification returned no result",
            latency_ms=outcome.latency_ms,
        )

    async def decide(self, subject_id: str) -> DecisionRecord:
        subject = await self._resolve_subject(subject_id)
        started = time.perf_counter()
        logger.debug("Decision started for subject %s", subject.id or subject_id)

        external_task = asyncio.create_task(self._verify_external(subject))
        try:
            rule_result = self._rules.evaluate(subject)
            semantic_result = await self._assessor.assess(subject, rule_result)
            external_result = await external_task
        finally:
            if not external_task.done():
                external_task.cancel()
                await asyncio.gather(external_task, return_exceptions=True)

        record = self.combine(
            subject_id=(subject_id or "").strip(),
            rule_result=rule_result,
            semantic_result=semantic_result,
            external_result=external_result,
            total_ms=elapsed_ms(started),
        )
        if self._store is not None:
            await self._store.save(record)
            await self._store.update_subject_status(record.subject_id, record.subject_status, record.final_score)

        logger.info(
            "Decision completed subject=%s score=%s decision=%s confidence=%s degraded=%d",
            record.subject_id,
            record.final_score,
            record.decision,
            record.confidence,
            len(record.processing_metrics.errors),
        )
        return record

    def combine(
        self,
        *,
        subject_id: str,
        rule_result: PartialResult,
        semantic_result: PartialResult,
        external_result: PartialResult,
        total_ms: int = 0,
    ) -> DecisionRecord:
        """Pure merge of three source results; identical inputs give identical scores and decisions."""

        cfg = self._configuration
        fused = fuse_source_scores(
            rule_based_score=rule_result.score,
            semantic_score=semantic_result.score,
            external_score=external_result.score,
            weights=cfg.weights,
        )
        confidence = compute_confidence(
            semantic_confidence=semantic_result.confidence,
            raw_scores=fused.breakdown.raw_scores,
            policy=cfg.confidence,
        )
        decision = route_decision(fused.final_score, confidence, cfg.thresholds)
        partials = [rule_result, semantic_result, external_result]
        api_calls = external_result.details.get("api_calls_count", 0)
        metrics = ProcessingMetrics(
            total_ms=total_ms,
            rule_based_ms=rule_result.latency_ms,
            semantic_ms=semantic_result.latency_ms,
            external_ms=external_result.latency_ms,
            api_calls_count=int(api_calls) if isinstance(api_calls, int) else 0,
            errors=collect_source_errors(partials),
        )
        return DecisionRecord(
            subject_id=subject_id,
            final_score=fused.final_score,
            decision=decision,
            confidence=confidence,
            recommendation=recommendation_for(
                decision,
                final_score=fused.final_score,
                confidence=confidence,
                thresholds=cfg.thresholds,
            ),
            breakdown=fused.breakdown,
            partial_results=partials,
            processing_metrics=metrics,
        )

    async def check_connections(self) -> dict[str, dict[str, Any]]:
        statuses, semantic = await asyncio.gather(
            self._aggregator.check_connections(),
            self._assessor.check_connection(),
        )
        return {**statuses, "semantic": semantic}

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> "DecisionEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
