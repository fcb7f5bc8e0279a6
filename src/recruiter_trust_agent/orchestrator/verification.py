"""Fan-out over verification channels with per-channel timeout and fallback."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
import time
from typing import Any

from recruiter_trust_agent.core.errors import describe_error
from recruiter_trust_agent.core.logging_config import elapsed_ms
from recruiter_trust_agent.domain.results import ChannelCheck, PartialResult
from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.orchestrator.degrade import run_guarded
from recruiter_trust_agent.providers.verification.base import VerificationProvider

logger = logging.getLogger(__name__)

ALL_CHANNELS_FAILED_SCORE = 30


class ExternalVerificationAggregator:
    """Runs every channel provider concurrently and folds the results into one source score.

    A failing or slow channel is replaced by its provider's fallback heuristic;
    sibling channels always run to completion. The aggregate score is the mean
    of every channel that produced a result.
    """

    def __init__(self, providers: Sequence[VerificationProvider], *, timeout_s: float = 10.0) -> None:
        self._providers = list(providers)
        self._timeout_s = timeout_s

    @property
    def channels(self) -> list[str]:
        return [provider.channel for provider in self._providers]

    async def _run_channel(
        self, provider: VerificationProvider, subject: Subject
    ) -> tuple[ChannelCheck | None, str | None, bool]:
        outcome = await run_guarded(
            f"{provider.channel} verification",
            lambda: provider.verify(subject),
            timeout_s=self._timeout_s,
        )
        if outcome.ok and outcome.value is not None:
            return outcome.value.model_copy(update={"latency_ms": outcome.latency_ms}), None, False

        error = outcome.error or "no result"
        recovered = await run_guarded(
            f"{provider.channel} fallback",
            lambda: provider.fallback(subject, error),
            timeout_s=self._timeout_s,
        )
        if not recovered.ok:
            return None, f"{error}; fallback failed: {recovered.error}", outcome.timed_out
        if recovered.value is None:
            return None, error, outcome.timed_out
        latency_ms = outcome.latency_ms + recovered.latency_ms
        check = recovered.value.model_copy(update={"latency_ms": latency_ms, "error": error, "fallback": True})
        return check, error, outcome.timed_out

    async def verify(self, subject: Subject) -> PartialResult:
        started = time.perf_counter()
        outcomes = await asyncio.gather(*(self._run_channel(provider, subject) for provider in self._providers))

        checks: dict[str, ChannelCheck] = {}
        errors: dict[str, str] = {}
        timed_out: list[str] = []
        for channel, (check, error, expired) in zip(self.channels, outcomes):
            if check is not None:
                checks[channel] = check
            if error is not None:
                errors[channel] = error
            if expired:
                timed_out.append(channel)

        api_calls_count = sum(1 for check in checks.values() if check.api_called)
        details: dict[str, Any] = {
            "channels": {name: check.model_dump(mode="json") for name, check in checks.items()},
            "channel_latency_ms": {name: check.latency_ms for name, check in checks.items()},
            "channel_errors": errors,
            "timed_out_channels": timed_out,
            "api_calls_count": api_calls_count,
        }
        latency_ms = elapsed_ms(started)

        if not checks:
            logger.warning("All verification channels failed for subject %s", subject.id)
            details["all_channels_failed"] = True
            return PartialResult(
                source="external",
                score=ALL_CHANNELS_FAILED_SCORE,
                confidence=0,
                flags=["ALL_CHANNELS_FAILED"],
                details=details,
                error="all verification channels failed",
                latency_ms=latency_ms,
            )

        score = sum(check.score for check in checks.values()) / len(checks)
        confidence = sum(check.confidence for check in checks.values()) / len(checks)
        flags = [f"{name}_fallback" for name, check in checks.items() if check.fallback]
        flags.extend(f"{name}_unresolved" for name in errors if name not in checks)
        details["all_channels_failed"] = False
        logger.debug(
            "External verification completed subject=%s score=%.1f channels=%d errors=%d",
            subject.id,
            score,
            len(checks),
            len(errors),
        )
        return PartialResult(
            source="external",
            score=score,
            confidence=confidence,
            flags=flags,
            details=details,
            latency_ms=latency_ms,
        )

    async def check_connections(self) -> dict[str, dict[str, Any]]:
        async def check(provider: VerificationProvider) -> dict[str, Any]:
            try:
                return await provider.check_connection()
            except Exception as exc:
                return {"status": "error", "message": describe_error(exc)}

        results = await asyncio.gather(*(check(provider) for provider in self._providers))
        return dict(zip(self.channels, results))
