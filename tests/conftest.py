from __future__ import annotations

import asyncio
from typing import Any

import pytest

from recruiter_trust_agent.domain.results import ChannelCheck
from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.infra.cache import TTLCache
from recruiter_trust_agent.infra.store import InMemoryDecisionStore, InMemorySubjectRepository
from recruiter_trust_agent.orchestrator.pipeline import DecisionEngine
from recruiter_trust_agent.orchestrator.semantic import SemanticAssessor
from recruiter_trust_agent.orchestrator.verification import ExternalVerificationAggregator
from recruiter_trust_agent.providers.verification.base import VerificationProvider
from recruiter_trust_agent.providers.verification.dns import DnsCheck, DnsResolver


class FakeChannel(VerificationProvider):
    def __init__(
        self,
        channel: str,
        score: float = 80,
        *,
        confidence: float = 90,
        delay: float = 0.0,
        error: Exception | None = None,
        fallback_score: float | None = None,
        fallback_delay: float = 0.0,
        api_called: bool = False,
    ) -> None:
        self.channel = channel  # type: ignore[assignment]
        self.score = score
        self.confidence = confidence
        self.delay = delay
        self.error = error
        self.fallback_score = fallback_score
        self.fallback_delay = fallback_delay
        self.api_called = api_called
        self.calls = 0
        self.cancelled = False
        self.finished = False

    async def verify(self, subject: Subject) -> ChannelCheck:
        self.calls += 1
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        self.finished = True
        return self.result(
            score=self.score,
            valid=self.score >= 50,
            confidence=self.confidence,
            provider="fake",
            api_called=self.api_called,
        )

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        if self.fallback_delay:
            await asyncio.sleep(self.fallback_delay)
        if self.fallback_score is None:
            return None
        return self.result(score=self.fallback_score, confidence=30, provider="fake-fallback")


class FakeSemanticProvider:
    def __init__(self, payload: Any = None, *, delay: float = 0.0, error: Exception | None = None) -> None:
        self.payload = payload if payload is not None else {
            "score": 80,
            "confidence": 85,
            "reasoning": "Consistent business profile.",
            "red_flags": [],
            "positive_indicators": ["Company domain matches email"],
            "recommendation": "approve",
        }
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def score(self, subject: Subject, context: str) -> Any:
        self.calls.append((subject.id, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload

    async def check_connection(self) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        return {"status": "success", "message": "Connected successfully", "model": "fake"}


def static_resolver(hosts: dict[str, tuple[str, ...]]) -> DnsResolver:
    """Resolver whose cache is pre-filled so tests never touch real DNS."""

    cache = TTLCache(ttl_s=3600.0)
    for host, addresses in hosts.items():
        cache.set(host, DnsCheck(host=host, is_valid=bool(addresses), addresses=addresses))
    return DnsResolver(cache)


@pytest.fixture
def legit_subject() -> Subject:
    return Subject(
        id="r1",
        full_name="Alice Johnson",
        company_name="Acme Analytics",
        business_email="alice.johnson@acme-analytics.io",
        phone_number="+1 415 555 0134",
        role="Talent Acquisition Lead",
        industry="Software",
        website_url="https://acme-analytics.io",
    )


@pytest.fixture
def spam_subject() -> Subject:
    return Subject(
        id="r2",
        full_name="Test User",
        company_name="Fake Company 123",
        business_email="test123@gmail.com",
        phone_number="000-000-0000",
        role="CEO",
        industry="Cryptocurrency",
        website_url="http://localhost",
    )


@pytest.fixture
def make_engine():
    def _make(
        subjects: list[Subject],
        *,
        channels: list[VerificationProvider] | None = None,
        semantic: Any = "default",
        store: InMemoryDecisionStore | None = None,
        verification_timeout_s: float = 1.0,
        semantic_timeout_s: float = 1.0,
    ) -> DecisionEngine:
        providers = channels if channels is not None else [
            FakeChannel("email", 80),
            FakeChannel("phone", 80),
            FakeChannel("company", 80),
            FakeChannel("domain", 80),
        ]
        provider = FakeSemanticProvider() if semantic == "default" else semantic
        return DecisionEngine(
            repository=InMemorySubjectRepository(subjects),
            aggregator=ExternalVerificationAggregator(providers, timeout_s=verification_timeout_s),
            assessor=SemanticAssessor(provider, timeout_s=semantic_timeout_s),
            store=store,
        )

    return _make
