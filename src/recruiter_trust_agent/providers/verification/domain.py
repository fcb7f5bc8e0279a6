"""Domain legitimacy channel: DNS resolution and host-shape heuristics."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from recruiter_trust_agent.domain.results import ChannelCheck
from recruiter_trust_agent.domain.subject import Subject, is_valid_website, website_host
from recruiter_trust_agent.providers.verification.base import (
    DEFINITIVE_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    HEURISTIC_CONFIDENCE,
    VerificationProvider,
)
from recruiter_trust_agent.providers.verification.dns import DnsResolver

RISKY_TLDS = (".xyz", ".top", ".click", ".work", ".country", ".gq", ".tk")
RISKY_TLD_PENALTY = 15
PUNYCODE_PENALTY = 20


def base_domain(host: str) -> str:
    parts = [part for part in host.lower().split(".") if part]
    if len(parts) < 2:
        return host.lower()
    return ".".join(parts[-2:])


def host_indicators(host: str) -> list[str]:
    indicators: list[str] = []
    if "xn--" in host:
        indicators.append("punycode_domain")
    if any(host.endswith(tld) for tld in RISKY_TLDS):
        indicators.append("risky_tld")
    return indicators


class DomainVerificationProvider(VerificationProvider):
    channel = "domain"

    def __init__(self, resolver: DnsResolver) -> None:
        self._resolver = resolver

    async def verify(self, subject: Subject) -> ChannelCheck:
        url = subject.website_url
        if not is_valid_website(url):
            return self.result(
                score=0,
                valid=False,
                confidence=DEFINITIVE_CONFIDENCE,
                provider="validation",
                detail={"reason": "Invalid URL"},
            )

        host = website_host(url)
        is_ssl = urlparse(url.strip()).scheme == "https"
        dns = await self._resolver.resolve(host)
        score = 70 if dns.is_valid else 20
        if is_ssl:
            score += 10
        if len(host.split(".")) <= 2:
            score += 5
        indicators = host_indicators(host)
        if "risky_tld" in indicators:
            score -= RISKY_TLD_PENALTY
        if "punycode_domain" in indicators:
            score -= PUNYCODE_PENALTY

        detail: dict[str, Any] = {
            "domain": host,
            "base_domain": base_domain(host),
            "ssl": is_ssl,
            "indicators": indicators,
            "dns": dns.as_detail(),
        }
        return self.result(
            score=min(100, score),
            valid=dns.is_valid,
            confidence=HEURISTIC_CONFIDENCE,
            provider="dns",
            detail=detail,
        )

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        return self.result(
            score=10,
            valid=False,
            confidence=FALLBACK_CONFIDENCE,
            provider="verification-fallback",
            error=error,
            fallback=True,
        )
