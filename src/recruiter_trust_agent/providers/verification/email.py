"""Email deliverability channel: Hunter email-verifier with DNS fallback."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from recruiter_trust_agent.core.errors import describe_error
from recruiter_trust_agent.core.security import is_configured_key
from recruiter_trust_agent.domain.results import ChannelCheck
from recruiter_trust_agent.domain.subject import Subject, is_valid_email
from recruiter_trust_agent.providers.verification.base import (
    API_CONFIDENCE,
    DEFINITIVE_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    HEURISTIC_CONFIDENCE,
    VerificationProvider,
)
from recruiter_trust_agent.providers.verification.dns import DnsResolver

logger = logging.getLogger(__name__)

_RESULT_SCORES = {
    "deliverable": 90,
    "undeliverable": 10,
    "risky": 30,
    "unknown": 50,
}
_HUNTER_DETAIL_KEYS = (
    "result",
    "score",
    "regexp",
    "gibberish",
    "disposable",
    "webmail",
    "mx_records",
    "smtp_server",
    "smtp_check",
    "accept_all",
    "block",
)


def score_hunter_result(data: dict[str, Any]) -> int:
    score = _RESULT_SCORES.get(str(data.get("result", "")).strip().lower(), 50)
    if data.get("mx_records"):
        score += 5
    if data.get("smtp_server"):
        score += 5
    if data.get("smtp_check"):
        score += 10
    return min(100, score)


class EmailVerificationProvider(VerificationProvider):
    channel = "email"

    def __init__(
        self,
        client: httpx.AsyncClient,
        resolver: DnsResolver,
        *,
        api_key: str | None = None,
        base_url: str = "https://api.hunter.io/v2",
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return is_configured_key(self._api_key)

    async def verify(self, subject: Subject) -> ChannelCheck:
        email = subject.business_email
        if not is_valid_email(email):
            return self.result(
                score=0,
                valid=False,
                confidence=DEFINITIVE_CONFIDENCE,
                provider="validation",
                detail={"reason": "Invalid email format"},
            )

        dns = await self._resolver.resolve(subject.email_domain)
        if not self.configured:
            logger.debug("Hunter API key not configured, using DNS-only email validation")
            return self.result(
                score=60 if dns.is_valid else 20,
                valid=dns.is_valid,
                confidence=HEURISTIC_CONFIDENCE,
                provider="dns-only",
                detail={"dns": dns.as_detail()},
            )

        response = await self._client.get(
            f"{self._base_url}/email-verifier",
            params={"email": email, "api_key": self._api_key},
        )
        response.raise_for_status()
        payload = response.json()
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ValueError("Hunter response is missing the data object")
        deliverable = str(data.get("result", "")).strip().lower() == "deliverable"
        return self.result(
            score=score_hunter_result(data),
            valid=deliverable,
            confidence=API_CONFIDENCE,
            provider="hunter.io",
            detail={
                "hunter": {key: data.get(key) for key in _HUNTER_DETAIL_KEYS},
                "domain_valid": bool(data.get("mx_records")) or dns.is_valid,
                "dns": dns.as_detail(),
            },
            api_called=True,
        )

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        if not is_valid_email(subject.business_email):
            return None
        dns = await self._resolver.resolve(subject.email_domain)
        return self.result(
            score=40 if dns.is_valid else 10,
            valid=dns.is_valid,
            confidence=FALLBACK_CONFIDENCE,
            provider="dns-fallback",
            detail={"dns": dns.as_detail()},
            error=error,
            fallback=True,
        )

    async def check_connection(self) -> dict[str, Any]:
        if not self.configured:
            return {"status": "not_configured", "message": "API key not provided"}
        try:
            response = await self._client.get(f"{self._base_url}/account", params={"api_key": self._api_key})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            return {"status": "error", "message": describe_error(exc)}
        return {"status": "success", "message": "Connected successfully"}
