"""Phone validity channel: Numverify lookup with a digit-format fallback."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from recruiter_trust_agent.core.errors import describe_error
from recruiter_trust_agent.core.security import is_configured_key
from recruiter_trust_agent.domain.results import ChannelCheck
from recruiter_trust_agent.domain.subject import Subject, has_plausible_phone_digits
from recruiter_trust_agent.providers.verification.base import (
    API_CONFIDENCE,
    DEFINITIVE_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    HEURISTIC_CONFIDENCE,
    VerificationProvider,
)

logger = logging.getLogger(__name__)

_NUMVERIFY_DETAIL_KEYS = (
    "valid",
    "number",
    "local_format",
    "international_format",
    "country_prefix",
    "country_code",
    "country_name",
    "location",
    "carrier",
    "line_type",
)


class NumverifyError(RuntimeError):
    pass


def score_numverify_result(data: dict[str, Any]) -> int:
    score = 80 if data.get("valid") else 20
    if str(data.get("line_type") or "").lower() == "mobile":
        score += 10
    if data.get("carrier"):
        score += 5
    return min(100, score)


class PhoneVerificationProvider(VerificationProvider):
    channel = "phone"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        base_url: str = "http://apilayer.net/api",
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return is_configured_key(self._api_key)

    async def verify(self, subject: Subject) -> ChannelCheck:
        phone = subject.phone_number
        if not phone:
            return self.result(
                score=0,
                valid=False,
                confidence=DEFINITIVE_CONFIDENCE,
                provider="validation",
                detail={"reason": "Phone number not provided"},
            )

        if not self.configured:
            logger.debug("Numverify API key not configured, using basic phone validation")
            plausible = has_plausible_phone_digits(phone)
            return self.result(
                score=50 if plausible else 20,
                valid=plausible,
                confidence=HEURISTIC_CONFIDENCE,
                provider="basic-validation",
            )

        response = await self._client.get(
            f"{self._base_url}/validate",
            params={"access_key": self._api_key, "number": phone, "country_code": "", "format": 1},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise NumverifyError("Numverify response is not an object")
        if data.get("error"):
            error = data["error"]
            info = error.get("info") if isinstance(error, dict) else None
            raise NumverifyError(str(info or "Numverify API error"))
        return self.result(
            score=score_numverify_result(data),
            valid=bool(data.get("valid")),
            confidence=API_CONFIDENCE,
            provider="numverify",
            detail={"numverify": {key: data.get(key) for key in _NUMVERIFY_DETAIL_KEYS}},
            api_called=True,
        )

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        if not subject.phone_number:
            return None
        plausible = has_plausible_phone_digits(subject.phone_number)
        return self.result(
            score=30 if plausible else 10,
            valid=plausible,
            confidence=FALLBACK_CONFIDENCE,
            provider="basic-fallback",
            error=error,
            fallback=True,
        )

    async def check_connection(self) -> dict[str, Any]:
        if not self.configured:
            return {"status": "not_configured", "message": "API key not provided"}
        try:
            response = await self._client.get(
                f"{self._base_url}/validate",
                params={"access_key": self._api_key, "number": "+14158586273"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            return {"status": "error", "message": describe_error(exc)}
        return {"status": "success", "message": "Connected successfully"}
