"""Common surface for external verification channel providers."""

from __future__ import annotations

from typing import Any

from recruiter_trust_agent.domain.results import Channel, ChannelCheck
from recruiter_trust_agent.domain.subject import Subject

# Confidence assigned to a channel result depending on how it was obtained.
API_CONFIDENCE = 90
DEFINITIVE_CONFIDENCE = 80
HEURISTIC_CONFIDENCE = 60
FALLBACK_CONFIDENCE = 30


def capped(score: float) -> float:
    return max(0.0, min(100.0, float(score)))


class VerificationProvider:
    """One verification channel.

    ``verify`` performs the primary check and may raise or hang; the
    aggregator bounds it with a timeout. ``fallback`` supplies a cheaper,
    lower-confidence heuristic used when ``verify`` fails. Returning ``None``
    leaves the channel unresolved.
    """

    channel: Channel

    async def verify(self, subject: Subject) -> ChannelCheck:
        raise NotImplementedError

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        return None

    async def check_connection(self) -> dict[str, Any]:
        return {"status": "not_configured", "message": "No vendor API for this channel"}

    def result(self, **kwargs: Any) -> ChannelCheck:
        kwargs["score"] = capped(kwargs.get("score", 0))
        return ChannelCheck(channel=self.channel, **kwargs)
