"""Contract for the LLM-backed semantic assessor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

from recruiter_trust_agent.domain.subject import Subject

Recommendation = Literal["approve", "flag", "manual_review"]


class SemanticJudgement(BaseModel):
    """Structured output requested from the assessor agent."""

    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=100)
    reasoning: str = ""
    red_flags: list[str] = Field(default_factory=list)
    positive_indicators: list[str] = Field(default_factory=list)
    recommendation: Recommendation = "manual_review"


class SemanticProvider(Protocol):
    async def score(self, subject: Subject, context: str) -> Mapping[str, Any]: ...

    async def check_connection(self) -> dict[str, Any]: ...
