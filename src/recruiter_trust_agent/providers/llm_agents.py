"""Semantic provider backed by an openai-agents Agent."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.orchestrator.prompts import ASSESSOR_PROMPT, render_subject_prompt
from recruiter_trust_agent.providers.llm_openai import ProviderConfig, build_model_reference
from recruiter_trust_agent.providers.semantic import SemanticJudgement

logger = logging.getLogger(__name__)


def _token_usage(run: Any) -> dict[str, int]:
    usage = getattr(getattr(run, "context_wrapper", None), "usage", None)
    if usage is None:
        return {}
    return {
        "prompt_tokens": int(getattr(usage, "input_tokens", 0) or 0),
        "completion_tokens": int(getattr(usage, "output_tokens", 0) or 0),
        "total_tokens": int(getattr(usage, "total_tokens", 0) or 0),
    }


class AgentsSemanticProvider:
    """Runs one assessor agent turn per subject and returns the raw judgement mapping.

    The payload is returned as-is; range and enum checks happen in the
    assessor adapter so a malformed model answer degrades instead of raising here.
    """

    def __init__(
        self,
        *,
        provider: str,
        model: str,
        temperature: float = 0.3,
        api_base: str | None = None,
        api_key: str | None = None,
        max_turns: int = 2,
    ) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.api_base = api_base
        self.api_key = api_key
        self.max_turns = max_turns

    def _build_common_kwargs(self) -> dict[str, object]:
        from agents import ModelSettings

        model_ref = build_model_reference(
            ProviderConfig(
                provider=self.provider,
                model=self.model,
                api_base=self.api_base,
                api_key=self.api_key,
            )
        )
        return {
            "model": model_ref,
            "model_settings": ModelSettings(temperature=self.temperature),
        }

    async def score(self, subject: Subject, context: str) -> Mapping[str, Any]:
        from agents import Agent, AgentOutputSchema, Runner

        agent = Agent(
            name="recruiter-trust-assessor-agent",
            instructions=ASSESSOR_PROMPT,
            output_type=AgentOutputSchema(SemanticJudgement, strict_json_schema=False),
            **self._build_common_kwargs(),
        )
        run = await Runner.run(agent, render_subject_prompt(subject, context), max_turns=self.max_turns)
        output = getattr(run, "final_output", None)
        if isinstance(output, SemanticJudgement):
            payload: dict[str, Any] = output.model_dump(mode="json")
        elif isinstance(output, Mapping):
            payload = dict(output)
        else:
            raise TypeError(f"Assessor agent returned {type(output).__name__}, expected a judgement object")
        payload["model"] = self.model
        payload["token_usage"] = _token_usage(run)
        logger.debug("Assessor agent finished model=%s usage=%s", self.model, payload["token_usage"])
        return payload

    async def check_connection(self) -> dict[str, Any]:
        """One plain-text agent turn; raises when the model endpoint is unreachable."""

        from agents import Agent, Runner

        agent = Agent(
            name="recruiter-trust-connection-check",
            instructions="Reply with the single word OK.",
            **self._build_common_kwargs(),
        )
        run = await Runner.run(agent, "ping", max_turns=1)
        reply = str(getattr(run, "final_output", "") or "").strip()
        return {
            "status": "success" if reply else "error",
            "message": "Connected successfully" if reply else "Empty reply from model",
            "model": self.model,
        }
