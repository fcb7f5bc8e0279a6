"""Model reference builder for the assessor agent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

LOCAL_PROVIDERS = frozenset({"local", "ollama"})


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    api_base: str | None = None
    api_key: str | None = None


def _litellm_model(model: str, *, api_base: str | None, api_key: str | None) -> Any:
    from agents.extensions.models.litellm_model import LitellmModel

    return LitellmModel(model=model, base_url=api_base, api_key=api_key)


def build_model_reference(cfg: ProviderConfig) -> Any:
    """Return something ``agents.Agent(model=...)`` accepts.

    Local models always go through LiteLLM. OpenAI models are passed by name so
    the SDK picks up ``OPENAI_API_KEY`` unless an explicit key or base URL is set.
    """

    provider = (cfg.provider or "openai").strip().lower()
    model = (cfg.model or "").strip()
    if provider in LOCAL_PROVIDERS:
        if "/" not in model:
            model = f"ollama/{model}"
        return _litellm_model(model, api_base=cfg.api_base, api_key=cfg.api_key)
    if cfg.api_base or cfg.api_key:
        if "/" not in model:
            model = f"openai/{model}"
        return _litellm_model(model, api_base=cfg.api_base, api_key=cfg.api_key)
    return model
