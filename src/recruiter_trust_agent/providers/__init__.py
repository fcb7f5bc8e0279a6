"""Model and verification provider adapters."""

from recruiter_trust_agent.providers.llm_agents import AgentsSemanticProvider
from recruiter_trust_agent.providers.llm_openai import ProviderConfig, build_model_reference
from recruiter_trust_agent.providers.semantic import SemanticJudgement, SemanticProvider

__all__ = [
    "AgentsSemanticProvider",
    "ProviderConfig",
    "SemanticJudgement",
    "SemanticProvider",
    "build_model_reference",
]
