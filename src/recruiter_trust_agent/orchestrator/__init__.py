"""Decision orchestration layer.

Exports are loaded lazily to avoid import-time cycles between orchestrator and
provider modules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from recruiter_trust_agent.orchestrator.batch import BatchCoordinator
    from recruiter_trust_agent.orchestrator.build import build_engine
    from recruiter_trust_agent.orchestrator.pipeline import DecisionEngine
    from recruiter_trust_agent.orchestrator.semantic import SemanticAssessor
    from recruiter_trust_agent.orchestrator.validator import SemanticPayloadValidator, ValidationIssue
    from recruiter_trust_agent.orchestrator.verification import ExternalVerificationAggregator

__all__ = [
    "build_engine",
    "BatchCoordinator",
    "DecisionEngine",
    "ExternalVerificationAggregator",
    "SemanticAssessor",
    "SemanticPayloadValidator",
    "ValidationIssue",
]


def __getattr__(name: str) -> Any:
    if name == "build_engine":
        from recruiter_trust_agent.orchestrator.build import build_engine

        return build_engine
    if name == "BatchCoordinator":
        from recruiter_trust_agent.orchestrator.batch import BatchCoordinator

        return BatchCoordinator
    if name == "DecisionEngine":
        from recruiter_trust_agent.orchestrator.pipeline import DecisionEngine

        return DecisionEngine
    if name == "ExternalVerificationAggregator":
        from recruiter_trust_agent.orchestrator.verification import ExternalVerificationAggregator

        return ExternalVerificationAggregator
    if name == "SemanticAssessor":
        from recruiter_trust_agent.orchestrator.semantic import SemanticAssessor

        return SemanticAssessor
    if name in {"SemanticPayloadValidator", "ValidationIssue"}:
        from recruiter_trust_agent.orchestrator.validator import SemanticPayloadValidator, ValidationIssue

        return {"SemanticPayloadValidator": SemanticPayloadValidator, "ValidationIssue": ValidationIssue}[name]
    raise AttributeError(name)
