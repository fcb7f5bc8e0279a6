"""Wiring: builds a ready-to-use decision engine from the loaded configuration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from recruiter_trust_agent.config.settings import AppConfig, load_config
from recruiter_trust_agent.core.security import SecurityPolicy
from recruiter_trust_agent.infra.cache import TTLCache
from recruiter_trust_agent.infra.store import DecisionStore, InMemoryDecisionStore, SubjectRepository
from recruiter_trust_agent.orchestrator.batch import BatchCoordinator
from recruiter_trust_agent.orchestrator.pipeline import DecisionEngine
from recruiter_trust_agent.orchestrator.semantic import SemanticAssessor
from recruiter_trust_agent.orchestrator.verification import ExternalVerificationAggregator
from recruiter_trust_agent.providers.llm_agents import AgentsSemanticProvider
from recruiter_trust_agent.providers.semantic import SemanticProvider
from recruiter_trust_agent.providers.verification import (
    CompanyVerificationProvider,
    DnsResolver,
    DomainVerificationProvider,
    EmailVerificationProvider,
    PhoneVerificationProvider,
    VerificationProvider,
)

_UNSET: Any = object()


def build_verification_providers(
    cfg: AppConfig,
    client: httpx.AsyncClient,
    *,
    resolver: DnsResolver | None = None,
) -> list[VerificationProvider]:
    dns = resolver or DnsResolver(TTLCache(ttl_s=300.0))
    policy = SecurityPolicy(
        scrape_timeout_s=cfg.scrape_timeout_s,
        max_response_bytes=cfg.scrape_max_bytes,
        max_redirects=cfg.scrape_max_redirects,
        allow_private_network=cfg.allow_private_network,
        user_agent=cfg.user_agent,
    )
    return [
        EmailVerificationProvider(client, dns, api_key=cfg.hunter_api_key, base_url=cfg.hunter_base_url),
        PhoneVerificationProvider(client, api_key=cfg.numverify_api_key, base_url=cfg.numverify_base_url),
        CompanyVerificationProvider(
            client,
            dns,
            api_key=cfg.clearbit_api_key,
            base_url=cfg.clearbit_base_url,
            policy=policy,
        ),
        DomainVerificationProvider(dns),
    ]


def build_semantic_provider(cfg: AppConfig, *, model_override: str | None = None) -> SemanticProvider | None:
    if cfg.provider == "none":
        return None
    return AgentsSemanticProvider(
        provider=cfg.provider,
        model=model_override or cfg.model,
        temperature=cfg.temperature,
        api_base=cfg.api_base,
        api_key=cfg.api_key,
        max_turns=cfg.max_turns,
    )


def build_engine(
    repository: SubjectRepository,
    *,
    config: AppConfig | None = None,
    store: DecisionStore | None = _UNSET,
    semantic_provider: SemanticProvider | None = _UNSET,
    verification_providers: Sequence[VerificationProvider] | None = None,
    client: httpx.AsyncClient | None = None,
    model_override: str | None = None,
) -> DecisionEngine:
    """Assemble a ``DecisionEngine``.

    Anything not passed explicitly is built from ``config`` (loaded from the
    packaged defaults and environment when omitted). The engine owns the HTTP
    client and closes it in ``aclose``.
    """

    cfg = config or load_config()[0]
    http_client = client or httpx.AsyncClient(
        timeout=httpx.Timeout(cfg.verification_timeout_s),
        headers={"User-Agent": cfg.user_agent},
    )
    providers = (
        list(verification_providers)
        if verification_providers is not None
        else build_verification_providers(cfg, http_client)
    )
    if semantic_provider is _UNSET:
        semantic_provider = build_semantic_provider(cfg, model_override=model_override)
    if store is _UNSET:
        store = InMemoryDecisionStore()
    return DecisionEngine(
        repository=repository,
        aggregator=ExternalVerificationAggregator(providers, timeout_s=cfg.verification_timeout_s),
        assessor=SemanticAssessor(
            semantic_provider,
            timeout_s=cfg.semantic_timeout_s,
            max_reasoning_chars=cfg.max_reasoning_chars,
        ),
        configuration=cfg.scoring(),
        store=store,
        client=http_client,
    )


def build_batch(engine: DecisionEngine, *, config: AppConfig | None = None) -> BatchCoordinator:
    concurrency = config.batch_concurrency if config is not None else 3
    return BatchCoordinator(engine, default_concurrency=concurrency)


def runtime_summary(cfg: AppConfig, yaml_cfg: dict[str, Any]) -> dict[str, Any]:
    profiles = yaml_cfg.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}
    scoring = cfg.scoring()
    return {
        "profile": cfg.profile,
        "profile_choices": [str(item) for item in profile_map.keys() if str(item).strip()],
        "provider": cfg.provider,
        "model": cfg.model,
        "temperature": cfg.temperature,
        "api_base": cfg.api_base,
        "scoring": scoring.model_dump(mode="json"),
        "weight_warnings": scoring.weight_warnings(),
        "verification_timeout_s": cfg.verification_timeout_s,
        "semantic_timeout_s": cfg.semantic_timeout_s,
        "batch_concurrency": cfg.batch_concurrency,
        "providers_configured": {
            "hunter": bool(cfg.hunter_api_key),
            "numverify": bool(cfg.numverify_api_key),
            "clearbit": bool(cfg.clearbit_api_key),
        },
        "config_path": cfg.default_config_path,
    }
