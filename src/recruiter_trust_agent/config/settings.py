"""Config loader from env + yaml."""

from __future__ import annotations

import logging
from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field

from recruiter_trust_agent.config.scoring import (
    ConfidencePolicy,
    DecisionThresholds,
    ScoringConfiguration,
    ScoringWeights,
)

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "RECRUITER_TRUST_"


class AppConfig(BaseModel):

    profile: str = Field(default="openai")
    provider: str = Field(default="openai")
    model: str = Field(default="gpt-4.1-mini")
    temperature: float = Field(default=0.3)
    api_base: str | None = Field(default=None)
    api_key: str | None = Field(default=None)
    max_turns: int = Field(default=2)
    rule_based_weight: float = Field(default=0.3)
    semantic_weight: float = Field(default=0.4)
    external_weight: float = Field(default=0.3)
    approve_score: int = Field(default=70)
    flag_score: int = Field(default=40)
    approve_confidence_min: int = Field(default=70)
    flag_confidence_min: int = Field(default=60)
    low_confidence_min: int = Field(default=50)
    confidence_medium_stddev: float = Field(default=10.0)
    confidence_high_stddev: float = Field(default=20.0)
    confidence_medium_penalty: int = Field(default=8)
    confidence_high_penalty: int = Field(default=15)
    confidence_agreement_bonus: int = Field(default=10)
    confidence_agreement_high: int = Field(default=70)
    confidence_agreement_low: int = Field(default=40)
    verification_timeout_s: float = Field(default=10.0)
    semantic_timeout_s: float = Field(default=30.0)
    scrape_timeout_s: float = Field(default=5.0)
    scrape_max_redirects: int = Field(default=3)
    scrape_max_bytes: int = Field(default=1_000_000)
    allow_private_network: bool = Field(default=False)
    user_agent: str = Field(default="RecruiterTrustAgent/1.0")
    hunter_api_key: str | None = Field(default=None)
    hunter_base_url: str = Field(default="https://api.hunter.io/v2")
    numverify_api_key: str | None = Field(default=None)
    numverify_base_url: str = Field(default="http://apilayer.net/api")
    clearbit_api_key: str | None = Field(default=None)
    clearbit_base_url: str = Field(default="https://company.clearbit.com/v1")
    max_reasoning_chars: int = Field(default=2000)
    batch_concurrency: int = Field(default=3)
    log_level: str = Field(default="INFO")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))

    def scoring(self) -> ScoringConfiguration:
        return ScoringConfiguration(
            weights=ScoringWeights(
                rule_based=self.rule_based_weight,
                semantic=self.semantic_weight,
                external=self.external_weight,
            ),
            thresholds=DecisionThresholds(
                approve_score=self.approve_score,
                flag_score=self.flag_score,
                approve_confidence_min=self.approve_confidence_min,
                flag_confidence_min=self.flag_confidence_min,
                low_confidence_min=self.low_confidence_min,
            ),
            confidence=ConfidencePolicy(
                medium_stddev=self.confidence_medium_stddev,
                high_stddev=self.confidence_high_stddev,
                medium_penalty=self.confidence_medium_penalty,
                high_penalty=self.confidence_high_penalty,
                agreement_bonus=self.confidence_agreement_bonus,
                agreement_high=self.confidence_agreement_high,
                agreement_low=self.confidence_agreement_low,
            ),
        )


def _normalize_provider(raw: Any) -> str:
    provider = str(raw or "").strip().lower()
    if provider in {"ollama", "local"}:
        return "local"
    if provider in {"none", "disabled", "off"}:
        return "none"
    return provider or "openai"


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_score(raw: Any, fallback: int) -> int:
    try:
        value = int(float(raw))
    except (TypeError, ValueError):
        return fallback
    return value if 0 <= value <= 100 else fallback


def _parse_float(raw: Any, fallback: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return fallback


def _parse_weight(raw: Any, fallback: float) -> float:
    value = _parse_float(raw, fallback)
    return value if 0.0 <= value <= 1.0 else fallback


def _parse_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return fallback
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _parse_optional_str(raw: Any) -> str | None:
    value = str(raw if raw is not None else "").strip()
    return value or None


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(f"{ENV_PREFIX}DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    profiles = merged.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    active_profile = str(profile_override or _pick_env(f"{ENV_PREFIX}PROFILE", merged.get("profile", "openai")))
    selected_profile = profile_map.get(active_profile, {})
    selected = selected_profile if isinstance(selected_profile, dict) else {}
    # An explicitly chosen profile keeps its model/provider and ignores selector env vars.
    use_selector_env = profile_override is None

    def _pick(key: str, fallback: Any, *, selector: bool = False, aliases: tuple[str, ...] = ()) -> Any:
        value = selected.get(key, merged.get(key, fallback))
        for alias in aliases:
            value = _pick_env(alias, value)
        if selector and not use_selector_env:
            return value
        return _pick_env(f"{ENV_PREFIX}{key.upper()}", value)

    payload = {
        "profile": active_profile,
        "provider": _normalize_provider(_pick("provider", "openai", selector=True)),
        "model": _parse_str(_pick("model", "gpt-4.1-mini", selector=True), "gpt-4.1-mini"),
        "temperature": _parse_float(_pick("temperature", 0.3, selector=True), 0.3),
        "api_base": _parse_optional_str(_pick("api_base", None)),
        "api_key": _parse_optional_str(_pick("api_key", None)),
        "max_turns": _parse_int(_pick("max_turns", 2), 2),
        "rule_based_weight": _parse_weight(_pick("rule_based_weight", 0.3, aliases=("RULE_BASED_WEIGHT",)), 0.3),
        "semantic_weight": _parse_weight(_pick("semantic_weight", 0.4, aliases=("LLM_WEIGHT",)), 0.4),
        "external_weight": _parse_weight(_pick("external_weight", 0.3, aliases=("EXTERNAL_API_WEIGHT",)), 0.3),
        "approve_score": _parse_score(_pick("approve_score", 70, aliases=("SPAM_THRESHOLD",)), 70),
        "flag_score": _parse_score(_pick("flag_score", 40), 40),
        "approve_confidence_min": _parse_score(_pick("approve_confidence_min", 70), 70),
        "flag_confidence_min": _parse_score(_pick("flag_confidence_min", 60), 60),
        "low_confidence_min": _parse_score(_pick("low_confidence_min", 50), 50),
        "confidence_medium_stddev": _parse_float(_pick("confidence_medium_stddev", 10.0), 10.0),
        "confidence_high_stddev": _parse_float(_pick("confidence_high_stddev", 20.0), 20.0),
        "confidence_medium_penalty": _parse_score(_pick("confidence_medium_penalty", 8), 8),
        "confidence_high_penalty": _parse_score(_pick("confidence_high_penalty", 15), 15),
        "confidence_agreement_bonus": _parse_score(_pick("confidence_agreement_bonus", 10), 10),
        "confidence_agreement_high": _parse_score(_pick("confidence_agreement_high", 70), 70),
        "confidence_agreement_low": _parse_score(_pick("confidence_agreement_low", 40), 40),
        "verification_timeout_s": _parse_float(_pick("verification_timeout_s", 10.0), 10.0),
        "semantic_timeout_s": _parse_float(_pick("semantic_timeout_s", 30.0), 30.0),
        "scrape_timeout_s": _parse_float(_pick("scrape_timeout_s", 5.0), 5.0),
        "scrape_max_redirects": _parse_int(_pick("scrape_max_redirects", 3), 3),
        "scrape_max_bytes": _parse_int(_pick("scrape_max_bytes", 1_000_000), 1_000_000),
        "allow_private_network": _parse_bool(_pick("allow_private_network", False), False),
        "user_agent": _parse_str(_pick("user_agent", "RecruiterTrustAgent/1.0"), "RecruiterTrustAgent/1.0"),
        "hunter_api_key": _parse_optional_str(_pick("hunter_api_key", None, aliases=("HUNTER_API_KEY",))),
        "hunter_base_url": _parse_str(_pick("hunter_base_url", "https://api.hunter.io/v2"), "https://api.hunter.io/v2"),
        "numverify_api_key": _parse_optional_str(
            _pick("numverify_api_key", None, aliases=("NUMVERIFY_API_KEY",))
        ),
        "numverify_base_url": _parse_str(
            _pick("numverify_base_url", "http://apilayer.net/api"), "http://apilayer.net/api"
        ),
        "clearbit_api_key": _parse_optional_str(_pick("clearbit_api_key", None, aliases=("CLEARBIT_API_KEY",))),
        "clearbit_base_url": _parse_str(
            _pick("clearbit_base_url", "https://company.clearbit.com/v1"), "https://company.clearbit.com/v1"
        ),
        "max_reasoning_chars": _parse_int(_pick("max_reasoning_chars", 2000), 2000),
        "batch_concurrency": _parse_int(_pick("batch_concurrency", 3), 3),
        "log_level": _parse_str(_pick("log_level", "INFO"), "INFO").upper(),
        "default_config_path": str(default_path),
    }

    cfg = AppConfig.model_validate(payload)
    for warning in cfg.scoring().weight_warnings():
        logger.warning(warning)
    return cfg, merged
