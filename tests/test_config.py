import logging

from recruiter_trust_agent.config.scoring import ScoringConfiguration, ScoringWeights
from recruiter_trust_agent.config.settings import load_config

_ENV_NAMES = (
    "RECRUITER_TRUST_PROFILE",
    "RECRUITER_TRUST_MODEL",
    "RECRUITER_TRUST_PROVIDER",
    "RECRUITER_TRUST_RULE_BASED_WEIGHT",
    "RECRUITER_TRUST_SEMANTIC_WEIGHT",
    "RECRUITER_TRUST_EXTERNAL_WEIGHT",
    "RECRUITER_TRUST_VERIFICATION_TIMEOUT_S",
    "RECRUITER_TRUST_APPROVE_SCORE",
    "RECRUITER_TRUST_DEFAULT_CONFIG_PATH",
    "RULE_BASED_WEIGHT",
    "LLM_WEIGHT",
    "EXTERNAL_API_WEIGHT",
    "SPAM_THRESHOLD",
    "HUNTER_API_KEY",
)


def _clear_env(monkeypatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults(monkeypatch):
    _clear_env(monkeypatch)
    cfg, raw = load_config()
    assert cfg.profile == "openai"
    assert cfg.provider == "openai"
    assert isinstance(raw, dict)
    scoring = cfg.scoring()
    assert scoring == ScoringConfiguration()
    assert scoring.weights.sums_to_one()
    assert cfg.verification_timeout_s == 10.0
    assert cfg.semantic_timeout_s == 30.0
    assert cfg.batch_concurrency == 3


def test_load_config_profile_override(monkeypatch):
    _clear_env(monkeypatch)
    cfg, _ = load_config(profile_override="ollama")
    assert cfg.profile == "ollama"
    assert cfg.provider == "local"
    assert cfg.api_base == "http://localhost:11434"


def test_env_overrides_weights_and_aliases(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("RECRUITER_TRUST_RULE_BASED_WEIGHT", "0.2")
    monkeypatch.setenv("LLM_WEIGHT", "0.5")
    monkeypatch.setenv("HUNTER_API_KEY", "hunter-key")
    cfg, _ = load_config()
    assert cfg.rule_based_weight == 0.2
    assert cfg.semantic_weight == 0.5
    assert cfg.hunter_api_key == "hunter-key"


def test_invalid_numeric_env_falls_back_to_default(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("RECRUITER_TRUST_VERIFICATION_TIMEOUT_S", "soon")
    monkeypatch.setenv("RECRUITER_TRUST_APPROVE_SCORE", "250")
    monkeypatch.setenv("RECRUITER_TRUST_EXTERNAL_WEIGHT", "1.7")
    cfg, _ = load_config()
    assert cfg.verification_timeout_s == 10.0
    assert cfg.approve_score == 70
    assert cfg.external_weight == 0.3


def test_unbalanced_weights_log_a_warning(monkeypatch, caplog):
    _clear_env(monkeypatch)
    monkeypatch.setenv("RECRUITER_TRUST_SEMANTIC_WEIGHT", "0.9")
    with caplog.at_level(logging.WARNING, logger="recruiter_trust_agent.config.settings"):
        cfg, _ = load_config()
    assert cfg.scoring().weight_warnings()
    assert any("do not sum to 1.0" in record.getMessage() for record in caplog.records)


def test_yaml_file_is_used_when_given(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    path = tmp_path / "custom.yaml"
    path.write_text("profile: none\nflag_score: 35\nprofiles:\n  none:\n    provider: none\n", encoding="utf-8")
    cfg, raw = load_config(path)
    assert cfg.provider == "none"
    assert cfg.flag_score == 35
    assert raw["flag_score"] == 35


def test_weight_tolerance():
    assert ScoringWeights(rule_based=0.3, semantic=0.405, external=0.3).sums_to_one()
    assert not ScoringWeights(rule_based=0.3, semantic=0.42, external=0.3).sums_to_one()
