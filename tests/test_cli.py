import json

from recruiter_trust_agent.cli import main

_KEY_ENV = (
    "HUNTER_API_KEY",
    "NUMVERIFY_API_KEY",
    "CLEARBIT_API_KEY",
    "RECRUITER_TRUST_HUNTER_API_KEY",
    "RECRUITER_TRUST_NUMVERIFY_API_KEY",
    "RECRUITER_TRUST_CLEARBIT_API_KEY",
    "RECRUITER_TRUST_PROFILE",
    "RECRUITER_TRUST_PROVIDER",
)


def _offline(monkeypatch) -> None:
    for name in _KEY_ENV:
        monkeypatch.delenv(name, raising=False)


def _subjects_file(tmp_path):
    path = tmp_path / "subjects.json"
    path.write_text(
        json.dumps([{"id": "s1", "fullName": "Sam Test", "companyName": "Nothing Ltd", "businessEmail": "nobody"}]),
        encoding="utf-8",
    )
    return path


def test_config_command_prints_scoring(monkeypatch, capsys):
    _offline(monkeypatch)
    assert main(["config"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["profile"] == "openai"
    assert payload["scoring"]["weights"] == {"rule_based": 0.3, "semantic": 0.4, "external": 0.3}
    assert payload["providers_configured"] == {"hunter": False, "numverify": False, "clearbit": False}


def test_score_command_without_semantic(monkeypatch, capsys, tmp_path):
    _offline(monkeypatch)
    assert main(["--log-level", "WARNING", "score", str(_subjects_file(tmp_path)), "--no-semantic"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["subject_id"] == "s1"
    assert payload["decision"] == "pending_review"
    semantic = next(item for item in payload["partial_results"] if item["source"] == "semantic")
    assert semantic["confidence"] == 0


def test_score_command_unknown_id(monkeypatch, capsys, tmp_path):
    _offline(monkeypatch)
    assert main(["score", str(_subjects_file(tmp_path)), "--id", "nope", "--no-semantic"]) == 2
    assert "not found" in capsys.readouterr().err


def test_check_connections_without_keys(monkeypatch, capsys):
    _offline(monkeypatch)
    monkeypatch.setenv("RECRUITER_TRUST_PROVIDER", "none")
    assert main(["check-connections"]) == 0
    statuses = json.loads(capsys.readouterr().out)
    assert set(statuses) == {"email", "phone", "company", "domain", "semantic"}
    assert all(item["status"] == "not_configured" for item in statuses.values())
