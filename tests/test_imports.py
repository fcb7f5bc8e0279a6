from __future__ import annotations

import importlib
from pathlib import Path

import recruiter_trust_agent


def _module_names() -> list[str]:
    root = Path(next(iter(recruiter_trust_agent.__path__)))
    names: list[str] = []
    for path in sorted(root.rglob("*.py")):
        if path.name == "__main__.py":
            continue
        parts = path.relative_to(root.parent).with_suffix("").parts
        if parts[-1] == "__init__":
            parts = parts[:-1]
        names.append(".".join(parts))
    return names


def test_every_module_imports():
    failures: list[str] = []
    for name in _module_names():
        try:
            importlib.import_module(name)
        except Exception as exc:  # pragma: no cover - reported below
            failures.append(f"{name}: {exc!r}")
    assert not failures, "\n".join(failures)


def test_orchestrator_exports_are_lazy_but_resolvable():
    from recruiter_trust_agent import orchestrator

    for name in orchestrator.__all__:
        assert getattr(orchestrator, name) is not None
