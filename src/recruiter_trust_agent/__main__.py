"""Run ``python -m recruiter_trust_agent``."""

from __future__ import annotations

from recruiter_trust_agent.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
