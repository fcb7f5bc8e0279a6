"""CLI entrypoint for recruiter_trust_agent."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from recruiter_trust_agent.config.settings import AppConfig, load_config
from recruiter_trust_agent.core.errors import BatchAbortedError, InvalidSubjectError
from recruiter_trust_agent.core.logging_config import configure_logging, log_duration
from recruiter_trust_agent.infra.store import InMemorySubjectRepository, load_subjects
from recruiter_trust_agent.orchestrator.build import build_batch, build_engine, runtime_summary

logger = logging.getLogger(__name__)


def _dump(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=True))


def _engine_for(args: argparse.Namespace, cfg: AppConfig):  # type: ignore[no-untyped-def]
    repository = InMemorySubjectRepository(load_subjects(args.subjects))
    kwargs: dict[str, Any] = {"config": cfg, "model_override": args.model}
    if args.no_semantic:
        kwargs["semantic_provider"] = None
    return repository, build_engine(repository, **kwargs)


async def _score(args: argparse.Namespace, cfg: AppConfig) -> int:
    repository, engine = _engine_for(args, cfg)
    subject_id = args.id or (repository.ids()[0] if len(repository) else "")
    async with engine:
        try:
            with log_duration(logger, f"score {subject_id}"):
                record = await engine.decide(subject_id)
        except InvalidSubjectError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
    _dump(record.model_dump(mode="json"))
    return 0


async def _batch(args: argparse.Namespace, cfg: AppConfig) -> int:
    repository, engine = _engine_for(args, cfg)
    subject_ids = args.ids or repository.ids()
    async with engine:
        coordinator = build_batch(engine, config=cfg)
        try:
            with log_duration(logger, f"batch of {len(subject_ids)}"):
                result = await coordinator.decide_many(
                    subject_ids,
                    concurrency_limit=args.concurrency,
                    continue_on_error=not args.fail_fast,
                )
        except BatchAbortedError as exc:
            print(f"error: {exc}", file=sys.stderr)
            _dump(exc.partial.model_dump(mode="json"))
            return 1
        payload = result.model_dump(mode="json")
        if engine.store is not None:
            payload["stats"] = await engine.store.stats()
    _dump(payload)
    return 0 if result.failed == 0 else 1


async def _check_connections(cfg: AppConfig) -> int:
    engine = build_engine(InMemorySubjectRepository(), config=cfg)
    async with engine:
        statuses = await engine.check_connections()
    _dump(statuses)
    return 0 if all(item.get("status") != "error" for item in statuses.values()) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recruiter-trust")
    parser.add_argument("--profile", help="Config profile to use, e.g. openai or ollama.")
    parser.add_argument("--config", help="Path to a YAML config file overriding the packaged defaults.")
    parser.add_argument("--log-level", help="Override the configured log level.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_subject_args(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("subjects", help="YAML or JSON file with recruiter profiles.")
        cmd.add_argument("--model", help="Override model for this run, e.g. ollama/qwen2.5:7b.")
        cmd.add_argument("--no-semantic", action="store_true", help="Skip the LLM assessor (scores 50, confidence 0).")

    score = sub.add_parser("score", help="Score one subject.")
    add_subject_args(score)
    score.add_argument("--id", help="Subject id; defaults to the first subject in the file.")

    batch = sub.add_parser("batch", help="Score many subjects.")
    add_subject_args(batch)
    batch.add_argument("--ids", nargs="+", help="Subject ids; defaults to every subject in the file.")
    batch.add_argument("--concurrency", type=int, help="Subjects scored concurrently per chunk.")
    batch.add_argument("--fail-fast", action="store_true", help="Abort on the first failing subject.")

    sub.add_parser("config", help="Print the active scoring configuration.")
    sub.add_parser("check-connections", help="Check the configured LLM and every verification API.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg, yaml_cfg = load_config(args.config, profile_override=args.profile)
    configure_logging(args.log_level or cfg.log_level)

    if args.command == "config":
        _dump(runtime_summary(cfg, yaml_cfg))
        return 0
    if args.command == "check-connections":
        return asyncio.run(_check_connections(cfg))
    if args.command == "score":
        return asyncio.run(_score(args, cfg))
    return asyncio.run(_batch(args, cfg))
