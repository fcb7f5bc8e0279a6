"""Chunked, bounded-concurrency batch scoring over many subject ids."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
from typing import Protocol

from recruiter_trust_agent.core.errors import BatchAbortedError, describe_error
from recruiter_trust_agent.domain.results import BatchItem, BatchResult, DecisionRecord

logger = logging.getLogger(__name__)


class SubjectDecider(Protocol):
    async def decide(self, subject_id: str) -> DecisionRecord: ...


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    step = max(1, int(size))
    return [list(items[index : index + step]) for index in range(0, len(items), step)]


class BatchCoordinator:
    def __init__(self, engine: SubjectDecider, *, default_concurrency: int = 3) -> None:
        self._engine = engine
        self._default_concurrency = max(1, int(default_concurrency))

    async def _decide_item(self, subject_id: str) -> BatchItem:
        record = await self._engine.decide(subject_id)
        return BatchItem(subject_id=subject_id, success=True, record=record)

    async def _run_tolerant(self, chunk: list[str]) -> list[BatchItem]:
        outcomes = await asyncio.gather(*(self._decide_item(subject_id) for subject_id in chunk), return_exceptions=True)
        items: list[BatchItem] = []
        for subject_id, outcome in zip(chunk, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.error("Batch scoring failed for subject %s: %s", subject_id, describe_error(outcome))
                items.append(BatchItem(subject_id=subject_id, success=False, error=describe_error(outcome)))
            else:
                items.append(outcome)
        return items

    async def _run_fail_fast(self, chunk: list[str], done: list[BatchItem]) -> list[BatchItem]:
        tasks = {asyncio.create_task(self._decide_item(subject_id)): subject_id for subject_id in chunk}
        finished: dict[str, BatchItem] = {}
        try:
            pending = set(tasks)
            while pending:
                completed, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
                failures = [task for task in completed if task.exception() is not None]
                for task in completed:
                    if task.exception() is None:
                        finished[tasks[task]] = task.result()
                if failures:
                    failed = min(failures, key=lambda task: chunk.index(tasks[task]))
                    subject_id = tasks[failed]
                    exc = failed.exception()
                    logger.error("Batch aborted at subject %s: %s", subject_id, describe_error(exc))
                    partial_items = done + [finished[sid] for sid in chunk if sid in finished]
                    partial_items.append(BatchItem(subject_id=subject_id, success=False, error=describe_error(exc)))
                    raise BatchAbortedError(subject_id, exc, BatchResult.from_items(partial_items))
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        return [finished[subject_id] for subject_id in chunk]

    async def decide_many(
        self,
        subject_ids: Sequence[str],
        concurrency_limit: int | None = None,
        continue_on_error: bool = True,
    ) -> BatchResult:
        """Score every id once; chunks run one after another, ids inside a chunk concurrently.

        With ``continue_on_error`` a failing subject becomes a failed item.
        Otherwise the first failure cancels the rest of its chunk and raises
        ``BatchAbortedError`` carrying the partial result.
        """

        unique_ids = list(dict.fromkeys(str(item) for item in subject_ids))
        limit = max(1, int(concurrency_limit if concurrency_limit is not None else self._default_concurrency))
        logger.info(
            "Batch scoring started total=%d concurrency=%d continue_on_error=%s",
            len(unique_ids),
            limit,
            continue_on_error,
        )

        items: list[BatchItem] = []
        for chunk in chunked(unique_ids, limit):
            if continue_on_error:
                items.extend(await self._run_tolerant(chunk))
            else:
                items.extend(await self._run_fail_fast(chunk, items))

        result = BatchResult.from_items(items)
        logger.info(
            "Batch scoring completed total=%d successful=%d failed=%d",
            result.total,
            result.successful,
            result.failed,
        )
        return result
