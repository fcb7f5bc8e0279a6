"""Timeout-and-degrade wrapper shared by every network-backed source call."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
import time
from typing import Generic, TypeVar

from recruiter_trust_agent.core.errors import describe_error
from recruiter_trust_agent.core.logging_config import elapsed_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GuardedOutcome(Generic[T]):
    value: T | None
    error: str | None
    latency_ms: int
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_guarded(
    label: str,
    call: Callable[[], Awaitable[T]],
    *,
    timeout_s: float | None = None,
) -> GuardedOutcome[T]:
    """Await ``call()`` under an optional timeout, converting failures into an outcome.

    Timeouts and ordinary exceptions are logged and returned as ``error``; the
    caller decides how to degrade. A ``TimeoutError`` raised by the call itself
    is an ordinary failure, not an expired deadline. Cancellation is never
    swallowed.
    """
    started = time.perf_counter()
    scope = asyncio.timeout(timeout_s if timeout_s is not None and timeout_s > 0 else None)
    try:
        async with scope:
            value = await call()
    except Exception as exc:
        if isinstance(exc, TimeoutError) and scope.expired():
            error = f"{label} timed out after {timeout_s:g}s"
            logger.warning(error)
            return GuardedOutcome(value=None, error=error, latency_ms=elapsed_ms(started), timed_out=True)
        error = describe_error(exc)
        logger.warning("%s failed: %s", label, error)
        return GuardedOutcome(value=None, error=error, latency_ms=elapsed_ms(started))
    return GuardedOutcome(value=value, error=None, latency_ms=elapsed_ms(started))
