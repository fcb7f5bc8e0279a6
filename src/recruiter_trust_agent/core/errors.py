"""Exception types surfaced by the decision engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recruiter_trust_agent.domain.results import BatchResult


class RecruiterTrustError(Exception):
    """Base class for errors raised to callers of the engine."""


class InvalidSubjectError(RecruiterTrustError):
    """Raised when a subject is missing or has no resolvable identity."""

    def __init__(self, subject_id: str, reason: str) -> None:
        super().__init__(f"Invalid subject {subject_id!r}: {reason}")
        self.subject_id = subject_id
        self.reason = reason


class BatchAbortedError(RecruiterTrustError):
    """Raised by a fail-fast batch run on the first per-subject failure."""

    def __init__(self, subject_id: str, cause: BaseException, partial: "BatchResult") -> None:
        super().__init__(f"Batch aborted at subject {subject_id!r}: {cause}")
        self.subject_id = subject_id
        self.cause = cause
        self.partial = partial


def describe_error(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or type(exc).__name__
