"""Subject read interface, decision persistence interface and in-memory implementations."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import yaml

from recruiter_trust_agent.domain.results import DecisionRecord
from recruiter_trust_agent.domain.subject import Subject


class SubjectRepository(Protocol):
    async def get(self, subject_id: str) -> Subject | None: ...


class DecisionStore(Protocol):
    async def save(self, record: DecisionRecord) -> None: ...

    async def update_subject_status(self, subject_id: str, status: str, score: int) -> None: ...

    async def stats(self) -> dict[str, Any]: ...


class InMemorySubjectRepository:
    def __init__(self, subjects: Iterable[Subject] = ()) -> None:
        self._subjects: dict[str, Subject] = {}
        for subject in subjects:
            self.add(subject)

    def add(self, subject: Subject) -> None:
        self._subjects[subject.id] = subject

    def ids(self) -> list[str]:
        return list(self._subjects)

    def __len__(self) -> int:
        return len(self._subjects)

    async def get(self, subject_id: str) -> Subject | None:
        return self._subjects.get(subject_id)


class InMemoryDecisionStore:
    """Keeps every saved record and the latest status per subject."""

    def __init__(self) -> None:
        self.records: list[DecisionRecord] = []
        self.subject_status: dict[str, dict[str, Any]] = {}

    async def save(self, record: DecisionRecord) -> None:
        self.records.append(record)

    async def update_subject_status(self, subject_id: str, status: str, score: int) -> None:
        self.subject_status[subject_id] = {"status": status, "score": score}

    def latest(self, subject_id: str) -> DecisionRecord | None:
        for record in reversed(self.records):
            if record.subject_id == subject_id:
                return record
        return None

    async def stats(self) -> dict[str, Any]:
        total = len(self.records)
        decisions = Counter(record.decision for record in self.records)
        statuses = Counter(entry["status"] for entry in self.subject_status.values())
        if total:
            average_score = round(sum(record.final_score for record in self.records) / total, 2)
            average_confidence = round(sum(record.confidence for record in self.records) / total, 2)
            average_ms = round(sum(record.processing_metrics.total_ms for record in self.records) / total, 2)
        else:
            average_score = average_confidence = average_ms = 0.0
        return {
            "total_decisions": total,
            "decisions": {key: decisions.get(key, 0) for key in ("approve", "flag", "pending_review")},
            "subject_statuses": {key: statuses.get(key, 0) for key in ("approved", "flagged", "pending")},
            "average_score": average_score,
            "average_confidence": average_confidence,
            "average_processing_ms": average_ms,
            "degraded_decisions": sum(1 for record in self.records if record.processing_metrics.errors),
        }


def load_subjects(path: str | Path) -> list[Subject]:
    """Read subjects from a YAML or JSON file holding a list or a ``subjects`` list."""

    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("subjects", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of subjects")
    subjects: list[Subject] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: subject #{index} is not a mapping")
        subject = Subject.model_validate(item)
        if not subject.id:
            subject = subject.model_copy(update={"id": f"subject-{index + 1}"})
        subjects.append(subject)
    return subjects
