# ABOUTME: Gathers one student's attempt history from the four attempt stores concurrently.
# ABOUTME: Coerces raw store rows into AttemptRecords and fails the whole load on any store error.

from __future__ import annotations

import asyncio
import inspect
import json
import numbers
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

import numpy as np
import pandas as pd

from .errors import InternalLoadError
from .log import get_logger
from .schemas import APTITUDE, DOMAINS, EXAM, PRACTICE, QUIZ, AttemptBundle, AttemptRecord, QuestionResult
from .weak_topics import infer_topic

logger = get_logger(__name__)

RawAttempt = Union[AttemptRecord, Mapping[str, Any]]


class AttemptStore(Protocol):
    """Read-only access to one domain's attempts.

    ``find_attempts_by_user`` may be a coroutine function or a plain function;
    plain functions are run in a worker thread so fetches still overlap.
    """

    def find_attempts_by_user(self, user_id: str) -> Sequence[RawAttempt]:
        ...


@dataclass(frozen=True)
class AttemptStores:
    exam: AttemptStore
    practice: AttemptStore
    quiz: AttemptStore
    aptitude: AttemptStore

    def items(self):
        return [(EXAM, self.exam), (PRACTICE, self.practice), (QUIZ, self.quiz), (APTITUDE, self.aptitude)]


class InMemoryAttemptStore:
    """Store backed by a ``{user_id: [attempts]}`` mapping."""

    def __init__(self, attempts_by_user: Optional[Mapping[str, Sequence[RawAttempt]]] = None):
        self._attempts = {k: list(v) for k, v in (attempts_by_user or {}).items()}

    async def find_attempts_by_user(self, user_id: str) -> List[RawAttempt]:
        return list(self._attempts.get(user_id, []))


class JsonAttemptStore:
    """
    Store backed by a JSON export of the form ``{"exam": [...], "practice": [...], ...}``.

    Every row carries a ``userId``. The file is re-read on each call.
    """

    def __init__(self, path: Path, domain: str):
        if domain not in DOMAINS:
            raise ValueError(f"Unsupported domain '{domain}'. Expected one of: {', '.join(DOMAINS)}.")
        self.path = Path(path)
        self.domain = domain

    def find_attempts_by_user(self, user_id: str) -> List[Mapping[str, Any]]:
        with open(self.path, encoding="utf-8") as f:
            export = json.load(f)
        rows = export.get(self.domain, []) if isinstance(export, Mapping) else None
        if not isinstance(rows, list):
            raise ValueError(f"Section '{self.domain}' in {self.path} must be a list of attempts.")
        for row in rows:
            if not isinstance(row, Mapping):
                raise ValueError(f"Section '{self.domain}' in {self.path} holds a non-object row: {row!r}.")
        return [row for row in rows if str(row.get("userId")) == str(user_id)]


def json_stores(path: Path) -> AttemptStores:
    return AttemptStores(
        exam=JsonAttemptStore(path, EXAM),
        practice=JsonAttemptStore(path, PRACTICE),
        quiz=JsonAttemptStore(path, QUIZ),
        aptitude=JsonAttemptStore(path, APTITUDE),
    )


async def load_all_attempts(user_id: str, stores: AttemptStores) -> AttemptBundle:
    """
    Fetch the four attempt categories for ``user_id`` concurrently.

    Raises InternalLoadError as soon as any fetch or row conversion fails;
    the remaining fetches are cancelled and no partial bundle is returned.
    """

    tasks = [asyncio.ensure_future(_fetch(domain, store, user_id)) for domain, store in stores.items()]
    try:
        exams, practices, quizzes, aptitudes = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    bundle = AttemptBundle(exams=exams, practices=practices, quizzes=quizzes, aptitudes=aptitudes)
    logger.info("attempts_loaded", user_id=user_id, **bundle.counts())
    return bundle


def load_all_attempts_sync(user_id: str, stores: AttemptStores) -> AttemptBundle:
    return asyncio.run(load_all_attempts(user_id, stores))


async def _fetch(domain: str, store: AttemptStore, user_id: str) -> List[AttemptRecord]:
    try:
        if inspect.iscoroutinefunction(store.find_attempts_by_user):
            raw = await store.find_attempts_by_user(user_id)
        else:
            raw = await asyncio.to_thread(store.find_attempts_by_user, user_id)
        return [coerce_attempt(row, domain) for row in (raw or [])]
    except Exception as exc:
        logger.error("attempt_load_failed", user_id=user_id, domain=domain, error=str(exc))
        raise InternalLoadError(f"Failed to load {domain} attempts: {exc}", domain=domain) from exc


def coerce_attempt(raw: RawAttempt, domain: str) -> AttemptRecord:
    """
    Convert a store row into an AttemptRecord for ``domain``.

    Missing ``questions``, ``score`` or ``total`` are kept as None; rows that
    cannot be interpreted at all raise ValueError.
    """

    if isinstance(raw, AttemptRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected a mapping for a {domain} attempt, got {type(raw).__name__}.")

    topic = _first(raw, "topic")
    topic = str(topic) if topic not in (None, "") else "General"

    return AttemptRecord(
        domain=domain,
        topic=topic,
        submitted_at=_parse_timestamp(_first(raw, "submittedAt", "submitted_at", "createdAt", "created_at")),
        questions=_parse_questions(raw, topic),
        score=_parse_number(_first(raw, "score"), "score"),
        total=_parse_number(_first(raw, "total", "totalQuestions", "total_questions"), "total"),
    )


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        raise ValueError("Attempt has no submission timestamp.")
    if isinstance(value, (bool, np.bool_)):
        raise ValueError(f"Invalid submission timestamp {value!r}.")
    if isinstance(value, numbers.Real):
        ts = pd.to_datetime(value, unit="s", utc=True)
    else:
        ts = pd.to_datetime(value, utc=True)
    if pd.isna(ts):
        raise ValueError(f"Invalid submission timestamp {value!r}.")
    return ts.to_pydatetime()


def _parse_number(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (numbers.Real, Decimal)):
        raise ValueError(f"Attempt {name} must be numeric, got {value!r}.")
    return float(value)


def _parse_questions(raw: Mapping[str, Any], attempt_topic: str):
    questions = _first(raw, "questions")
    from_answers = False
    if questions is None:
        questions = _first(raw, "answers")
        from_answers = True
    if questions is None:
        return None
    if not isinstance(questions, list):
        raise ValueError("Attempt questions must be a list.")

    parsed = []
    for q in questions:
        if not isinstance(q, Mapping):
            raise ValueError(f"Expected a mapping for a question, got {type(q).__name__}.")
        parsed.append(
            QuestionResult(
                was_correct=_question_correct(q, from_answers),
                topic=_question_topic(q, attempt_topic),
            )
        )
    return tuple(parsed)


def _question_correct(q: Mapping[str, Any], from_answers: bool) -> bool:
    value = _first(q, "wasCorrect", "was_correct")
    if value is not None:
        if not isinstance(value, (bool, np.bool_)):
            raise ValueError(f"Question correctness flag must be a boolean, got {value!r}.")
        return bool(value)
    if from_answers:
        selected = q.get("selectedIndex")
        correct = q.get("correctIndex")
        return selected is not None and correct is not None and selected == correct
    raise ValueError("Question has no correctness flag.")


def _question_topic(q: Mapping[str, Any], attempt_topic: str) -> str:
    topic = _first(q, "topic", "subtopic")
    if topic not in (None, ""):
        return str(topic)
    text = _first(q, "question", "questionText", "text")
    return infer_topic(text, fallback=attempt_topic)

