# ABOUTME: Aggregates question-level correctness into ranked (domain, topic) weaknesses.
# ABOUTME: Groups practice, quiz, and aptitude answers and orders them weakest first.

from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .log import get_logger
from .schemas import APTITUDE, PRACTICE, QUIZ, AttemptRecord, WeakTopicEntry, WeaknessSummary

logger = get_logger(__name__)

CRITICAL_BELOW = 60
MODERATE_BELOW = 75
STRENGTH_FROM = 80

SUBTOPIC_PATTERNS: Sequence[Tuple[str, Sequence[str]]] = (
    ("Ratios", (r"\bratio\b", r"\bproportion\b")),
    ("Percentages", (r"\bpercent", r"%")),
    ("Time & Work", (r"time\s*&?\s*work", r"work\s+rate")),
    ("Permutations", (r"\bpermutation\b", r"\barrang")),
    ("Combinations", (r"\bcombination\b", r"\bchoose\b")),
    ("Probability", (r"\bprobab",)),
    ("Dynamic Programming", (r"\bdp\b", r"dynamic\s+programming")),
    ("Greedy", (r"\bgreedy\b",)),
    ("Graphs", (r"\bgraph\b", r"bfs|dfs")),
    ("Arrays", (r"\barray\b",)),
    ("Strings", (r"\bstring\b",)),
)
_COMPILED = [(name, [re.compile(p) for p in patterns]) for name, patterns in SUBTOPIC_PATTERNS]

_COLUMNS = ["domain", "topic", "accuracy", "sample_count"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""

    return int(math.floor(value + 0.5))


def infer_topic(question_text: Optional[str], fallback: Optional[str] = None) -> str:
    """Guess a question's topic from keywords in its text."""

    text = (question_text or "").lower()
    for name, patterns in _COMPILED:
        if any(p.search(text) for p in patterns):
            return name
    return fallback or "General"


def compute_weak_topics(
    practices: Iterable[AttemptRecord],
    quizzes: Iterable[AttemptRecord],
    aptitudes: Iterable[AttemptRecord],
) -> List[WeakTopicEntry]:
    """
    Rank (domain, topic) pairs by question-level accuracy, weakest first.

    Steps:
    - Flatten every question of every attempt into (domain, topic, correct) rows.
    - Group by (domain, topic) and compute correct/total counts.
    - accuracy = round_half_up(100 * correct / total).
    - Sort by accuracy ascending, sample count descending, then (domain, topic).

    Exam attempts are never passed in; attempts without a question list are skipped.
    """

    rows = []
    for domain, attempts in ((PRACTICE, practices), (QUIZ, quizzes), (APTITUDE, aptitudes)):
        for attempt in attempts:
            if attempt.questions is None:
                logger.debug("attempt_skipped", reason="missing_questions", domain=domain, topic=attempt.topic)
                continue
            for question in attempt.questions:
                rows.append({"domain": domain, "topic": question.topic, "correct": int(question.was_correct)})

    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = (
        df.groupby(["domain", "topic"], sort=True)
        .agg(correct=("correct", "sum"), sample_count=("correct", "count"))
        .reset_index()
    )
    grouped["accuracy"] = [
        round_half_up(100.0 * int(c) / int(n)) for c, n in zip(grouped["correct"], grouped["sample_count"])
    ]
    grouped = grouped.sort_values(
        ["accuracy", "sample_count", "domain", "topic"], ascending=[True, False, True, True], kind="mergesort"
    )

    return [
        WeakTopicEntry(
            domain=str(row.domain),
            topic=str(row.topic),
            accuracy=int(row.accuracy),
            sample_count=int(row.sample_count),
        )
        for row in grouped[_COLUMNS].itertuples(index=False)
    ]


def classify_weaknesses(entries: Iterable[WeakTopicEntry]) -> WeaknessSummary:
    """Bucket topics into critical (<60), moderate (60-74) and strengths (>=80)."""

    critical: List[str] = []
    moderate: List[str] = []
    strengths: List[str] = []
    for entry in entries:
        if entry.accuracy < CRITICAL_BELOW:
            critical.append(entry.label)
        elif entry.accuracy < MODERATE_BELOW:
            moderate.append(entry.label)
        elif entry.accuracy >= STRENGTH_FROM:
            strengths.append(entry.label)
    return WeaknessSummary(critical=critical, moderate=moderate, strengths=strengths)
