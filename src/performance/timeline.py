# ABOUTME: Turns exam attempts into a chronologically ordered score timeline.
# ABOUTME: Positions are re-indexed 1..N on every call; equal timestamps keep input order.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List

import pandas as pd

from .log import get_logger
from .schemas import AttemptRecord, TimelinePoint

logger = get_logger(__name__)


def build_timeline(exams: Iterable[AttemptRecord]) -> List[TimelinePoint]:
    """
    Order exam scores by submission time and index them 1..N.

    Exams missing a score or a total carry no usable evidence and are dropped
    before indexing so positions stay dense.
    """

    rows = []
    for attempt in exams:
        if attempt.score is None or attempt.total is None:
            logger.debug("attempt_skipped", reason="missing_score_or_total", domain=attempt.domain, topic=attempt.topic)
            continue
        rows.append({"submitted_at": _as_utc(attempt.submitted_at), "score": float(attempt.score)})

    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["submitted_at"] = pd.to_datetime(df["submitted_at"], utc=True)
    # mergesort is stable: ties on submitted_at stay in input order.
    df = df.sort_values("submitted_at", kind="mergesort").reset_index(drop=True)
    df["t"] = df.index + 1

    return [TimelinePoint(t=int(row.t), score=float(row.score)) for row in df.itertuples(index=False)]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
