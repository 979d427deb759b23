# ABOUTME: Fits a linear trend over the exam timeline and derives pass likelihood.
# ABOUTME: Also summarizes direction, consistency, and speed of a learner's progress.

from __future__ import annotations

from typing import Sequence

import numpy as np

from .config import TrendConfig
from .schemas import LearningPattern, TimelinePoint, TrendModel
from .weak_topics import round_half_up

IMPROVING = "improving"
STABLE = "stable"
DECLINING = "declining"

RECENT_WINDOW = 3
DIRECTION_THRESHOLD = 2.0


def fit_trend(points: Sequence[TimelinePoint]) -> TrendModel:
    """
    Ordinary least-squares fit of score against position.

    No points gives a flat zero model and a single point a flat line at that
    score; neither is an error.
    """

    n = len(points)
    if n == 0:
        return TrendModel(slope=0.0, intercept=0.0)
    if n == 1:
        return TrendModel(slope=0.0, intercept=float(points[0].score))

    t = np.array([p.t for p in points], dtype=float)
    s = np.array([p.score for p in points], dtype=float)
    sum_t, sum_s = t.sum(), s.sum()
    denom = n * (t * t).sum() - sum_t * sum_t
    if denom == 0:
        # All points share one position; no slope is identifiable.
        return TrendModel(slope=0.0, intercept=float(sum_s / n))

    slope = (n * (t * s).sum() - sum_t * sum_s) / denom
    intercept = (sum_s - slope * sum_t) / n
    return TrendModel(slope=float(slope), intercept=float(intercept))


def pass_fail_probability(current_score: float, slope: float, config: TrendConfig = TrendConfig()) -> float:
    """
    Heuristic pass probability in [0, 100].

    Starts from the current score and shifts it by ``slope_weight`` points per
    unit of slope, with the shift capped at ``max_adjustment`` either way.
    Non-decreasing in both the score and the slope.
    """

    base = float(np.clip(current_score, 0.0, 100.0))
    adjustment = float(np.clip(slope * config.slope_weight, -config.max_adjustment, config.max_adjustment))
    return float(np.clip(base + adjustment, 0.0, 100.0))


def describe_learning_pattern(points: Sequence[TimelinePoint]) -> LearningPattern:
    scores = [float(p.score) for p in points]
    return LearningPattern(
        direction=_direction(scores),
        consistency=_consistency(scores),
        learning_speed=_learning_speed(scores),
    )


def _direction(scores: Sequence[float]) -> str:
    if len(scores) < 2:
        return STABLE
    recent = scores[-RECENT_WINDOW:]
    older = scores[: max(1, len(scores) - RECENT_WINDOW)]
    difference = np.mean(recent) - np.mean(older)
    if difference > DIRECTION_THRESHOLD:
        return IMPROVING
    if difference < -DIRECTION_THRESHOLD:
        return DECLINING
    return STABLE


def _consistency(scores: Sequence[float]) -> int:
    if not scores:
        return 100
    spread = float(np.std(scores))  # population std
    return round_half_up(max(0.0, 100.0 - spread * 2))


def _learning_speed(scores: Sequence[float]) -> str:
    if len(scores) < 2:
        return "moderate"
    rate = (scores[-1] - scores[0]) / len(scores)
    if rate > 2:
        return "fast"
    if rate < -1:
        return "slow"
    return "moderate"
