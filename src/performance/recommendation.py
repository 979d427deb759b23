# ABOUTME: Builds a sequential remediation plan from the ranked weak topics.
# ABOUTME: Estimates days and difficulty per topic and locks every step after the first.

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from .config import PlanConfig
from .schemas import IN_PROGRESS, LOCKED, LearningStep, RecommendationPath, WeakTopicEntry

PATH_ID = "rec-1"
PATH_NAME = "Personalized Improvement Plan"
PATH_GOAL = "Target weakest topics first to lift overall score"


def estimate_days(accuracy: int, config: PlanConfig = PlanConfig()) -> int:
    """Days of work for a topic: 10% accuracy needs 6 days, 95% hits the 2-day floor."""

    return max(config.min_days, math.ceil((100 - min(99, accuracy)) / config.days_divisor))


def difficulty_for(accuracy: int) -> str:
    if accuracy < 50:
        return "beginner"
    if accuracy < 75:
        return "intermediate"
    return "advanced"


def content_slug(domain: str, topic: str) -> str:
    return re.sub(r"\s+", "-", f"{domain}-{topic}".lower())


def build_step(index: int, entry: WeakTopicEntry, config: PlanConfig = PlanConfig()) -> LearningStep:
    return LearningStep(
        id=f"step-{index + 1}",
        title=f"{entry.domain.upper()} · {entry.topic}",
        description=(
            f"Improve {entry.topic} ({entry.domain}). Current accuracy {entry.accuracy}%. "
            "Practice targeted sets and review explanations."
        ),
        status=IN_PROGRESS if index == 0 else LOCKED,
        estimated_days=estimate_days(entry.accuracy, config),
        difficulty=difficulty_for(entry.accuracy),
        content_id=content_slug(entry.domain, entry.topic),
        resources=tuple(config.resources),
    )


def build_recommendation_path(
    weak_topics: Sequence[WeakTopicEntry],
    config: PlanConfig = PlanConfig(),
    now: Optional[datetime] = None,
) -> RecommendationPath:
    """
    Turn the weakest topics (weakest first) into an ordered plan.

    Only the first ``max_steps`` topics are used. Only step one starts
    in progress; the rest are locked until earlier steps complete. An
    empty diagnosis yields an empty plan ending the moment it starts.
    """

    created_at = now or datetime.now(timezone.utc)
    steps: List[LearningStep] = [
        build_step(i, entry, config) for i, entry in enumerate(weak_topics[: config.max_steps])
    ]
    duration = sum(step.estimated_days for step in steps)
    return RecommendationPath(
        id=PATH_ID,
        name=PATH_NAME,
        goal=PATH_GOAL,
        steps=steps,
        estimated_duration=duration,
        created_at=created_at,
        target_completion_date=created_at + timedelta(days=duration),
    )
