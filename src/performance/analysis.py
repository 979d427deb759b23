# ABOUTME: Assembles the performance-dashboard payload from trend and weak-topic outputs.
# ABOUTME: Derives per-domain category scores and their radar-chart framing.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .schemas import AnalysisPayload, LearningPattern, TimelinePoint, TrendModel, WeakTopicEntry
from .weak_topics import round_half_up


def category_scores(weak_topics: Sequence[WeakTopicEntry]) -> Dict[str, int]:
    """Average topic accuracy per domain, for domains present in the diagnosis."""

    if not weak_topics:
        return {}
    df = pd.DataFrame([{"domain": w.domain, "accuracy": w.accuracy} for w in weak_topics])
    means = df.groupby("domain", sort=True)["accuracy"].mean()
    return {str(domain): round_half_up(float(mean)) for domain, mean in means.items()}


def radar_data(scores: Dict[str, int]) -> List[Dict]:
    return [{"category": domain, "value": value} for domain, value in scores.items()]


def build_analysis_payload(
    points: Sequence[TimelinePoint],
    model: TrendModel,
    weak_topics: Sequence[WeakTopicEntry],
    pass_probability: float,
    pattern: Optional[LearningPattern] = None,
) -> AnalysisPayload:
    scores = category_scores(weak_topics)
    return AnalysisPayload(
        points=list(points),
        model=model,
        predicted_score=model.predict(len(points) + 1),
        pass_probability=pass_probability,
        weak_topics=list(weak_topics),
        category_scores=scores,
        radar_data=radar_data(scores),
        learning_pattern=pattern,
    )
