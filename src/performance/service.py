# ABOUTME: Exposes the dashboard and recommendation operations for an authenticated student.
# ABOUTME: Loads the attempt bundle once per call and runs the pure analytics over it.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .analysis import build_analysis_payload
from .config import AnalyticsConfig
from .errors import UnauthorizedError
from .loader import AttemptStores, load_all_attempts
from .log import get_logger
from .recommendation import build_recommendation_path
from .schemas import AnalysisPayload, AttemptBundle, RecommendationPath
from .timeline import build_timeline
from .trend import describe_learning_pattern, fit_trend, pass_fail_probability
from .weak_topics import compute_weak_topics

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """Identity resolved by the authentication layer."""

    user_id: str


def require_user_id(principal: Optional[Principal]) -> str:
    if principal is None or not str(principal.user_id or "").strip():
        raise UnauthorizedError("A resolved principal is required.")
    return str(principal.user_id)


def analyze_bundle(bundle: AttemptBundle, config: AnalyticsConfig = AnalyticsConfig()) -> AnalysisPayload:
    points = build_timeline(bundle.exams)
    model = fit_trend(points)
    current_score = points[-1].score if points else 0.0
    probability = pass_fail_probability(current_score, model.slope, config.trend)
    weak = compute_weak_topics(bundle.practices, bundle.quizzes, bundle.aptitudes)
    return build_analysis_payload(points, model, weak, probability, describe_learning_pattern(points))


def plan_bundle(
    bundle: AttemptBundle,
    config: AnalyticsConfig = AnalyticsConfig(),
    now: Optional[datetime] = None,
) -> RecommendationPath:
    weak = compute_weak_topics(bundle.practices, bundle.quizzes, bundle.aptitudes)
    return build_recommendation_path(weak, config.plan, now=now)


class PerformanceService:
    """Entry point used by the web layer; one instance may serve many requests."""

    def __init__(self, stores: AttemptStores, config: AnalyticsConfig = AnalyticsConfig()):
        self.stores = stores
        self.config = config

    async def performance_dashboard(self, principal: Optional[Principal]) -> AnalysisPayload:
        user_id = require_user_id(principal)
        bundle = await load_all_attempts(user_id, self.stores)
        payload = analyze_bundle(bundle, self.config)
        logger.info(
            "dashboard_computed",
            user_id=user_id,
            points=len(payload.points),
            weak_topics=len(payload.weak_topics),
            slope=round(payload.model.slope, 4),
        )
        return payload

    async def recommendations(
        self, principal: Optional[Principal], now: Optional[datetime] = None
    ) -> RecommendationPath:
        user_id = require_user_id(principal)
        bundle = await load_all_attempts(user_id, self.stores)
        path = plan_bundle(bundle, self.config, now=now)
        logger.info("plan_built", user_id=user_id, steps=path.total_steps, days=path.estimated_duration)
        return path
