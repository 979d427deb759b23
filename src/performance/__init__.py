# ABOUTME: Makes the performance analytics package importable as one unit.
# ABOUTME: Re-exports the schema types and the top-level operations for convenience.

from .config import AnalyticsConfig, load_config
from .errors import ConfigError, InternalLoadError, PerformanceError, UnauthorizedError
from .schemas import (
    AnalysisPayload,
    AttemptBundle,
    AttemptRecord,
    LearningStep,
    QuestionResult,
    RecommendationPath,
    TimelinePoint,
    TrendModel,
    WeakTopicEntry,
)
from .service import PerformanceService, Principal, analyze_bundle, plan_bundle

__all__ = [
    "AnalysisPayload",
    "AnalyticsConfig",
    "AttemptBundle",
    "AttemptRecord",
    "ConfigError",
    "InternalLoadError",
    "LearningStep",
    "PerformanceError",
    "PerformanceService",
    "Principal",
    "QuestionResult",
    "RecommendationPath",
    "TimelinePoint",
    "TrendModel",
    "UnauthorizedError",
    "WeakTopicEntry",
    "analyze_bundle",
    "load_config",
    "plan_bundle",
]
