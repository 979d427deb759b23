# ABOUTME: Defines the data structures shared by every analytics component.
# ABOUTME: Centralizes attempt, timeline, trend, weak-topic, and plan definitions.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

EXAM = "exam"
PRACTICE = "practice"
QUIZ = "quiz"
APTITUDE = "aptitude"
DOMAINS: Tuple[str, ...] = (EXAM, PRACTICE, QUIZ, APTITUDE)

IN_PROGRESS = "in-progress"
LOCKED = "locked"


@dataclass(frozen=True)
class QuestionResult:
    """Correctness of one answered question, tagged with its topic."""

    was_correct: bool
    topic: str


@dataclass(frozen=True)
class AttemptRecord:
    """Read-only snapshot of one completed exam, practice set, quiz, or drill.

    ``questions``, ``score`` and ``total`` are optional so that a record the
    persistence layer returned incompletely can still be carried; components
    skip such records instead of failing the whole computation.
    """

    domain: str
    topic: str
    submitted_at: datetime
    questions: Optional[Tuple[QuestionResult, ...]] = None
    score: Optional[float] = None
    total: Optional[float] = None


@dataclass(frozen=True)
class AttemptBundle:
    """Attempt history of one student, split by activity type."""

    exams: List[AttemptRecord] = field(default_factory=list)
    practices: List[AttemptRecord] = field(default_factory=list)
    quizzes: List[AttemptRecord] = field(default_factory=list)
    aptitudes: List[AttemptRecord] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            EXAM: len(self.exams),
            PRACTICE: len(self.practices),
            QUIZ: len(self.quizzes),
            APTITUDE: len(self.aptitudes),
        }


@dataclass(frozen=True)
class TimelinePoint:
    t: int
    score: float

    def to_dict(self) -> Dict:
        return {"t": self.t, "score": self.score}


@dataclass(frozen=True)
class TrendModel:
    """Linear trend ``score = slope * t + intercept`` fitted over a timeline."""

    slope: float
    intercept: float

    def predict(self, t: float) -> float:
        return self.slope * t + self.intercept


@dataclass(frozen=True)
class LearningPattern:
    direction: str
    consistency: int
    learning_speed: str

    def to_dict(self) -> Dict:
        return {
            "direction": self.direction,
            "consistency": self.consistency,
            "learningSpeed": self.learning_speed,
        }


@dataclass(frozen=True)
class WeakTopicEntry:
    """Question-level accuracy for one (domain, topic) pair."""

    domain: str
    topic: str
    accuracy: int
    sample_count: int

    @property
    def label(self) -> str:
        return f"{self.domain}:{self.topic}"

    def to_dict(self) -> Dict:
        return {
            "domain": self.domain,
            "topic": self.topic,
            "accuracy": self.accuracy,
            "sampleCount": self.sample_count,
        }


@dataclass(frozen=True)
class WeaknessSummary:
    critical: List[str]
    moderate: List[str]
    strengths: List[str]


@dataclass(frozen=True)
class LearningStep:
    id: str
    title: str
    description: str
    status: str
    estimated_days: int
    difficulty: str
    content_id: str
    resources: Tuple[str, ...]

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "estimatedDays": self.estimated_days,
            "difficulty": self.difficulty,
            "contentId": self.content_id,
            "resources": list(self.resources),
        }


@dataclass(frozen=True)
class RecommendationPath:
    """Ordered remediation plan built from the weakest topics."""

    id: str
    name: str
    goal: str
    steps: List[LearningStep]
    estimated_duration: int
    created_at: datetime
    target_completion_date: datetime
    completed_steps: int = 0

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "goal": self.goal,
            "totalSteps": self.total_steps,
            "completedSteps": self.completed_steps,
            "estimatedDuration": self.estimated_duration,
            "steps": [step.to_dict() for step in self.steps],
            "createdAt": self.created_at.isoformat(),
            "targetCompletionDate": self.target_completion_date.isoformat(),
        }


@dataclass(frozen=True)
class AnalysisPayload:
    """Dashboard payload combining the trend and the weak-topic diagnosis."""

    points: List[TimelinePoint]
    model: TrendModel
    predicted_score: float
    pass_probability: float
    weak_topics: List[WeakTopicEntry]
    category_scores: Dict[str, int]
    radar_data: List[Dict]
    learning_pattern: Optional[LearningPattern] = None

    def to_dict(self) -> Dict:
        return {
            "trend": {
                "slope": self.model.slope,
                "intercept": self.model.intercept,
                "points": [p.to_dict() for p in self.points],
            },
            "predictedScore": self.predicted_score,
            "passProbability": self.pass_probability,
            "weakTopics": [w.to_dict() for w in self.weak_topics],
            "categoryScores": dict(self.category_scores),
            "radarData": [dict(r) for r in self.radar_data],
            "learningPattern": None if self.learning_pattern is None else self.learning_pattern.to_dict(),
        }
