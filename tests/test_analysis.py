# ABOUTME: Tests assembly of the performance-dashboard payload.
# ABOUTME: Verifies per-domain category scores, radar framing, and the one-step prediction.

import pytest

from src.performance.analysis import build_analysis_payload, category_scores, radar_data
from src.performance.schemas import TimelinePoint, TrendModel, WeakTopicEntry


def _entry(domain, topic, accuracy):
    return WeakTopicEntry(domain=domain, topic=topic, accuracy=accuracy, sample_count=4)


def test_category_scores_average_topic_accuracy_per_domain():
    weak = [
        _entry("quiz", "a", 40),
        _entry("practice", "b", 50),
        _entry("quiz", "c", 81),
        _entry("aptitude", "d", 90),
    ]

    scores = category_scores(weak)

    assert scores == {"aptitude": 90, "practice": 50, "quiz": 61}
    assert list(scores) == ["aptitude", "practice", "quiz"]


def test_radar_data_mirrors_category_scores():
    scores = {"practice": 50, "quiz": 61}

    assert radar_data(scores) == [
        {"category": "practice", "value": 50},
        {"category": "quiz", "value": 61},
    ]


def test_payload_predicts_one_step_ahead():
    points = [TimelinePoint(t=1, score=60.0), TimelinePoint(t=2, score=70.0), TimelinePoint(t=3, score=80.0)]
    model = TrendModel(slope=10.0, intercept=50.0)

    payload = build_analysis_payload(points, model, [_entry("quiz", "a", 40)], 85.0)

    assert payload.predicted_score == pytest.approx(90.0)
    data = payload.to_dict()
    assert data["trend"] == {
        "slope": 10.0,
        "intercept": 50.0,
        "points": [{"t": 1, "score": 60.0}, {"t": 2, "score": 70.0}, {"t": 3, "score": 80.0}],
    }
    assert data["passProbability"] == 85.0
    assert data["weakTopics"] == [{"domain": "quiz", "topic": "a", "accuracy": 40, "sampleCount": 4}]
    assert data["categoryScores"] == {"quiz": 40}
    assert data["radarData"] == [{"category": "quiz", "value": 40}]


def test_payload_for_no_data():
    payload = build_analysis_payload([], TrendModel(slope=0.0, intercept=0.0), [], 0.0)

    data = payload.to_dict()
    assert data["predictedScore"] == 0
    assert data["weakTopics"] == []
    assert data["categoryScores"] == {}
    assert data["radarData"] == []
    assert data["trend"]["points"] == []
