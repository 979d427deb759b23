# ABOUTME: Tests the linear trend fit and the pass-probability heuristic.
# ABOUTME: Checks degenerate timelines, OLS values, bounds, and monotonicity.

import pytest

from src.performance.config import TrendConfig
from src.performance.schemas import TimelinePoint
from src.performance.trend import describe_learning_pattern, fit_trend, pass_fail_probability


def _points(*scores):
    return [TimelinePoint(t=i + 1, score=float(s)) for i, s in enumerate(scores)]


def test_ols_fit_on_three_points():
    model = fit_trend(_points(60, 70, 80))

    assert model.slope == pytest.approx(10.0)
    assert model.intercept == pytest.approx(50.0)
    assert model.predict(4) == pytest.approx(90.0)


def test_no_points_gives_flat_zero():
    model = fit_trend([])

    assert model.slope == 0.0
    assert model.intercept == 0.0
    assert model.predict(1) == 0.0
    assert model.predict(37.5) == 0.0


def test_single_point_gives_flat_projection():
    model = fit_trend([TimelinePoint(t=1, score=80.0)])

    assert model.slope == 0.0
    assert model.predict(5) == pytest.approx(80.0)


def test_declining_scores_give_negative_slope():
    model = fit_trend(_points(90, 70, 60, 40))

    assert model.slope < 0
    assert model.predict(5) < 40


def test_repeated_position_does_not_divide_by_zero():
    model = fit_trend([TimelinePoint(t=1, score=40.0), TimelinePoint(t=1, score=60.0)])

    assert model.slope == 0.0
    assert model.intercept == pytest.approx(50.0)


def test_probability_starts_from_current_score_when_flat():
    assert pass_fail_probability(65.0, 0.0) == pytest.approx(65.0)
    assert pass_fail_probability(140.0, 0.0) == 100.0
    assert pass_fail_probability(-5.0, 0.0) == 0.0


def test_probability_stays_within_bounds():
    for score in (-50, 0, 10, 50, 90, 100, 150):
        for slope in (-1000, -10, -1, 0, 1, 10, 1000):
            p = pass_fail_probability(score, slope)
            assert 0.0 <= p <= 100.0


def test_probability_is_monotone_in_score_and_slope():
    scores = [0, 20, 40, 60, 80, 100]
    slopes = [-20, -5, -1, 0, 1, 5, 20]
    for slope in slopes:
        values = [pass_fail_probability(s, slope) for s in scores]
        assert values == sorted(values)
    for score in scores:
        values = [pass_fail_probability(score, m) for m in slopes]
        assert values == sorted(values)


def test_probability_adjustment_is_capped():
    config = TrendConfig(slope_weight=2.0, max_adjustment=15.0)

    assert pass_fail_probability(50.0, 3.0, config) == pytest.approx(56.0)
    assert pass_fail_probability(50.0, 100.0, config) == pytest.approx(65.0)
    assert pass_fail_probability(50.0, -100.0, config) == pytest.approx(35.0)


def test_learning_pattern_detects_improvement():
    pattern = describe_learning_pattern(_points(40, 45, 50, 70, 75, 80))

    assert pattern.direction == "improving"
    assert pattern.learning_speed == "fast"
    assert 0 <= pattern.consistency <= 100


def test_learning_pattern_for_sparse_history():
    empty = describe_learning_pattern([])
    single = describe_learning_pattern(_points(70))

    assert (empty.direction, empty.consistency, empty.learning_speed) == ("stable", 100, "moderate")
    assert (single.direction, single.consistency, single.learning_speed) == ("stable", 100, "moderate")


def test_learning_pattern_detects_decline():
    pattern = describe_learning_pattern(_points(90, 85, 80, 60, 55, 50))

    assert pattern.direction == "declining"
    assert pattern.learning_speed == "slow"
