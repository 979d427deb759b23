# ABOUTME: Tests question-level weak-topic aggregation and ranking.
# ABOUTME: Covers accuracy rounding, confidence tie-breaks, and malformed attempts.

from datetime import datetime, timezone

from src.performance.schemas import AttemptRecord, QuestionResult
from src.performance.weak_topics import (
    classify_weaknesses,
    compute_weak_topics,
    infer_topic,
    round_half_up,
)


def _attempt(domain, topic, results, question_topic=None):
    return AttemptRecord(
        domain=domain,
        topic=topic,
        submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        questions=tuple(QuestionResult(was_correct=r, topic=question_topic or topic) for r in results),
        score=float(sum(results)),
        total=float(len(results)),
    )


def _accuracy(entries, domain, topic):
    return next(e.accuracy for e in entries if e.domain == domain and e.topic == topic)


def test_accuracy_is_question_level_and_rounded():
    practices = [
        _attempt("practice", "arrays", [True, True, False]),
        _attempt("practice", "arrays", [False, False]),
        _attempt("practice", "graphs", [True, True, True, False]),
    ]

    entries = compute_weak_topics(practices, [], [])

    assert _accuracy(entries, "practice", "arrays") == 40
    assert _accuracy(entries, "practice", "graphs") == 75
    arrays = next(e for e in entries if e.topic == "arrays")
    assert arrays.sample_count == 5


def test_rounding_is_half_up_at_boundaries():
    assert round_half_up(50.0) == 50
    assert round_half_up(100 / 3) == 33
    assert round_half_up(12.5) == 13
    assert round_half_up(62.5) == 63

    quizzes = [
        _attempt("quiz", "halves", [True, False]),
        _attempt("quiz", "thirds", [True, False, False]),
        _attempt("quiz", "eighths", [True] + [False] * 7),
    ]
    entries = compute_weak_topics([], quizzes, [])

    assert _accuracy(entries, "quiz", "halves") == 50
    assert _accuracy(entries, "quiz", "thirds") == 33
    assert _accuracy(entries, "quiz", "eighths") == 13


def test_ranking_is_weakest_first():
    quizzes = [
        _attempt("quiz", "A", [True] * 3 + [False] * 2),
        _attempt("quiz", "B", [True] * 2 + [False] * 3),
        _attempt("quiz", "C", [True] * 4 + [False] * 1),
    ]

    entries = compute_weak_topics([], quizzes, [])

    assert [e.topic for e in entries] == ["B", "A", "C"]
    assert [e.accuracy for e in entries] == [40, 60, 80]


def test_equal_accuracy_ranks_larger_sample_first():
    quizzes = [
        _attempt("quiz", "B", [True, False, True, False]),
        _attempt("quiz", "A", [True, False] * 5),
    ]

    entries = compute_weak_topics([], quizzes, [])

    assert [e.topic for e in entries] == ["A", "B"]
    assert [e.sample_count for e in entries] == [10, 4]


def test_full_ties_fall_back_to_domain_then_topic():
    quizzes = [_attempt("quiz", t, [True, False]) for t in ["E", "C", "A", "D", "B"]]
    aptitudes = [_attempt("aptitude", "Z", [True, False])]

    entries = compute_weak_topics([], quizzes, aptitudes)

    assert [e.label for e in entries] == ["aptitude:Z", "quiz:A", "quiz:B", "quiz:C", "quiz:D", "quiz:E"]


def test_groups_by_domain_and_question_topic():
    practices = [_attempt("practice", "mixed", [True, False], question_topic="Probability")]
    aptitudes = [_attempt("aptitude", "mixed", [False, False], question_topic="Probability")]

    entries = compute_weak_topics(practices, [], aptitudes)

    assert [(e.domain, e.topic, e.accuracy) for e in entries] == [
        ("aptitude", "Probability", 0),
        ("practice", "Probability", 50),
    ]


def test_attempts_without_questions_are_skipped():
    broken = AttemptRecord(
        domain="practice",
        topic="arrays",
        submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        questions=None,
        score=3.0,
        total=5.0,
    )
    empty = _attempt("practice", "strings", [])

    entries = compute_weak_topics([broken, empty], [], [])

    assert entries == []


def test_infer_topic_uses_keywords_then_fallback():
    assert infer_topic("Find the ratio of boys to girls") == "Ratios"
    assert infer_topic("Run BFS on the graph") == "Graphs"
    assert infer_topic("What is 20% of 50?") == "Percentages"
    assert infer_topic("Name the capital", fallback="geography") == "geography"
    assert infer_topic(None) == "General"


def test_classify_weaknesses_buckets_by_accuracy():
    quizzes = [
        _attempt("quiz", "weak", [True] + [False] * 4),
        _attempt("quiz", "middling", [True] * 7 + [False] * 3),
        _attempt("quiz", "okay", [True] * 3 + [False]),
        _attempt("quiz", "strong", [True] * 9 + [False]),
    ]

    summary = classify_weaknesses(compute_weak_topics([], quizzes, []))

    assert summary.critical == ["quiz:weak"]
    assert summary.moderate == ["quiz:middling"]
    assert summary.strengths == ["quiz:strong"]
