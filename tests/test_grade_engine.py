# tests/test_grade_engine.py
"""
성적 계산 순수 함수 테스트 (DB 불필요)
"""

import pytest

from services import grade_engine
from services.errors import InvalidLetterGrade, PolicyInvalid
from services.grade_engine import GradingPolicy

from conftest import make_scores

DEFAULT_POLICY = GradingPolicy()


# ==========================================================
# 평가 비율 검증
# ==========================================================

def test_default_policy_is_valid():
    assert grade_engine.validate_grading_policy(DEFAULT_POLICY).total == 100


@pytest.mark.parametrize("weights", [
    dict(assignments=20, midterm=25, final=35, attendance=10, participation=5),
    dict(assignments=30, midterm=30, final=30, attendance=10, participation=10),
    dict(assignments=0, midterm=0, final=0, attendance=0, participation=0),
])
def test_policy_must_total_100(weights):
    with pytest.raises(PolicyInvalid):
        grade_engine.validate_grading_policy(GradingPolicy(**weights))


def test_policy_rejects_negative_weight_even_if_total_is_100():
    policy = GradingPolicy(assignments=-10, midterm=35, final=55, attendance=10, participation=10)
    assert policy.total == 100
    with pytest.raises(PolicyInvalid) as exc:
        grade_engine.validate_grading_policy(policy)
    assert "assignments" in exc.value.message


# ==========================================================
# 항목별 환산 점수
# ==========================================================

def test_component_scores_example():
    scores = make_scores(
        assignments=[(8, 10), (9, 10)],
        midterm=40, final=70, attendance=(9, 10),
    )
    scores["midterm"]["max_score"] = 50

    weighted = grade_engine.compute_component_scores(scores, DEFAULT_POLICY)

    assert weighted.assignments == pytest.approx(17.0)
    assert weighted.midterm == pytest.approx(20.0)
    assert weighted.final == pytest.approx(24.5)
    assert weighted.attendance == pytest.approx(9.0)
    assert weighted.participation == 0.0
    assert grade_engine.total_percentage(weighted) == 71      # 70.5 → 71 (사사오입)


def test_empty_scores_yield_zero():
    weighted = grade_engine.compute_component_scores(None, DEFAULT_POLICY)
    assert weighted.as_dict() == {name: 0.0 for name in grade_engine.POLICY_FIELDS}
    assert grade_engine.total_percentage(weighted) == 0


def test_zero_max_score_counts_as_zero_instead_of_raising():
    scores = make_scores(assignments=[(5, 0), (10, 10)], midterm=30, final=50, attendance=(3, 0))
    scores["midterm"]["max_score"] = 0

    weighted = grade_engine.compute_component_scores(scores, DEFAULT_POLICY)

    assert weighted.assignments == pytest.approx(10.0)   # (0 + 100) / 2 * 20%
    assert weighted.midterm == 0.0
    assert weighted.attendance == 0.0


def test_full_marks_reach_100():
    scores = make_scores(
        assignments=[(10, 10), (20, 20)], midterm=100, final=100, attendance=(30, 30), participation=100,
    )
    weighted = grade_engine.compute_component_scores(scores, DEFAULT_POLICY)
    assert grade_engine.total_percentage(weighted) == 100


@pytest.mark.parametrize("fraction", [0, 0.1, 0.25, 0.333, 0.5, 0.67, 0.9, 1])
@pytest.mark.parametrize("weights", [
    (20, 25, 35, 10, 10),
    (0, 50, 50, 0, 0),
    (100, 0, 0, 0, 0),
    (10, 30, 40, 15, 5),
])
def test_total_stays_within_0_and_100_for_in_range_scores(fraction, weights):
    policy = GradingPolicy(*weights)
    scores = make_scores(
        assignments=[(10 * fraction, 10), (50 * fraction, 50)],
        midterm=100 * fraction,
        final=100 * fraction,
        attendance=(round(20 * fraction), 20),
        participation=100 * fraction,
    )
    total = grade_engine.total_percentage(grade_engine.compute_component_scores(scores, policy))
    assert 0 <= total <= 100


def test_out_of_range_score_is_not_clamped():
    scores = make_scores(final=150)
    policy = GradingPolicy(assignments=0, midterm=0, final=100, attendance=0, participation=0)
    weighted = grade_engine.compute_component_scores(scores, policy)
    assert grade_engine.total_percentage(weighted) == 150
    assert grade_engine.letter_grade_of(150) == ("A+", 4.0)


# ==========================================================
# 반올림 / 등급 / 평점
# ==========================================================

@pytest.mark.parametrize("value, places, expected", [
    (84.5, 0, 85),
    (2.5, 0, 3),
    (89.49, 0, 89),
    (3.425, 2, 3.43),
    (3.4285714, 2, 3.43),
    (0.0, 2, 0.0),
])
def test_round_half_up(value, places, expected):
    assert grade_engine.round_half_up(value, places) == expected


@pytest.mark.parametrize("percentage, letter, points", [
    (100, "A+", 4.0),
    (97, "A+", 4.0),
    (96, "A", 4.0),
    (93, "A", 4.0),
    (90, "A-", 3.7),
    (89, "B+", 3.3),
    (87, "B+", 3.3),
    (83, "B", 3.0),
    (80, "B-", 2.7),
    (77, "C+", 2.3),
    (73, "C", 2.0),
    (70, "C-", 1.7),
    (67, "D+", 1.3),
    (63, "D", 1.0),
    (60, "D-", 0.7),
    (59, "F", 0.0),
    (0, "F", 0.0),
    (-5, "F", 0.0),
])
def test_letter_grade_boundaries(percentage, letter, points):
    assert grade_engine.letter_grade_of(percentage) == (letter, points)


def test_grade_points_are_monotonic_in_percentage():
    previous = -1.0
    for percentage in range(-10, 111):
        _, points = grade_engine.letter_grade_of(percentage)
        assert points >= previous
        previous = points


def test_every_letter_has_points():
    for letter in grade_engine.LETTER_GRADES:
        assert 0.0 <= grade_engine.grade_points_for(letter) <= 4.0
    for letter in grade_engine.SPECIAL_LETTERS:
        assert grade_engine.grade_points_for(letter) == 0.0


@pytest.mark.parametrize("letter", ["E", "a", "A++", ""])
def test_unknown_letter_is_rejected(letter):
    with pytest.raises(InvalidLetterGrade) as exc:
        grade_engine.grade_points_for(letter)
    assert "A+" in exc.value.message and "NP" in exc.value.message


def test_quality_points_rounded_to_two_places():
    assert grade_engine.quality_points(3.7, 3) == 11.1
    assert grade_engine.quality_points(1.3, 4) == 5.2
    assert grade_engine.quality_points(0.0, 3) == 0.0
