"""
services/grade_engine.py

- 평가 비율(GradingPolicy)과 항목별 원점수로 환산 점수/총점/등급을 계산하는 순수 함수 모음
- DB 세션을 받지 않음 → services/grade_service.py 가 조회/저장을 담당
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional, Tuple

from services.errors import InvalidLetterGrade, PolicyInvalid

POLICY_FIELDS = ("assignments", "midterm", "final", "attendance", "participation")

# ✅ 등급 구간 (내림차순, 처음 일치하는 구간 적용)
GRADE_SCALE: List[Tuple[int, str, float]] = [
    (97, "A+", 4.0),
    (93, "A", 4.0),
    (90, "A-", 3.7),
    (87, "B+", 3.3),
    (83, "B", 3.0),
    (80, "B-", 2.7),
    (77, "C+", 2.3),
    (73, "C", 2.0),
    (70, "C-", 1.7),
    (67, "D+", 1.3),
    (63, "D", 1.0),
    (60, "D-", 0.7),
]
FAIL_LETTER = "F"

SCALE_LETTERS = [letter for _, letter, _ in GRADE_SCALE] + [FAIL_LETTER]
# 철회/미완/통과/불통과 - 평점 0.0
SPECIAL_LETTERS = ["W", "I", "P", "NP"]
LETTER_GRADES = SCALE_LETTERS + SPECIAL_LETTERS

GRADE_POINTS: Dict[str, float] = {letter: points for _, letter, points in GRADE_SCALE}
GRADE_POINTS[FAIL_LETTER] = 0.0
GRADE_POINTS.update({letter: 0.0 for letter in SPECIAL_LETTERS})


@dataclass(frozen=True)
class GradingPolicy:
    """강좌 평가 비율 (%)"""

    assignments: int = 20
    midterm: int = 25
    final: int = 35
    attendance: int = 10
    participation: int = 10

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in POLICY_FIELDS)

    @classmethod
    def from_course(cls, course) -> "GradingPolicy":
        return cls(**{name: getattr(course, f"policy_{name}") for name in POLICY_FIELDS})


@dataclass
class WeightedScores:
    """평가 비율 적용 후 항목별 환산 점수"""

    assignments: float = 0.0
    midterm: float = 0.0
    final: float = 0.0
    attendance: float = 0.0
    participation: float = 0.0

    def total(self) -> float:
        return self.assignments + self.midterm + self.final + self.attendance + self.participation

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def round_half_up(value: float, places: int = 0):
    """사사오입 반올림 (내장 round 는 은행가 반올림이라 사용하지 않음)"""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def validate_grading_policy(policy: GradingPolicy) -> GradingPolicy:
    negatives = [name for name in POLICY_FIELDS if getattr(policy, name) < 0]
    if negatives:
        raise PolicyInvalid(f"Grading policy weights must be non-negative: {', '.join(negatives)}")
    if policy.total != 100:
        raise PolicyInvalid(f"Grading policy must total 100%, currently: {policy.total}%")
    return policy


def _percent(score: Optional[float], max_score: Optional[float]) -> float:
    # max_score 가 0/누락이면 해당 항목은 0점 처리
    if score is None or not max_score:
        return 0.0
    return score / max_score * 100


def compute_component_scores(scores: Optional[Mapping[str, Any]], policy: GradingPolicy) -> WeightedScores:
    """원점수(ComponentScores)와 평가 비율로 항목별 환산 점수를 계산한다.

    - assignments: 과제별 백분율의 평균 (과제가 없으면 0)
    - midterm/final/participation: score 가 None 이면 0
    - attendance: total 이 0 이면 0
    범위를 벗어난 점수(만점 초과 등)도 그대로 반영하며 예외를 던지지 않는다.
    """
    scores = scores or {}
    weighted = WeightedScores()

    assignments = scores.get("assignments") or []
    if assignments:
        average = sum(_percent(a.get("score"), a.get("max_score")) for a in assignments) / len(assignments)
        weighted.assignments = average * policy.assignments / 100

    for name in ("midterm", "final", "participation"):
        entry = scores.get(name) or {}
        percent = _percent(entry.get("score"), entry.get("max_score", 100))
        setattr(weighted, name, percent * getattr(policy, name) / 100)

    attendance = scores.get("attendance") or {}
    total = attendance.get("total") or 0
    if total:
        weighted.attendance = (attendance.get("present") or 0) / total * 100 * policy.attendance / 100

    return weighted


def total_percentage(weighted: WeightedScores) -> int:
    # 클램핑 없음: 범위를 벗어난 입력은 그대로 전파
    return round_half_up(weighted.total())


def letter_grade_of(percentage: float) -> Tuple[str, float]:
    """총점 → (등급, 평점). 100 초과는 A+, 0 미만은 F 로 포화된다."""
    for threshold, letter, points in GRADE_SCALE:
        if percentage >= threshold:
            return letter, points
    return FAIL_LETTER, 0.0


def grade_points_for(letter: str) -> float:
    if letter not in LETTER_GRADES:
        raise InvalidLetterGrade(f"Unknown letter grade: {letter!r}; expected one of {', '.join(LETTER_GRADES)}")
    return GRADE_POINTS[letter]


def quality_points(grade_points: float, credits: int) -> float:
    return round_half_up(grade_points * credits, 2)
