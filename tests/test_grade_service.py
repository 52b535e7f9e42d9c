# tests/test_grade_service.py
"""
성적 부여 / 확정 / GPA 집계 서비스 테스트 (in-memory sqlite)
"""

import pytest

from models.enrollments import Enrollment as EnrollmentModel
from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from services import grade_service
from services.errors import (
    GradeAlreadyFinalized, GradeFinalized, InvalidLetterGrade, NotFound,
)
from services.grade_engine import GradingPolicy

from conftest import make_scores


def _scores_for(percent):
    """모든 항목을 같은 백분율로 채운 원점수"""
    return make_scores(
        assignments=[(percent, 100)],
        midterm=percent, final=percent, attendance=(percent, 100), participation=percent,
    )


# ==========================================================
# [1단계] 성적 산출
# ==========================================================

def test_assign_creates_graded_grade(db, seed):
    student = seed.student()
    course = seed.course(subject=seed.subject(credits=4))
    enrollment = seed.enrollment(student, course, scores=_scores_for(85))

    grade = grade_service.assign_or_update_grade(db, enrollment.id, remarks="midterm review")

    assert grade.status == "graded"
    assert grade.total_percentage == 85
    assert grade.letter_grade == "B"
    assert grade.grade_points == 3.0
    assert grade.credits == 4
    assert grade.quality_points == 12.0
    assert grade.semester_id == course.semester_id
    assert grade.enrollment_id == enrollment.id
    assert grade.remarks == "midterm review"
    assert grade.graded_at is not None

    db.refresh(enrollment)
    assert enrollment.status == "graded"


def test_assign_is_idempotent_for_same_scores(db, seed):
    student = seed.student()
    course = seed.course()
    enrollment = seed.enrollment(student, course, scores=_scores_for(72))

    first = grade_service.assign_or_update_grade(db, enrollment.id)
    first_values = (first.id, first.total_percentage, first.letter_grade, first.quality_points)
    second = grade_service.assign_or_update_grade(db, enrollment.id)

    assert (second.id, second.total_percentage, second.letter_grade, second.quality_points) == first_values
    assert db.query(GradeModel).count() == 1


def test_assign_uses_course_policy(db, seed):
    student = seed.student()
    policy = GradingPolicy(assignments=0, midterm=0, final=100, attendance=0, participation=0)
    course = seed.course(policy=policy)
    scores = make_scores(assignments=[(0, 10)], midterm=0, final=91)
    enrollment = seed.enrollment(student, course, scores=scores)

    grade = grade_service.assign_or_update_grade(db, enrollment.id)

    assert grade.total_percentage == 91
    assert grade.letter_grade == "A-"
    assert grade.component_final == pytest.approx(91.0)
    assert grade.component_midterm == 0.0


def test_assign_unknown_enrollment(db):
    with pytest.raises(NotFound):
        grade_service.assign_or_update_grade(db, 999)


# ==========================================================
# [2단계] 직접 입력
# ==========================================================

def test_direct_grade_defaults_percentage_to_zero(db, seed):
    student = seed.student()
    course = seed.course(subject=seed.subject(credits=2))
    enrollment = seed.enrollment(student, course)

    grade = grade_service.record_direct_grade(db, student.id, course.id, "A-")

    assert grade.total_percentage == 0
    assert grade.grade_points == 3.7
    assert grade.quality_points == 7.4
    assert grade.enrollment_id == enrollment.id
    assert grade.status == "graded"


def test_direct_grade_special_letter(db, seed):
    student = seed.student()
    course = seed.course()

    grade = grade_service.record_direct_grade(db, student.id, course.id, "W", percentage=40)

    assert grade.grade_points == 0.0
    assert grade.quality_points == 0.0
    assert grade.total_percentage == 40
    assert grade.enrollment_id is None


def test_direct_grade_rejects_unknown_letter(db, seed):
    student = seed.student()
    course = seed.course()
    with pytest.raises(InvalidLetterGrade):
        grade_service.record_direct_grade(db, student.id, course.id, "E")
    assert db.query(GradeModel).count() == 0


def test_direct_grade_unknown_student_or_course(db, seed):
    student = seed.student()
    course = seed.course()
    with pytest.raises(NotFound):
        grade_service.record_direct_grade(db, 999, course.id, "A")
    with pytest.raises(NotFound):
        grade_service.record_direct_grade(db, student.id, 999, "A")


# ==========================================================
# [3단계] 확정
# ==========================================================

def test_finalize_transitions_enrollment_and_updates_cgpa(db, seed):
    student = seed.student()
    course = seed.course(subject=seed.subject(credits=3))
    enrollment = seed.enrollment(student, course, scores=_scores_for(95))
    grade = grade_service.assign_or_update_grade(db, enrollment.id)

    finalized = grade_service.finalize_grade(db, grade.id)

    assert finalized.status == "finalized"
    assert finalized.finalized_at is not None
    db.refresh(enrollment)
    db.refresh(student)
    assert enrollment.status == "completed"
    assert student.cgpa == 4.0
    assert student.total_credits == 3


def test_finalize_failing_grade_marks_enrollment_failed(db, seed):
    student = seed.student()
    course = seed.course()
    enrollment = seed.enrollment(student, course, scores=_scores_for(40))
    grade = grade_service.assign_or_update_grade(db, enrollment.id)
    assert grade.letter_grade == "F"

    grade_service.finalize_grade(db, grade.id)

    db.refresh(enrollment)
    assert enrollment.status == "failed"


def test_finalized_grade_is_immutable(db, seed):
    student = seed.student()
    course = seed.course()
    enrollment = seed.enrollment(student, course, scores=_scores_for(88))
    grade = grade_service.assign_or_update_grade(db, enrollment.id)
    grade_service.finalize_grade(db, grade.id)
    before = (grade.letter_grade, grade.total_percentage, grade.quality_points, grade.finalized_at)

    with pytest.raises(GradeFinalized):
        grade_service.assign_or_update_grade(db, enrollment.id)
    with pytest.raises(GradeFinalized):
        grade_service.record_direct_grade(db, student.id, course.id, "F")
    with pytest.raises(GradeAlreadyFinalized):
        grade_service.finalize_grade(db, grade.id)

    stored = db.query(GradeModel).filter(GradeModel.id == grade.id).one()
    db.refresh(stored)
    assert (stored.letter_grade, stored.total_percentage, stored.quality_points, stored.finalized_at) == before
    assert stored.status == "finalized"


def test_finalize_loses_race_against_concurrent_finalize(db, seed):
    student = seed.student()
    course = seed.course()
    grade = seed.grade(student, course, letter="B")
    loaded = grade_service.get_grade_or_404(db, grade.id)
    assert loaded.status == "graded"

    # 다른 요청이 먼저 확정한 상황: 세션에 적재된 객체는 갱신하지 않는다
    db.query(GradeModel).filter(GradeModel.id == grade.id).update(
        {"status": "finalized"}, synchronize_session=False
    )
    assert loaded.status == "graded"

    with pytest.raises(GradeAlreadyFinalized):
        grade_service.finalize_grade(db, grade.id)


def test_finalize_unknown_grade(db):
    with pytest.raises(NotFound):
        grade_service.finalize_grade(db, 12345)


def test_atomic_finalize_rolls_back_every_write(db, seed, monkeypatch):
    student = seed.student()
    course = seed.course()
    enrollment = seed.enrollment(student, course, status="graded")
    grade = seed.grade(student, course, letter="A", enrollment=enrollment)

    def boom(db, student_id):
        raise RuntimeError("gpa refresh failed")

    monkeypatch.setattr(grade_service, "_refresh_student_gpa", boom)
    with pytest.raises(RuntimeError):
        grade_service.finalize_grade(db, grade.id, atomic=True)

    db.expire_all()
    assert db.get(GradeModel, grade.id).status == "graded"
    assert db.get(EnrollmentModel, enrollment.id).status == "graded"


def test_non_atomic_finalize_keeps_earlier_writes(db, seed, monkeypatch):
    student = seed.student()
    course = seed.course()
    enrollment = seed.enrollment(student, course, status="graded")
    grade = seed.grade(student, course, letter="A", enrollment=enrollment)

    def boom(db, student_id):
        raise RuntimeError("gpa refresh failed")

    monkeypatch.setattr(grade_service, "_refresh_student_gpa", boom)
    with pytest.raises(RuntimeError):
        grade_service.finalize_grade(db, grade.id, atomic=False)

    db.expire_all()
    assert db.get(GradeModel, grade.id).status == "finalized"
    assert db.get(EnrollmentModel, enrollment.id).status == "completed"
    assert db.get(StudentModel, student.id).cgpa == 0.0


def test_bulk_finalize_counts_only_graded(db, seed):
    course = seed.course()
    for status in ("graded", "graded", "graded", "finalized", "finalized", "pending"):
        seed.grade(seed.student(), course, letter="B+", status=status)

    assert grade_service.bulk_finalize(db, course.id) == 3
    statuses = sorted(g.status for g in db.query(GradeModel).filter(GradeModel.course_id == course.id))
    assert statuses == ["finalized"] * 5 + ["pending"]
    assert grade_service.bulk_finalize(db, course.id) == 0


def test_bulk_finalize_unknown_course(db):
    with pytest.raises(NotFound):
        grade_service.bulk_finalize(db, 42)


# ==========================================================
# [4단계] GPA
# ==========================================================

def test_gpa_without_finalized_grades_is_zero(db, seed):
    student = seed.student()
    seed.grade(student, seed.course(), letter="A", status="graded")

    result = grade_service.compute_gpa(db, student.id)

    assert result.as_dict() == {"gpa": 0.0, "total_credits": 0, "total_quality_points": 0.0}


def test_gpa_is_credit_weighted_and_rounded(db, seed):
    student = seed.student()
    seed.grade(student, seed.course(subject=seed.subject(credits=3)), letter="A", status="finalized")
    seed.grade(student, seed.course(subject=seed.subject(credits=4)), letter="B", status="finalized")
    seed.grade(student, seed.course(subject=seed.subject(credits=3)), letter="A", status="graded")

    result = grade_service.compute_gpa(db, student.id)

    assert result.gpa == 3.43            # 24 / 7 = 3.428...
    assert result.total_credits == 7
    assert result.total_quality_points == 24.0


def test_gpa_semester_filter(db, seed):
    student = seed.student()
    spring = seed.semester(2024, "Spring")
    fall = seed.semester(2024, "Fall")
    seed.grade(student, seed.course(semester=spring), letter="C", status="finalized")
    seed.grade(student, seed.course(semester=fall), letter="A", status="finalized")

    assert grade_service.compute_gpa(db, student.id, semester_id=spring.id).gpa == 2.0
    assert grade_service.compute_gpa(db, student.id, semester_id=fall.id).gpa == 4.0
    assert grade_service.compute_gpa(db, student.id).gpa == 3.0


def test_gpa_counts_retakes_separately(db, seed):
    student = seed.student()
    subject = seed.subject(credits=3)
    seed.grade(student, seed.course(subject=subject, semester=seed.semester(2023, "Fall")), letter="F", status="finalized")
    seed.grade(student, seed.course(subject=subject, semester=seed.semester(2024, "Spring")), letter="A", status="finalized")

    result = grade_service.compute_gpa(db, student.id)

    assert result.total_credits == 6
    assert result.gpa == 2.0


def test_grade_credits_are_snapshotted(db, seed):
    student = seed.student()
    subject = seed.subject(credits=3)
    course = seed.course(subject=subject)
    grade = seed.grade(student, course, letter="A", status="finalized")

    subject.credits = 5
    db.commit()

    assert grade_service.compute_gpa(db, student.id).total_credits == 3
    db.refresh(grade)
    assert grade.credits == 3


# ==========================================================
# [5단계] 정렬 / 통계
# ==========================================================

def test_student_grades_ordered_by_year_then_term(db, seed):
    student = seed.student()
    order = [(2024, "Fall"), (2023, "Spring"), (2024, "Winter"), (2023, "Fall"), (2024, "Summer")]
    for year, term in order:
        seed.grade(student, seed.course(semester=seed.semester(year, term)), letter="B")

    grades = grade_service.list_student_grades(db, student.id)

    assert [(g.semester.year, g.semester.term) for g in grades] == [
        (2023, "Spring"), (2023, "Fall"), (2024, "Winter"), (2024, "Summer"), (2024, "Fall"),
    ]


def test_student_grades_finalized_only(db, seed):
    student = seed.student()
    seed.grade(student, seed.course(), letter="A", status="finalized")
    seed.grade(student, seed.course(), letter="B", status="graded")

    grades = grade_service.list_student_grades(db, student.id, finalized_only=True)

    assert [g.letter_grade for g in grades] == ["A"]


def test_course_grade_stats(db, seed):
    course = seed.course()
    for letter, percentage in [("A", 95), ("B+", 88), ("B", 84), ("F", 40)]:
        seed.grade(seed.student(), course, letter=letter, percentage=percentage)

    grades = grade_service.list_course_grades(db, course.id)
    stats = grade_service.course_grade_stats(grades)

    assert [g.total_percentage for g in grades] == [95, 88, 84, 40]
    assert stats == {
        "total": 4,
        "average": 77,      # 307 / 4 = 76.75
        "distribution": {"A": 1, "B": 2, "C": 0, "D": 0, "F": 1},
    }


def test_course_grade_stats_empty():
    assert grade_service.course_grade_stats([]) == {
        "total": 0, "average": 0, "distribution": {"A": 0, "B": 0, "C": 0, "D": 0, "F": 0},
    }
