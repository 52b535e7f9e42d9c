"""
services/grade_service.py

- 성적 부여 / 직접 입력 / 확정 / 일괄 확정 / GPA 집계 등 DB 변경을 동반하는 성적 로직
- 계산은 services/grade_engine.py 에 위임하고, 여기서는 조회·저장과 상태 전이만 다룬다.
- 모든 함수는 호출자가 넘겨준 SQLAlchemy Session 을 사용하며 예외는 그대로 호출자에게 전파한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import settings
from models.courses import Course as CourseModel
from models.enrollments import Enrollment as EnrollmentModel
from models.grades import Grade as GradeModel
from models.semesters import Semester as SemesterModel, term_rank
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel  # noqa: F401  (relationship 등록용)
from models.teachers import Teacher as TeacherModel  # noqa: F401  (relationship 등록용)
from services import grade_engine
from services.errors import GradeAlreadyFinalized, GradeConflict, GradeFinalized, NotFound

logger = logging.getLogger(__name__)

@dataclass
class GPAResult:
    gpa: float = 0.0
    total_credits: int = 0
    total_quality_points: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def _now():
    return datetime.now(timezone.utc)


# ==========================================================
# [공통] 조회 헬퍼
# ==========================================================

def get_grade_or_404(db: Session, grade_id: int) -> GradeModel:
    grade = db.query(GradeModel).filter(GradeModel.id == grade_id).first()
    if grade is None:
        raise NotFound(f"Grade {grade_id} not found")
    return grade


def get_course_or_404(db: Session, course_id: int) -> CourseModel:
    course = db.query(CourseModel).filter(CourseModel.id == course_id).first()
    if course is None:
        raise NotFound(f"Course {course_id} not found")
    return course


def get_student_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise NotFound(f"Student {student_id} not found")
    return student


def find_grade(db: Session, student_id: int, course_id: int) -> Optional[GradeModel]:
    return (
        db.query(GradeModel)
        .filter(GradeModel.student_id == student_id, GradeModel.course_id == course_id)
        .first()
    )


def _ensure_mutable(grade: Optional[GradeModel]) -> None:
    if grade is not None and grade.status == "finalized":
        logger.warning(f"확정된 성적 수정 시도 거부: grade_id={grade.id}")
        raise GradeFinalized("Grade has already been finalized and cannot be modified")


def _course_credits(course: CourseModel) -> int:
    if course.subject is not None and course.subject.credits:
        return course.subject.credits
    return settings.DEFAULT_COURSE_CREDITS


def _save_new_grade(db: Session, grade: GradeModel) -> None:
    db.add(grade)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise GradeConflict(
            f"Grade for student {grade.student_id} in course {grade.course_id} was created concurrently"
        ) from None


# ==========================================================
# [1단계] 성적 부여 (원점수 기반 산출)
# ==========================================================

def assign_or_update_grade(
    db: Session,
    enrollment_id: int,
    graded_by: Optional[int] = None,
    remarks: Optional[str] = None,
) -> GradeModel:
    """수강 원점수와 강좌 평가 비율로 성적을 산출해 저장(없으면 생성, 있으면 덮어쓰기)한다."""
    enrollment = db.query(EnrollmentModel).filter(EnrollmentModel.id == enrollment_id).first()
    if enrollment is None:
        raise NotFound(f"Enrollment {enrollment_id} not found")
    course = enrollment.course
    if course is None:
        raise NotFound(f"Course for enrollment {enrollment_id} not found")

    grade = find_grade(db, enrollment.student_id, course.id)
    _ensure_mutable(grade)

    policy = grade_engine.GradingPolicy.from_course(course)
    weighted = grade_engine.compute_component_scores(enrollment.scores, policy)
    percentage = grade_engine.total_percentage(weighted)
    letter, points = grade_engine.letter_grade_of(percentage)
    credits = _course_credits(course)

    fields = {
        "component_assignments": weighted.assignments,
        "component_midterm": weighted.midterm,
        "component_final": weighted.final,
        "component_attendance": weighted.attendance,
        "component_participation": weighted.participation,
        "total_percentage": percentage,
        "letter_grade": letter,
        "grade_points": points,
        "credits": credits,
        "quality_points": grade_engine.quality_points(points, credits),
        "status": "graded",
        "graded_by": graded_by,
        "graded_at": _now(),
        "remarks": remarks,
    }

    if grade is None:
        grade = GradeModel(
            student_id=enrollment.student_id,
            course_id=course.id,
            enrollment_id=enrollment.id,
            semester_id=course.semester_id,
            **fields,
        )
        _save_new_grade(db, grade)
    else:
        for key, value in fields.items():
            setattr(grade, key, value)

    enrollment.status = "graded"
    db.commit()
    db.refresh(grade)
    logger.info(
        f"성적 산출 완료: grade_id={grade.id} enrollment_id={enrollment.id} "
        f"total={percentage} letter={letter}"
    )
    return grade


# ==========================================================
# [2단계] 성적 직접 입력 (등급 지정)
# ==========================================================

def record_direct_grade(
    db: Session,
    student_id: int,
    course_id: int,
    letter_grade: str,
    percentage: Optional[int] = None,
    graded_by: Optional[int] = None,
    remarks: Optional[str] = None,
) -> GradeModel:
    points = grade_engine.grade_points_for(letter_grade)
    get_student_or_404(db, student_id)
    course = get_course_or_404(db, course_id)

    grade = find_grade(db, student_id, course_id)
    _ensure_mutable(grade)

    enrollment = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.student_id == student_id, EnrollmentModel.course_id == course_id)
        .first()
    )
    credits = grade.credits if grade is not None else _course_credits(course)

    fields = {
        "letter_grade": letter_grade,
        "total_percentage": percentage or 0,
        "grade_points": points,
        "quality_points": grade_engine.quality_points(points, credits),
        "status": "graded",
        "graded_by": graded_by,
        "graded_at": _now(),
        "remarks": remarks,
    }

    if grade is None:
        grade = GradeModel(
            student_id=student_id,
            course_id=course_id,
            enrollment_id=enrollment.id if enrollment else None,
            semester_id=course.semester_id,
            credits=credits,
            **fields,
        )
        _save_new_grade(db, grade)
    else:
        for key, value in fields.items():
            setattr(grade, key, value)

    if enrollment is not None:
        enrollment.status = "graded"
    db.commit()
    db.refresh(grade)
    logger.info(f"성적 직접 입력: grade_id={grade.id} letter={letter_grade}")
    return grade


# ==========================================================
# [3단계] GPA 집계
# ==========================================================

def compute_gpa(db: Session, student_id: int, semester_id: Optional[int] = None) -> GPAResult:
    """확정(finalized) 성적만으로 학점 가중 평균 평점을 계산한다. 재수강 중복 제거 없음."""
    query = db.query(GradeModel).filter(
        GradeModel.student_id == student_id,
        GradeModel.status == "finalized",
    )
    if semester_id is not None:
        query = query.filter(GradeModel.semester_id == semester_id)
    grades = query.all()

    if not grades:
        return GPAResult()

    total_credits = sum(g.credits for g in grades)
    total_qp = sum(g.quality_points for g in grades)
    gpa = grade_engine.round_half_up(total_qp / total_credits, 2) if total_credits else 0.0
    return GPAResult(
        gpa=gpa,
        total_credits=total_credits,
        total_quality_points=grade_engine.round_half_up(total_qp, 2),
    )


def _refresh_student_gpa(db: Session, student_id: int) -> GPAResult:
    gpa = compute_gpa(db, student_id)
    db.query(StudentModel).filter(StudentModel.id == student_id).update(
        {"cgpa": gpa.gpa, "total_credits": gpa.total_credits},
        synchronize_session="fetch",
    )
    return gpa


# ==========================================================
# [4단계] 성적 확정
# ==========================================================

def finalize_grade(db: Session, grade_id: int, atomic: Optional[bool] = None) -> GradeModel:
    """성적을 확정하고 수강 상태 전이 + 누적 GPA 재계산을 수행한다.

    상태 전이는 조건부 UPDATE(compare-and-set)로 처리하므로 동시에 두 번 확정되지 않는다.
    atomic=True 면 세 쓰기(Grade, Enrollment, Student)를 한 번에 커밋하고,
    False 면 순서대로 각각 커밋한다(중간 실패 시 앞선 쓰기는 롤백되지 않음).
    """
    if atomic is None:
        atomic = settings.GRADE_FINALIZE_ATOMIC

    grade = get_grade_or_404(db, grade_id)
    if grade.status == "finalized":
        logger.warning(f"이미 확정된 성적 재확정 시도: grade_id={grade_id}")
        raise GradeAlreadyFinalized("Grade is already finalized")

    try:
        updated = (
            db.query(GradeModel)
            .filter(GradeModel.id == grade_id, GradeModel.status != "finalized")
            .update({"status": "finalized", "finalized_at": _now()}, synchronize_session="fetch")
        )
        if updated == 0:
            raise GradeAlreadyFinalized("Grade is already finalized")
        if not atomic:
            db.commit()

        # 수강 상태: F 면 failed, 그 외 completed
        if grade.enrollment_id is not None:
            db.query(EnrollmentModel).filter(EnrollmentModel.id == grade.enrollment_id).update(
                {"status": "failed" if grade.letter_grade == grade_engine.FAIL_LETTER else "completed"},
                synchronize_session="fetch",
            )
            if not atomic:
                db.commit()

        gpa = _refresh_student_gpa(db, grade.student_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(grade)
    logger.info(
        f"성적 확정: grade_id={grade.id} letter={grade.letter_grade} "
        f"student_id={grade.student_id} cgpa={gpa.gpa}"
    )
    return grade


def bulk_finalize(db: Session, course_id: int) -> int:
    """강좌의 graded 상태 성적을 한 건씩 확정한다. 앞서 확정된 건은 롤백하지 않는다."""
    get_course_or_404(db, course_id)
    grade_ids = [
        row.id
        for row in db.query(GradeModel.id)
        .filter(GradeModel.course_id == course_id, GradeModel.status == "graded")
        .order_by(GradeModel.id)
        .all()
    ]

    count = 0
    for grade_id in grade_ids:
        try:
            finalize_grade(db, grade_id)
        except GradeAlreadyFinalized:
            # 목록 조회 이후 다른 요청이 먼저 확정한 건 - 전이 건수에서 제외
            logger.info(f"일괄 확정 중 이미 확정된 성적 건너뜀: grade_id={grade_id}")
            continue
        count += 1

    logger.info(f"일괄 확정 완료: course_id={course_id} finalized={count}")
    return count


# ==========================================================
# [5단계] 정렬된 성적 목록
# ==========================================================

def list_student_grades(
    db: Session,
    student_id: int,
    semester_id: Optional[int] = None,
    finalized_only: bool = False,
) -> List[GradeModel]:
    """학생 성적을 (연도, 학기) 오름차순으로 반환한다."""
    query = (
        db.query(GradeModel)
        .outerjoin(SemesterModel, SemesterModel.id == GradeModel.semester_id)
        .filter(GradeModel.student_id == student_id)
    )
    if semester_id is not None:
        query = query.filter(GradeModel.semester_id == semester_id)
    if finalized_only:
        query = query.filter(GradeModel.status == "finalized")
    return query.order_by(SemesterModel.year, term_rank, GradeModel.id).all()


def list_course_grades(db: Session, course_id: int) -> List[GradeModel]:
    get_course_or_404(db, course_id)
    return (
        db.query(GradeModel)
        .filter(GradeModel.course_id == course_id)
        .order_by(GradeModel.total_percentage.desc(), GradeModel.id)
        .all()
    )


def course_grade_stats(grades: List[GradeModel]) -> Dict[str, object]:
    total = len(grades)
    average = grade_engine.round_half_up(sum(g.total_percentage for g in grades) / total) if total else 0
    distribution = {
        band: sum(1 for g in grades if g.letter_grade.startswith(band))
        for band in ("A", "B", "C", "D")
    }
    distribution["F"] = sum(1 for g in grades if g.letter_grade == grade_engine.FAIL_LETTER)
    return {"total": total, "average": average, "distribution": distribution}


def serialize_grade(grade: GradeModel) -> Dict[str, object]:
    return {
        "id": grade.id,
        "student_id": grade.student_id,
        "course_id": grade.course_id,
        "enrollment_id": grade.enrollment_id,
        "semester_id": grade.semester_id,
        "component_scores": {
            "assignments": grade.component_assignments,
            "midterm": grade.component_midterm,
            "final": grade.component_final,
            "attendance": grade.component_attendance,
            "participation": grade.component_participation,
        },
        "total_percentage": grade.total_percentage,
        "letter_grade": grade.letter_grade,
        "grade_points": grade.grade_points,
        "credits": grade.credits,
        "quality_points": grade.quality_points,
        "status": grade.status,
        "graded_by": grade.graded_by,
        "graded_at": grade.graded_at.isoformat() if grade.graded_at else None,
        "finalized_at": grade.finalized_at.isoformat() if grade.finalized_at else None,
        "remarks": grade.remarks,
    }
