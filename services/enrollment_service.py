"""수강 신청 / 취소 / 원점수 기록"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from models.courses import Course as CourseModel
from models.enrollments import Enrollment as EnrollmentModel, empty_scores
from models.students import Student as StudentModel
from schemas.enrollments import ScoresUpdate
from services.errors import EnrollmentRejected, NotFound

logger = logging.getLogger(__name__)


def get_enrollment_or_404(db: Session, enrollment_id: int) -> EnrollmentModel:
    enrollment = db.query(EnrollmentModel).filter(EnrollmentModel.id == enrollment_id).first()
    if enrollment is None:
        raise NotFound(f"Enrollment {enrollment_id} not found")
    return enrollment


def enroll(db: Session, student_id: int, course_id: int) -> EnrollmentModel:
    if db.query(StudentModel).filter(StudentModel.id == student_id).first() is None:
        raise NotFound(f"Student {student_id} not found")
    course = db.query(CourseModel).filter(CourseModel.id == course_id).first()
    if course is None:
        raise NotFound(f"Course {course_id} not found")

    if not course.is_active:
        raise EnrollmentRejected("This course is not active")
    if course.current_enrollment >= course.max_capacity:
        raise EnrollmentRejected("Course is at maximum capacity")

    existing = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.student_id == student_id, EnrollmentModel.course_id == course_id)
        .first()
    )
    if existing is not None:
        if existing.status == "completed":
            raise EnrollmentRejected("Already completed this course")
        if existing.status != "dropped":
            raise EnrollmentRejected(f"Already enrolled in this course ({existing.status})")
        # 취소했던 수강은 같은 행을 재사용 (student, course 유니크)
        existing.status = "enrolled"
        existing.drop_reason = None
        existing.scores = empty_scores()
        enrollment = existing
    else:
        enrollment = EnrollmentModel(
            student_id=student_id,
            course_id=course_id,
            semester_id=course.semester_id,
            status="enrolled",
            scores=empty_scores(),
        )
        db.add(enrollment)

    course.current_enrollment += 1
    db.commit()
    db.refresh(enrollment)
    logger.info(f"수강 신청: enrollment_id={enrollment.id} student_id={student_id} course_id={course_id}")
    return enrollment


def drop(db: Session, enrollment_id: int, reason: Optional[str] = None) -> EnrollmentModel:
    enrollment = get_enrollment_or_404(db, enrollment_id)
    if enrollment.status != "enrolled":
        raise EnrollmentRejected(f"Cannot drop a {enrollment.status} enrollment")

    enrollment.status = "dropped"
    enrollment.drop_reason = reason
    if enrollment.course is not None and enrollment.course.current_enrollment > 0:
        enrollment.course.current_enrollment -= 1
    db.commit()
    db.refresh(enrollment)
    logger.info(f"수강 취소: enrollment_id={enrollment_id}")
    return enrollment


def update_scores(db: Session, enrollment_id: int, update: ScoresUpdate) -> EnrollmentModel:
    """보낸 항목만 교체한다. 성적 산출은 별도로 grade_service.assign_or_update_grade 호출."""
    enrollment = get_enrollment_or_404(db, enrollment_id)
    if enrollment.status in ("dropped", "withdrawn"):
        raise EnrollmentRejected(f"Cannot record scores on a {enrollment.status} enrollment")

    scores = dict(enrollment.scores or empty_scores())
    for key, value in update.model_dump(exclude_none=True).items():
        scores[key] = value
    # JSON 컬럼은 새 객체를 할당해야 변경이 감지됨
    enrollment.scores = scores
    db.commit()
    db.refresh(enrollment)
    return enrollment


def serialize_enrollment(enrollment: EnrollmentModel) -> dict:
    return {
        "id": enrollment.id,
        "student_id": enrollment.student_id,
        "course_id": enrollment.course_id,
        "semester_id": enrollment.semester_id,
        "status": enrollment.status,
        "scores": enrollment.scores,
        "drop_reason": enrollment.drop_reason,
        "enrolled_at": enrollment.enrolled_at.isoformat() if enrollment.enrolled_at else None,
    }
