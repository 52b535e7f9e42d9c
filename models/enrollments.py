from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


def empty_scores():
    """입력 전 원점수 구조 (교사가 기록하기 전까지는 모두 비어 있음)"""
    return {
        "assignments": [],
        "midterm": {"score": None, "max_score": 100},
        "final": {"score": None, "max_score": 100},
        "attendance": {"present": 0, "total": 0},
        "participation": {"score": None, "max_score": 100},
    }


class Enrollment(Base):
    __tablename__ = "enrollments"  # 수강 신청/원점수 테이블
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False)
    enrolled_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # enrolled / graded / dropped / completed / failed / withdrawn
    status = Column(String(20), nullable=False, default="enrolled")
    scores = Column(JSON, nullable=False, default=empty_scores)     # 항목별 원점수
    drop_reason = Column(String(200))
    notes = Column(String(500))

    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    semester = relationship("Semester")
