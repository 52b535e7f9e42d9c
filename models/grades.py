from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Grade(Base):
    __tablename__ = "grades"  # 강좌별 최종 성적 테이블 (학생 x 강좌 당 1건)
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_grade_student_course"),
    )

    id = Column(Integer, primary_key=True, index=True)                           # 성적 고유 ID
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), nullable=True)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=True, index=True)

    # ✅ 평가 비율 적용 후 항목별 환산 점수 (0~100 척도)
    component_assignments = Column(Float, nullable=False, default=0.0)
    component_midterm = Column(Float, nullable=False, default=0.0)
    component_final = Column(Float, nullable=False, default=0.0)
    component_attendance = Column(Float, nullable=False, default=0.0)
    component_participation = Column(Float, nullable=False, default=0.0)

    total_percentage = Column(Integer, nullable=False, default=0)                # 총점 (반올림 정수)
    letter_grade = Column(String(2), nullable=False)                             # A+ ~ F, W/I/P/NP
    grade_points = Column(Float, nullable=False)                                 # 0.0 ~ 4.0
    credits = Column(Integer, nullable=False)                                    # 성적 부여 시점의 학점
    quality_points = Column(Float, nullable=False)                               # grade_points x credits

    status = Column(String(20), nullable=False, default="pending")               # pending / graded / finalized / appealed
    graded_by = Column(Integer, ForeignKey("teachers.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True))
    finalized_at = Column(DateTime(timezone=True))
    remarks = Column(String(500))

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    student = relationship("Student", back_populates="grades")
    course = relationship("Course", back_populates="grades")
    enrollment = relationship("Enrollment")
    semester = relationship("Semester")
    grader = relationship("Teacher")
