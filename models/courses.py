from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base

class Course(Base):
    __tablename__ = "courses"  # 개설 강좌 테이블 (과목 x 학기 x 분반)
    __table_args__ = (
        UniqueConstraint("subject_id", "semester_id", "section", name="uq_course_offering"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)      # 과목
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False)    # 학기
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True)       # 담당 교사
    section = Column(String(5), nullable=False, default="A")                     # 분반
    max_capacity = Column(Integer, nullable=False, default=30)                   # 정원
    current_enrollment = Column(Integer, nullable=False, default=0)              # 현재 수강 인원
    is_active = Column(Boolean, default=True)
    status = Column(String(20), nullable=False, default="upcoming")              # upcoming / ongoing / completed

    # ✅ 평가 비율 (%) - 다섯 항목 합계는 반드시 100
    policy_assignments = Column(Integer, nullable=False, default=20)
    policy_midterm = Column(Integer, nullable=False, default=25)
    policy_final = Column(Integer, nullable=False, default=35)
    policy_attendance = Column(Integer, nullable=False, default=10)
    policy_participation = Column(Integer, nullable=False, default=10)

    subject = relationship("Subject")
    semester = relationship("Semester")
    teacher = relationship("Teacher", back_populates="courses")
    enrollments = relationship("Enrollment", back_populates="course")
    grades = relationship("Grade", back_populates="course")
