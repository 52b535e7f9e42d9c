from sqlalchemy import Column, Integer, String, Float
from sqlalchemy.orm import relationship
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)               # 고유 학생 ID (Primary Key)
    student_name = Column(String(100), nullable=False)              # 학생 이름
    email = Column(String(100), unique=True)                        # 이메일
    roll_number = Column(String(30))                                # 학번
    program = Column(String(100))                                   # 소속 과정/전공
    cgpa = Column(Float, nullable=False, default=0.0)               # 누적 평점 (확정 성적 기준)
    total_credits = Column(Integer, nullable=False, default=0)      # 누적 이수 학점

    enrollments = relationship("Enrollment", back_populates="student")
    grades = relationship("Grade", back_populates="student")
