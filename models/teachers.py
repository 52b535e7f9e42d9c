from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database.db import Base

class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)      # 교사 고유 ID (PK)
    teacher_name = Column(String(100), nullable=False)      # 교사 이름
    email = Column(String(100), unique=True)                # 이메일
    role = Column(String(20), nullable=False, default="teacher")  # 역할 (teacher / admin)

    # ✅ 이 교사가 담당하는 강좌들 (1:N 관계)
    courses = relationship("Course", back_populates="teacher")
