from sqlalchemy import Column, Integer, String, Boolean
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)         # 과목 고유 ID (Primary Key)
    name = Column(String(100), nullable=False)                # 과목 이름 (예: Data Structures)
    code = Column(String(10), nullable=False, unique=True)    # 과목 코드 (예: CS101)
    credits = Column(Integer, nullable=False)                 # 학점 (1~6)
    department = Column(String(50), nullable=False)           # 개설 학과
    is_active = Column(Boolean, default=True)                 # 개설 여부
