from sqlalchemy import Column, Integer, String, Boolean, case
from database.db import Base

# ✅ 같은 연도 안에서의 학기 순서 (성적표/이력 정렬 기준)
TERM_ORDER = {"Winter": 0, "Spring": 1, "Summer": 2, "Fall": 3}


class Semester(Base):
    __tablename__ = "semesters"  # 학기 정보 테이블

    id = Column(Integer, primary_key=True, index=True)        # 학기 고유 ID
    name = Column(String(50), nullable=False)                 # 학기명 (예: Fall 2024)
    year = Column(Integer, nullable=False)                    # 연도
    term = Column(String(10), nullable=False)                 # Winter / Spring / Summer / Fall
    is_current = Column(Boolean, default=False)               # 현재 학기 여부 (하나만 True)
    registration_open = Column(Boolean, default=False)        # 수강신청 가능 여부


# ✅ ORDER BY 용 학기 순서 표현식
term_rank = case(TERM_ORDER, value=Semester.term, else_=len(TERM_ORDER))
