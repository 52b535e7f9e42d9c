from pydantic import BaseModel, ConfigDict, Field
from typing import Literal

# ✅ 입력용
class SemesterCreate(BaseModel):
    name: str                                               # 학기명 (예: Fall 2024)
    year: int = Field(..., ge=2000, le=2100)                # 연도
    term: Literal["Winter", "Spring", "Summer", "Fall"]     # 학기 구분
    is_current: bool = False                                # 현재 학기 여부
    registration_open: bool = False                         # 수강신청 가능 여부

    model_config = ConfigDict(extra="forbid")

# ✅ 출력용
class Semester(SemesterCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
