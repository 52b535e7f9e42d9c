from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# ✅ 원점수 기반 성적 산출 요청
class GradeAssign(BaseModel):
    graded_by: Optional[int] = None                      # 성적 입력 교사 ID
    remarks: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="forbid")


# ✅ 등급 직접 입력 요청
class DirectGradeCreate(BaseModel):
    student_id: int                                      # 학생 ID
    course_id: int                                       # 강좌 ID
    letter_grade: str                                    # A+ ~ F, W/I/P/NP
    percentage: Optional[int] = Field(None, ge=0, le=100)
    graded_by: Optional[int] = None
    remarks: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
