from pydantic import BaseModel, ConfigDict, Field
from typing import Literal

DEPARTMENTS = Literal[
    "Computer Science", "Mathematics", "Physics", "Chemistry", "Biology", "English",
    "History", "Economics", "Business", "Engineering", "Arts", "Other",
]

# ✅ 입력용: POST 요청에서 사용할 스키마
class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)          # 과목 이름
    code: str = Field(..., pattern=r"^[A-Z]{2,4}\d{3,4}$")       # 과목 코드 (예: CS101, MATH201)
    credits: int = Field(..., ge=1, le=6)                         # 학점
    department: DEPARTMENTS = "Other"                             # 개설 학과

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

# ✅ 출력용: GET, POST 응답 등에서 사용할 스키마
class Subject(SubjectCreate):
    id: int                                  # 고유 과목 ID
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True)
