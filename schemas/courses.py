from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

from services.grade_engine import GradingPolicy


# ✅ 평가 비율 (%) - 합계 100 검증은 서비스 계층(PolicyInvalid)에서 수행
class GradingPolicyIn(BaseModel):
    assignments: int = 20
    midterm: int = 25
    final: int = 35
    attendance: int = 10
    participation: int = 10

    model_config = ConfigDict(extra="forbid")

    def to_policy(self) -> GradingPolicy:
        return GradingPolicy(**self.model_dump())


# ✅ 입력용
class CourseCreate(BaseModel):
    subject_id: int                                          # 과목 ID
    semester_id: int                                         # 학기 ID
    teacher_id: Optional[int] = None                         # 담당 교사 ID
    section: str = Field("A", max_length=5)                  # 분반
    max_capacity: int = Field(30, ge=1, le=500)              # 정원
    status: Literal["upcoming", "ongoing", "completed"] = "upcoming"
    grading_policy: GradingPolicyIn = Field(default_factory=GradingPolicyIn)

    model_config = ConfigDict(extra="forbid")


# ✅ 수정 가능한 필드만 허용
class CourseUpdate(BaseModel):
    teacher_id: Optional[int] = None
    max_capacity: Optional[int] = Field(None, ge=1, le=500)
    is_active: Optional[bool] = None
    status: Optional[Literal["upcoming", "ongoing", "completed"]] = None
    grading_policy: Optional[GradingPolicyIn] = None

    model_config = ConfigDict(extra="forbid")
