"""
schemas/enrollments.py

- 수강 신청/취소 및 원점수 입력 DTO
- 원점수 입력은 허용된 다섯 항목만 받으며(extra="forbid") 만점 0 이하 값은 입력 단계에서 거부
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional


class EnrollmentCreate(BaseModel):
    student_id: int
    course_id: int

    model_config = ConfigDict(extra="forbid")


class EnrollmentDrop(BaseModel):
    reason: Optional[str] = Field(None, max_length=200)

    model_config = ConfigDict(extra="forbid")


class AssignmentScore(BaseModel):
    name: Optional[str] = None
    score: float = Field(..., ge=0)
    max_score: float = Field(..., gt=0)

    model_config = ConfigDict(extra="forbid")


class ExamScore(BaseModel):
    score: Optional[float] = Field(None, ge=0)      # None = 미입력
    max_score: float = Field(100, gt=0)

    model_config = ConfigDict(extra="forbid")


class AttendanceRecord(BaseModel):
    present: int = Field(0, ge=0)
    total: int = Field(0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _present_within_total(self):
        if self.present > self.total:
            raise ValueError("present must not exceed total")
        return self


class ScoresUpdate(BaseModel):
    """보낸 항목만 교체 (None 인 항목은 기존 값 유지)"""
    assignments: Optional[List[AssignmentScore]] = None
    midterm: Optional[ExamScore] = None
    final: Optional[ExamScore] = None
    attendance: Optional[AttendanceRecord] = None
    participation: Optional[ExamScore] = None

    model_config = ConfigDict(extra="forbid")
