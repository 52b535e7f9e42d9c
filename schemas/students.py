from pydantic import BaseModel, ConfigDict
from typing import Optional

# ✅ 입력용 (POST/PUT 등) - cgpa/total_credits 는 성적 확정 시에만 갱신되므로 제외
class StudentCreate(BaseModel):
    student_name: str                        # 학생 이름
    email: Optional[str] = None              # 이메일
    roll_number: Optional[str] = None        # 학번
    program: Optional[str] = None            # 소속 과정/전공

    model_config = ConfigDict(extra="forbid")

# ✅ 전체 출력용 (GET, 상세조회 등)
class Student(StudentCreate):
    id: int
    cgpa: float = 0.0
    total_credits: int = 0

    model_config = ConfigDict(from_attributes=True)
