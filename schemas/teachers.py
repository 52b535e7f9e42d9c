from pydantic import BaseModel, ConfigDict
from typing import Optional, Literal

# ✅ 입력용 스키마: 교사 정보를 새로 생성할 때 사용 (POST 요청 등)
class TeacherCreate(BaseModel):
    teacher_name: str                                # 교사 이름
    email: Optional[str] = None                      # 이메일 주소
    role: Literal["teacher", "admin"] = "teacher"    # 권한 구분

    model_config = ConfigDict(extra="forbid")

# ✅ 출력용 스키마: 교사 정보를 조회할 때 사용 (GET 응답 등)
class Teacher(TeacherCreate):
    id: int                                  # 고유 교사 ID

    model_config = ConfigDict(from_attributes=True)
