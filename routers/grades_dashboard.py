from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.teachers import Teacher as TeacherModel
from services import analytics_service
from services.errors import NotFound

router = APIRouter(prefix="/grades/dashboard", tags=["grades"])

# ==========================================================
# [대시보드] 교사 성적 요약
# ==========================================================
@router.get("/teacher/{teacher_id}")
def get_teacher_dashboard(teacher_id: int, db: Session = Depends(get_db)):
    teacher = db.query(TeacherModel).filter(TeacherModel.id == teacher_id).first()
    if teacher is None:
        raise NotFound(f"Teacher {teacher_id} not found")

    overview = analytics_service.teacher_overview(db, teacher_id)
    return {
        "success": True,
        "data": overview,
        "message": "Teacher analytics fetched successfully" if overview["total_courses"]
        else "No courses found for teacher"
    }

# ==========================================================
# [대시보드] 전체(관리자) 성적 요약
# ==========================================================
@router.get("/admin")
def get_admin_dashboard(db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": analytics_service.admin_overview(db),
        "message": "Admin grade analytics fetched successfully"
    }
