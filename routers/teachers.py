from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.teachers import Teacher as TeacherModel
from schemas.teachers import TeacherCreate, Teacher as TeacherSchema
from services import crud_service
from services.errors import NotFound

router = APIRouter(prefix="/teachers", tags=["교사 정보"])


# ==========================================================
# [1단계] CRUD 라우터
# ==========================================================

# ✅ [CREATE] 교사 정보 추가
@router.post("/")
def create_teacher(teacher: TeacherCreate, db: Session = Depends(get_db)):
    db_teacher = crud_service.save(
        db, TeacherModel(**teacher.model_dump()), f"Email {teacher.email} is already registered"
    )
    return {
        "success": True,
        "data": TeacherSchema.model_validate(db_teacher).model_dump(),
        "message": "교사 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 교사 조회
@router.get("/")
def read_teachers(db: Session = Depends(get_db)):
    records = db.query(TeacherModel).order_by(TeacherModel.id).all()
    return {
        "success": True,
        "data": [TeacherSchema.model_validate(r).model_dump() for r in records],
        "message": "전체 교사 조회 완료"
    }


# ✅ [READ] 특정 교사 조회
@router.get("/{teacher_id}")
def read_teacher(teacher_id: int, db: Session = Depends(get_db)):
    teacher = db.query(TeacherModel).filter(TeacherModel.id == teacher_id).first()
    if teacher is None:
        raise NotFound(f"Teacher {teacher_id} not found")
    return {
        "success": True,
        "data": TeacherSchema.model_validate(teacher).model_dump(),
        "message": "교사 상세 조회 성공"
    }
