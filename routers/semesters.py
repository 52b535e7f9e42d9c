from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.semesters import Semester as SemesterModel, term_rank
from schemas.semesters import SemesterCreate, Semester as SemesterSchema
from services.errors import NotFound

router = APIRouter(prefix="/semesters", tags=["학기 정보"])


# ✅ [CREATE] 학기 추가 - 현재 학기로 지정하면 나머지 학기의 is_current 해제
@router.post("/")
def create_semester(semester: SemesterCreate, db: Session = Depends(get_db)):
    if semester.is_current:
        db.query(SemesterModel).update({"is_current": False})
    db_semester = SemesterModel(**semester.model_dump())
    db.add(db_semester)
    db.commit()
    db.refresh(db_semester)
    return {
        "success": True,
        "data": SemesterSchema.model_validate(db_semester).model_dump(),
        "message": "학기 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 학기 조회 (연도/학기 순)
@router.get("/")
def read_semesters(db: Session = Depends(get_db)):
    records = db.query(SemesterModel).order_by(SemesterModel.year, term_rank).all()
    return {
        "success": True,
        "data": [SemesterSchema.model_validate(r).model_dump() for r in records],
        "message": "전체 학기 조회 완료"
    }


# ✅ [READ] 현재 학기
@router.get("/current")
def read_current_semester(db: Session = Depends(get_db)):
    semester = db.query(SemesterModel).filter(SemesterModel.is_current.is_(True)).first()
    if semester is None:
        raise NotFound("No current semester configured")
    return {
        "success": True,
        "data": SemesterSchema.model_validate(semester).model_dump(),
        "message": f"{semester.name} 기준 설정 반환"
    }
