from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.subjects import Subject as SubjectModel
from schemas.subjects import SubjectCreate, Subject as SubjectSchema
from services import crud_service
from services.errors import NotFound

router = APIRouter(prefix="/subjects", tags=["과목 정보"])


def _get_subject(db: Session, subject_id: int) -> SubjectModel:
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise NotFound(f"Subject {subject_id} not found")
    return subject


# ✅ [CREATE] 과목 정보 추가
@router.post("/")
def create_subject(subject: SubjectCreate, db: Session = Depends(get_db)):
    db_subject = crud_service.save(
        db, SubjectModel(**subject.model_dump()), f"Subject code {subject.code} already exists"
    )
    return {
        "success": True,
        "data": SubjectSchema.model_validate(db_subject).model_dump(),
        "message": "과목 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 과목 조회
@router.get("/")
def read_subjects(department: str = None, db: Session = Depends(get_db)):
    query = db.query(SubjectModel)
    if department:
        query = query.filter(SubjectModel.department == department)
    records = query.order_by(SubjectModel.code).all()
    return {
        "success": True,
        "data": [SubjectSchema.model_validate(r).model_dump() for r in records],
        "message": "전체 과목 조회 완료"
    }


# ✅ [READ] 특정 과목 조회
@router.get("/{subject_id}")
def read_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = _get_subject(db, subject_id)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(subject).model_dump(),
        "message": "과목 상세 조회 성공"
    }


# ✅ [UPDATE] 과목 정보 수정
# 학점 변경은 이미 부여된 성적에는 반영되지 않음 (성적은 부여 시점 학점을 보관)
@router.put("/{subject_id}")
def update_subject(subject_id: int, updated: SubjectCreate, db: Session = Depends(get_db)):
    subject = _get_subject(db, subject_id)

    for key, value in updated.model_dump().items():
        setattr(subject, key, value)

    crud_service.commit_or_conflict(db, f"Subject code {updated.code} already exists")
    db.refresh(subject)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(subject).model_dump(),
        "message": "과목 정보가 성공적으로 수정되었습니다"
    }
