from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from models.students import Student as StudentModel
from schemas.common import Pagination, make_meta
from schemas.students import StudentCreate, Student as StudentSchema
from services import crud_service, grade_service

router = APIRouter(prefix="/students", tags=["학생 정보"])


def _student_data(student: StudentModel) -> dict:
    return StudentSchema.model_validate(student).model_dump()


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학생 정보 추가
@router.post("/")
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    db_student = crud_service.save(
        db, StudentModel(**student.model_dump()), f"Email {student.email} is already registered"
    )
    return {
        "success": True,
        "data": _student_data(db_student),
        "message": "학생 정보가 성공적으로 추가되었습니다"
    }


# ✅ [READ] 전체 학생 조회 (페이지네이션)
@router.get("/")
def read_students(p: Pagination = Depends(), db: Session = Depends(get_db)):
    query = db.query(StudentModel).order_by(StudentModel.id)
    total = query.count()
    records = query.offset(p.offset).limit(p.size).all()
    return {
        "success": True,
        "data": [_student_data(r) for r in records],
        "meta": make_meta(total, p.page, p.size).model_dump(),
        "message": "전체 학생 정보 조회 완료"
    }


# ==========================================================
# [2단계] 정적 라우터 (검색)
# ==========================================================

# ✅ [SEARCH] 이름으로 학생 검색
@router.get("/search")
def search_students(name: str = None, db: Session = Depends(get_db)):
    query = db.query(StudentModel)
    if name:
        query = query.filter(StudentModel.student_name.contains(name))
    results = query.order_by(StudentModel.id).all()
    return {
        "success": True,
        "data": [_student_data(r) for r in results],
        "message": "학생 검색 결과 조회 성공"
    }


# ==========================================================
# [3단계] 동적 라우터 (개별 조회/수정)
# ==========================================================

# ✅ [SUMMARY] 특정 학생 누적 평점 요약
@router.get("/{student_id}/grade-summary")
def get_student_grade_summary(student_id: int, db: Session = Depends(get_db)):
    student = grade_service.get_student_or_404(db, student_id)
    gpa = grade_service.compute_gpa(db, student_id)
    return {
        "success": True,
        "data": {
            "student_id": student.id,
            "cgpa": student.cgpa,
            "total_credits": student.total_credits,
            "computed": gpa.as_dict(),
        },
        "message": f"학생 ID {student_id} 성적 요약 조회 성공"
    }


# ✅ [READ] 특정 학생 상세 조회
@router.get("/{student_id}")
def read_student(student_id: int, db: Session = Depends(get_db)):
    student = grade_service.get_student_or_404(db, student_id)
    return {
        "success": True,
        "data": _student_data(student),
        "message": "학생 상세 정보 조회 성공"
    }


# ✅ [UPDATE] 특정 학생 정보 수정 (평점/학점 필드는 수정 불가)
@router.put("/{student_id}")
def update_student(student_id: int, updated: StudentCreate, db: Session = Depends(get_db)):
    student = grade_service.get_student_or_404(db, student_id)

    for key, value in updated.model_dump().items():
        setattr(student, key, value)

    crud_service.commit_or_conflict(db, f"Email {updated.email} is already registered")
    db.refresh(student)
    return {
        "success": True,
        "data": _student_data(student),
        "message": "학생 정보가 성공적으로 수정되었습니다"
    }
