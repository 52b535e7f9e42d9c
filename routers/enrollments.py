from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import require_staff_token
from models.enrollments import Enrollment as EnrollmentModel
from schemas.enrollments import EnrollmentCreate, EnrollmentDrop, ScoresUpdate
from services import enrollment_service, grade_service
from services.enrollment_service import serialize_enrollment

router = APIRouter(prefix="/enrollments", tags=["수강 정보"])


# ==========================================================
# [1단계] 수강 신청 / 취소
# ==========================================================

# ✅ [CREATE] 수강 신청
@router.post("/")
def enroll_in_course(payload: EnrollmentCreate, db: Session = Depends(get_db)):
    enrollment = enrollment_service.enroll(db, payload.student_id, payload.course_id)
    return {
        "success": True,
        "data": serialize_enrollment(enrollment),
        "message": "Enrolled successfully"
    }


# ✅ [UPDATE] 수강 취소
@router.post("/{enrollment_id}/drop")
def drop_course(enrollment_id: int, payload: EnrollmentDrop, db: Session = Depends(get_db)):
    enrollment = enrollment_service.drop(db, enrollment_id, payload.reason)
    return {
        "success": True,
        "data": serialize_enrollment(enrollment),
        "message": "Course dropped successfully"
    }


# ==========================================================
# [2단계] 조회
# ==========================================================

# ✅ [READ] 학생별 수강 목록 (상태 필터)
@router.get("/student/{student_id}")
def read_student_enrollments(student_id: int, status: str = None, db: Session = Depends(get_db)):
    grade_service.get_student_or_404(db, student_id)
    query = db.query(EnrollmentModel).filter(EnrollmentModel.student_id == student_id)
    if status:
        query = query.filter(EnrollmentModel.status == status)
    return {
        "success": True,
        "data": [serialize_enrollment(e) for e in query.order_by(EnrollmentModel.id).all()],
        "message": "Enrollments fetched successfully"
    }


# ✅ [READ] 강좌별 수강생 목록
@router.get("/course/{course_id}")
def read_course_enrollments(course_id: int, db: Session = Depends(get_db)):
    grade_service.get_course_or_404(db, course_id)
    records = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.course_id == course_id)
        .order_by(EnrollmentModel.id)
        .all()
    )
    return {
        "success": True,
        "data": [serialize_enrollment(e) for e in records],
        "message": "Course enrollments fetched successfully"
    }


# ✅ [READ] 수강 상세
@router.get("/{enrollment_id}")
def read_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    enrollment = enrollment_service.get_enrollment_or_404(db, enrollment_id)
    return {
        "success": True,
        "data": serialize_enrollment(enrollment),
        "message": "Enrollment fetched successfully"
    }


# ==========================================================
# [3단계] 원점수 입력 (교사)
# ==========================================================

# ✅ [UPDATE] 항목별 원점수 기록 - 허용된 필드만 받음
@router.put("/{enrollment_id}/scores", dependencies=[Depends(require_staff_token)])
def update_enrollment_scores(enrollment_id: int, payload: ScoresUpdate, db: Session = Depends(get_db)):
    enrollment = enrollment_service.update_scores(db, enrollment_id, payload)
    return {
        "success": True,
        "data": serialize_enrollment(enrollment),
        "message": "Scores updated successfully"
    }
