from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_staff_token
from schemas.grades import DirectGradeCreate, GradeAssign
from services import analytics_service, grade_service
from services.grade_service import serialize_grade

router = APIRouter(prefix="/grades", tags=["grades"])

# ==========================================================
# [1단계] 성적 입력 / 확정 라우터 (교사)
# ==========================================================

# ✅ [CREATE] 등급 직접 입력 (없으면 생성, 있으면 수정)
@router.post("/", dependencies=[Depends(require_staff_token)])
def create_grade(payload: DirectGradeCreate, db: Session = Depends(get_db)):
    grade = grade_service.record_direct_grade(
        db,
        student_id=payload.student_id,
        course_id=payload.course_id,
        letter_grade=payload.letter_grade,
        percentage=payload.percentage,
        graded_by=payload.graded_by,
        remarks=payload.remarks,
    )
    return {
        "success": True,
        "data": serialize_grade(grade),
        "message": "Grade created successfully"
    }

# ✅ [ASSIGN] 원점수 + 평가 비율로 성적 산출
@router.post("/assign/{enrollment_id}", dependencies=[Depends(require_staff_token)])
def assign_grade(enrollment_id: int, payload: GradeAssign, db: Session = Depends(get_db)):
    grade = grade_service.assign_or_update_grade(
        db, enrollment_id, graded_by=payload.graded_by, remarks=payload.remarks
    )
    return {
        "success": True,
        "data": serialize_grade(grade),
        "message": "Grade assigned successfully"
    }

# ✅ [FINALIZE] 성적 확정 → 수강 상태 전이 + 누적 GPA 갱신
@router.patch("/finalize/{grade_id}", dependencies=[Depends(require_staff_token)])
def finalize_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = grade_service.finalize_grade(db, grade_id)
    return {
        "success": True,
        "data": serialize_grade(grade),
        "message": "Grade finalized successfully"
    }

# ✅ [BULK FINALIZE] 강좌의 graded 성적 일괄 확정
@router.post("/bulk-finalize/{course_id}", dependencies=[Depends(require_staff_token)])
def bulk_finalize_grades(course_id: int, db: Session = Depends(get_db)):
    count = grade_service.bulk_finalize(db, course_id)
    return {
        "success": True,
        "data": {"course_id": course_id, "finalized": count},
        "message": "Grades finalized successfully"
    }

# ==========================================================
# [2단계] 부분 동적 라우터 (학생/강좌 단위 조회)
# ==========================================================

# ✅ [READ] 학생 성적 목록 (연도/학기 순) + GPA
@router.get("/student/{student_id}")
def get_student_grades(student_id: int, semester_id: int = None, db: Session = Depends(get_db)):
    grade_service.get_student_or_404(db, student_id)
    grades = grade_service.list_student_grades(db, student_id, semester_id=semester_id)
    gpa = grade_service.compute_gpa(db, student_id, semester_id=semester_id)
    return {
        "success": True,
        "data": {
            "grades": [serialize_grade(g) for g in grades],
            "gpa": gpa.as_dict(),
        },
        "message": "Grades fetched successfully"
    }

# ✅ [READ] 학생 GPA (학기 필터 선택)
@router.get("/student/{student_id}/gpa")
def get_student_gpa(student_id: int, semester_id: int = None, db: Session = Depends(get_db)):
    grade_service.get_student_or_404(db, student_id)
    gpa = grade_service.compute_gpa(db, student_id, semester_id=semester_id)
    return {"success": True, "data": gpa.as_dict()}

# ✅ [READ] 강좌 성적 목록 + 통계
@router.get("/course/{course_id}")
def get_course_grades(course_id: int, db: Session = Depends(get_db)):
    grades = grade_service.list_course_grades(db, course_id)
    return {
        "success": True,
        "data": {
            "grades": [serialize_grade(g) for g in grades],
            "stats": grade_service.course_grade_stats(grades),
        },
        "message": "Course grades fetched successfully"
    }

# ✅ [ANALYTICS] 학생 성적 분석 (학기별 GPA 추이, 학과별 평균, 등급 분포)
@router.get("/analytics/{student_id}")
def get_grade_analytics(student_id: int, db: Session = Depends(get_db)):
    return {
        "success": True,
        "data": analytics_service.student_analytics(db, student_id),
        "message": "Analytics fetched successfully"
    }

# ==========================================================
# [3단계] 완전 동적 라우터
# ==========================================================

# ✅ [READ] 특정 성적 조회
@router.get("/{grade_id}")
def read_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = grade_service.get_grade_or_404(db, grade_id)
    return {
        "success": True,
        "data": serialize_grade(grade),
        "message": "Grade fetched successfully"
    }
