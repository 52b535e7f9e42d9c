import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.db import get_db
from dependencies.security import require_staff_token
from models.courses import Course as CourseModel
from models.semesters import Semester as SemesterModel
from models.subjects import Subject as SubjectModel
from schemas.courses import CourseCreate, CourseUpdate
from services import crud_service, grade_engine, grade_service
from services.errors import EnrollmentRejected, NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["강좌 정보"])


def _course_data(course: CourseModel) -> dict:
    return {
        "id": course.id,
        "subject_id": course.subject_id,
        "semester_id": course.semester_id,
        "teacher_id": course.teacher_id,
        "section": course.section,
        "max_capacity": course.max_capacity,
        "current_enrollment": course.current_enrollment,
        "is_active": course.is_active,
        "status": course.status,
        "grading_policy": {
            name: getattr(course, f"policy_{name}") for name in grade_engine.POLICY_FIELDS
        },
    }


def _apply_policy(course: CourseModel, policy: grade_engine.GradingPolicy) -> None:
    for name in grade_engine.POLICY_FIELDS:
        setattr(course, f"policy_{name}", getattr(policy, name))


# ==========================================================
# [1단계] 강좌 개설 / 조회
# ==========================================================

# ✅ [CREATE] 강좌 개설 - 평가 비율 합계 100 검증 (PolicyInvalid)
@router.post("/", dependencies=[Depends(require_staff_token)])
def create_course(course: CourseCreate, db: Session = Depends(get_db)):
    policy = grade_engine.validate_grading_policy(course.grading_policy.to_policy())

    if db.query(SubjectModel).filter(SubjectModel.id == course.subject_id).first() is None:
        raise NotFound(f"Subject {course.subject_id} not found")
    if db.query(SemesterModel).filter(SemesterModel.id == course.semester_id).first() is None:
        raise NotFound(f"Semester {course.semester_id} not found")

    db_course = CourseModel(**course.model_dump(exclude={"grading_policy"}))
    _apply_policy(db_course, policy)
    db_course = crud_service.save(
        db, db_course,
        f"Section {course.section} of subject {course.subject_id} is already offered in semester {course.semester_id}",
    )
    logger.info(f"강좌 개설: course_id={db_course.id} policy={policy}")
    return {
        "success": True,
        "data": _course_data(db_course),
        "message": "강좌가 성공적으로 개설되었습니다"
    }


# ✅ [READ] 강좌 목록 (학기/교사 필터)
@router.get("/")
def read_courses(semester_id: int = None, teacher_id: int = None, db: Session = Depends(get_db)):
    query = db.query(CourseModel)
    if semester_id is not None:
        query = query.filter(CourseModel.semester_id == semester_id)
    if teacher_id is not None:
        query = query.filter(CourseModel.teacher_id == teacher_id)
    return {
        "success": True,
        "data": [_course_data(c) for c in query.order_by(CourseModel.id).all()],
        "message": "강좌 목록 조회 완료"
    }


# ✅ [READ] 강좌 상세
@router.get("/{course_id}")
def read_course(course_id: int, db: Session = Depends(get_db)):
    course = grade_service.get_course_or_404(db, course_id)
    return {
        "success": True,
        "data": _course_data(course),
        "message": "강좌 상세 조회 성공"
    }


# ==========================================================
# [2단계] 강좌 수정 (허용 필드만)
# ==========================================================

# ✅ [UPDATE] 강좌 정보/평가 비율 수정
@router.patch("/{course_id}", dependencies=[Depends(require_staff_token)])
def update_course(course_id: int, updated: CourseUpdate, db: Session = Depends(get_db)):
    course = grade_service.get_course_or_404(db, course_id)
    changes = updated.model_dump(exclude_none=True, exclude={"grading_policy"})

    # 정원은 현재 수강 인원 아래로 줄일 수 없음
    if updated.max_capacity is not None and updated.max_capacity < course.current_enrollment:
        raise EnrollmentRejected(
            f"max_capacity {updated.max_capacity} is below current enrollment {course.current_enrollment}"
        )

    if updated.grading_policy is not None:
        policy = grade_engine.validate_grading_policy(updated.grading_policy.to_policy())
        _apply_policy(course, policy)

    for key, value in changes.items():
        setattr(course, key, value)

    db.commit()
    db.refresh(course)
    return {
        "success": True,
        "data": _course_data(course),
        "message": "강좌 정보가 성공적으로 수정되었습니다"
    }
