"""
services/analytics_service.py

- 학생/교사/관리자용 성적 통계 (등급 분포, 학기별 GPA 추이, 강좌별 평균, 상위 학생 등)
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from models.courses import Course as CourseModel
from models.grades import Grade as GradeModel
from services import grade_engine
from services import grade_service


def build_distribution(grades: Iterable[GradeModel] = ()) -> Dict[str, int]:
    """13단계 등급별 건수 (척도 밖의 등급은 F 로 집계)"""
    distribution = {letter: 0 for letter in grade_engine.SCALE_LETTERS}
    for grade in grades:
        letter = grade.letter_grade or grade_engine.FAIL_LETTER
        if letter in distribution:
            distribution[letter] += 1
        else:
            distribution[grade_engine.FAIL_LETTER] += 1
    return distribution


def average_percentage(grades: List[GradeModel]) -> int:
    if not grades:
        return 0
    return grade_engine.round_half_up(sum(g.total_percentage or 0 for g in grades) / len(grades))


def summarize_students(grades: Iterable[GradeModel]) -> List[Dict[str, Any]]:
    summary: Dict[int, Dict[str, Any]] = {}
    for grade in grades:
        entry = summary.setdefault(grade.student_id, {
            "student_id": grade.student_id,
            "name": grade.student.student_name if grade.student else "Student",
            "total_percentage": 0,
            "grades": 0,
        })
        entry["total_percentage"] += grade.total_percentage or 0
        entry["grades"] += 1

    for entry in summary.values():
        entry["average"] = grade_engine.round_half_up(entry["total_percentage"] / entry["grades"])
    return list(summary.values())


def build_course_breakdown(courses: List[CourseModel], grades: Iterable[GradeModel]) -> List[Dict[str, Any]]:
    breakdown = OrderedDict()
    for course in courses:
        breakdown[course.id] = {
            "course_id": course.id,
            "name": course.subject.name if course.subject else "Course",
            "code": course.subject.code if course.subject else None,
            "semester": course.semester.name if course.semester else None,
            "total_grades": 0,
            "total_percentage": 0,
        }
    for grade in grades:
        entry = breakdown.get(grade.course_id)
        if entry is None:
            continue
        entry["total_grades"] += 1
        entry["total_percentage"] += grade.total_percentage or 0

    for entry in breakdown.values():
        entry["average"] = (
            grade_engine.round_half_up(entry["total_percentage"] / entry["total_grades"])
            if entry["total_grades"] else 0
        )
    return list(breakdown.values())


def _recent(grades: List[GradeModel], limit: int) -> List[Dict[str, Any]]:
    graded = sorted((g for g in grades if g.graded_at), key=lambda g: g.graded_at, reverse=True)
    return [
        {
            "grade_id": g.id,
            "student_id": g.student_id,
            "course_id": g.course_id,
            "letter_grade": g.letter_grade,
            "total_percentage": g.total_percentage,
            "graded_at": g.graded_at.isoformat(),
        }
        for g in graded[:limit]
    ]


# ==========================================================
# 학생 성적 분석
# ==========================================================

def student_analytics(db: Session, student_id: int) -> Dict[str, Any]:
    grade_service.get_student_or_404(db, student_id)
    grades = grade_service.list_student_grades(db, student_id)

    # 학기별 GPA 추이 (정렬 순서 유지)
    by_semester: "OrderedDict[str, Dict[str, float]]" = OrderedDict()
    for grade in grades:
        name = grade.semester.name if grade.semester else "Unassigned"
        bucket = by_semester.setdefault(name, {"credits": 0, "points": 0.0})
        bucket["credits"] += grade.credits
        bucket["points"] += grade.quality_points

    gpa_history = [
        {
            "semester": name,
            "gpa": grade_engine.round_half_up(data["points"] / data["credits"], 2) if data["credits"] else 0,
            "credits": data["credits"],
        }
        for name, data in by_semester.items()
    ]

    # 학과별 평균 점수
    by_department: Dict[str, Dict[str, int]] = {}
    for grade in grades:
        subject = grade.course.subject if grade.course else None
        department = subject.department if subject else "Other"
        bucket = by_department.setdefault(department, {"total": 0, "sum": 0})
        bucket["total"] += 1
        bucket["sum"] += grade.total_percentage or 0

    department_performance = [
        {
            "department": department,
            "average": grade_engine.round_half_up(data["sum"] / data["total"]),
            "courses": data["total"],
        }
        for department, data in by_department.items()
    ]

    distribution = {letter: 0 for letter in grade_engine.SCALE_LETTERS}
    for grade in grades:
        if grade.letter_grade in distribution:
            distribution[grade.letter_grade] += 1

    return {
        "overall_gpa": grade_service.compute_gpa(db, student_id).as_dict(),
        "gpa_history": gpa_history,
        "department_performance": department_performance,
        "distribution": distribution,
        "total_courses": len(grades),
    }


# ==========================================================
# 교사/관리자 대시보드
# ==========================================================

def teacher_overview(db: Session, teacher_id: int) -> Dict[str, Any]:
    courses = db.query(CourseModel).filter(CourseModel.teacher_id == teacher_id).order_by(CourseModel.id).all()
    if not courses:
        return {
            "total_courses": 0,
            "total_grades": 0,
            "average_percentage": 0,
            "distribution": build_distribution(),
            "course_breakdown": [],
            "top_students": [],
            "recent_grades": [],
        }

    course_ids = [c.id for c in courses]
    grades = db.query(GradeModel).filter(GradeModel.course_id.in_(course_ids)).all()
    students = sorted(summarize_students(grades), key=lambda s: s["average"], reverse=True)

    return {
        "total_courses": len(courses),
        "total_grades": len(grades),
        "average_percentage": average_percentage(grades),
        "distribution": build_distribution(grades),
        "course_breakdown": build_course_breakdown(courses, grades),
        "top_students": students[:5],
        "recent_grades": _recent(grades, 10),
    }


def admin_overview(db: Session) -> Dict[str, Any]:
    grades = db.query(GradeModel).all()
    courses = db.query(CourseModel).order_by(CourseModel.id).all()
    students = sorted(summarize_students(grades), key=lambda s: s["average"], reverse=True)

    # 교사별 성적 부여 건수
    leaderboard: Dict[int, Dict[str, Any]] = {}
    for grade in grades:
        teacher = grade.course.teacher if grade.course else None
        if teacher is None:
            continue
        entry = leaderboard.setdefault(teacher.id, {
            "teacher_id": teacher.id,
            "name": teacher.teacher_name,
            "email": teacher.email,
            "total_grades": 0,
        })
        entry["total_grades"] += 1

    return {
        "total_grades": len(grades),
        "average_percentage": average_percentage(grades),
        "distribution": build_distribution(grades),
        "course_breakdown": build_course_breakdown(courses, grades),
        "top_students": students[:10],
        "teacher_leaderboard": sorted(leaderboard.values(), key=lambda t: t["total_grades"], reverse=True)[:10],
        "recent_grades": _recent(grades, 15),
    }
