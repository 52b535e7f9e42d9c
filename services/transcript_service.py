"""
services/transcript_service.py

- 확정 성적을 학기별로 묶어 성적증명서(transcript) 데이터를 만든다.
- 렌더링(HTML/PDF)은 services/pdf_service.py 담당
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Any, Dict

from sqlalchemy.orm import Session

from services import grade_engine
from services import grade_service


def build_transcript(db: Session, student_id: int) -> Dict[str, Any]:
    student = grade_service.get_student_or_404(db, student_id)
    grades = grade_service.list_student_grades(db, student_id, finalized_only=True)

    semesters: "OrderedDict[int, Dict[str, Any]]" = OrderedDict()
    for grade in grades:
        key = grade.semester_id or 0
        semester = semesters.setdefault(key, {
            "name": grade.semester.name if grade.semester else "Unassigned",
            "courses": [],
            "credits": 0,
            "quality_points": 0.0,
        })
        subject = grade.course.subject if grade.course else None
        semester["courses"].append({
            "code": subject.code if subject else "",
            "name": subject.name if subject else "",
            "credits": grade.credits,
            "letter_grade": grade.letter_grade,
            "grade_points": grade.grade_points,
        })
        semester["credits"] += grade.credits
        semester["quality_points"] += grade.quality_points

    cumulative_credits = 0
    cumulative_points = 0.0
    for semester in semesters.values():
        semester["gpa"] = (
            grade_engine.round_half_up(semester["quality_points"] / semester["credits"], 2)
            if semester["credits"] else 0.0
        )
        cumulative_credits += semester["credits"]
        cumulative_points += semester["quality_points"]

    cumulative_gpa = (
        grade_engine.round_half_up(cumulative_points / cumulative_credits, 2) if cumulative_credits else 0.0
    )

    return {
        "student": {
            "id": student.id,
            "name": student.student_name,
            "email": student.email,
            "roll_number": student.roll_number,
            "program": student.program,
        },
        "semesters": list(semesters.values()),
        "cumulative_gpa": cumulative_gpa,
        "total_credits": cumulative_credits,
        "generated_date": date.today().isoformat(),
    }
