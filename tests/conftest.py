# tests/conftest.py
"""
- 설정 객체가 만들어지기 전에 테스트용 환경변수를 주입 (in-memory sqlite, 내부 토큰)
- 테스트마다 새 in-memory DB (StaticPool) 를 만들고 get_db 의존성을 교체
- Seeder: 학기/과목/교사/학생/강좌/수강/성적 행을 빠르게 만드는 헬퍼
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["GRADEBOOK_INTERNAL_TOKEN"] = "test-token"
os.environ["ENV"] = "test"

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.courses import Course
from models.enrollments import Enrollment, empty_scores
from models.grades import Grade
from models.semesters import Semester
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher
from services import grade_engine

AUTH = {"Authorization": "Bearer test-token"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class Seeder:
    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def semester(self, year: int = 2024, term: str = "Fall", name: Optional[str] = None) -> Semester:
        return self._save(Semester(name=name or f"{term} {year}", year=year, term=term))

    def subject(self, credits: int = 3, department: str = "Computer Science", name: Optional[str] = None) -> Subject:
        n = self._next()
        return self._save(Subject(
            name=name or f"Subject {n}", code=f"CS{100 + n}", credits=credits, department=department,
        ))

    def teacher(self, name: str = "Park") -> Teacher:
        n = self._next()
        return self._save(Teacher(teacher_name=name, email=f"teacher{n}@school.test", role="teacher"))

    def student(self, name: str = "Kim") -> Student:
        n = self._next()
        return self._save(Student(student_name=name, email=f"student{n}@school.test"))

    def course(self, subject=None, semester=None, teacher=None, policy=None, **kwargs) -> Course:
        subject = subject or self.subject()
        semester = semester or self.semester()
        policy = policy or grade_engine.GradingPolicy()
        course = Course(
            subject_id=subject.id,
            semester_id=semester.id,
            teacher_id=teacher.id if teacher else None,
            section=kwargs.pop("section", f"S{self._next()}"),
            **kwargs,
        )
        for name in grade_engine.POLICY_FIELDS:
            setattr(course, f"policy_{name}", getattr(policy, name))
        return self._save(course)

    def enrollment(self, student, course, scores=None, status: str = "enrolled") -> Enrollment:
        return self._save(Enrollment(
            student_id=student.id,
            course_id=course.id,
            semester_id=course.semester_id,
            status=status,
            scores=scores or empty_scores(),
        ))

    def grade(self, student, course, letter: str = "A", status: str = "graded",
              credits: Optional[int] = None, enrollment=None, percentage: int = 0) -> Grade:
        """성적 행 직접 생성 (enrollment 미지정 시 함께 생성)"""
        enrollment = enrollment or self.enrollment(student, course, status="graded")
        credits = credits if credits is not None else course.subject.credits
        points = grade_engine.grade_points_for(letter)
        now = datetime.now(timezone.utc)
        return self._save(Grade(
            student_id=student.id,
            course_id=course.id,
            enrollment_id=enrollment.id,
            semester_id=course.semester_id,
            total_percentage=percentage,
            letter_grade=letter,
            grade_points=points,
            credits=credits,
            quality_points=grade_engine.quality_points(points, credits),
            status=status,
            graded_at=now,
            finalized_at=now if status == "finalized" else None,
        ))


@pytest.fixture
def seed(db):
    return Seeder(db)


def make_scores(assignments=(), midterm=None, final=None, attendance=(0, 0), participation=None,
                max_exam: float = 100):
    """원점수 dict 생성 헬퍼 - assignments 는 (score, max_score) 튜플 목록"""
    return {
        "assignments": [
            {"name": f"HW{i + 1}", "score": score, "max_score": max_score}
            for i, (score, max_score) in enumerate(assignments)
        ],
        "midterm": {"score": midterm, "max_score": max_exam},
        "final": {"score": final, "max_score": max_exam},
        "attendance": {"present": attendance[0], "total": attendance[1]},
        "participation": {"score": participation, "max_score": max_exam},
    }
