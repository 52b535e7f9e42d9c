"""
원점수 CSV → 수강(enrollment) 원점수 일괄 반영

CSV 컬럼: enrollment_id, component, name, score, max_score, present, total
- component: assignment / midterm / final / participation / attendance
- 같은 수강의 assignment 행들을 모아 과제 목록 전체를 교체하고, 나머지 항목도 해당 항목만 교체한다.
- --assign 옵션을 주면 반영 후 성적까지 산출한다.
"""

import argparse
import csv
from collections import defaultdict

from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from schemas.enrollments import ScoresUpdate
from services import enrollment_service, grade_service

CSV_PATH = "data/scores.csv"  # ✅ 파일 경로


def _optional_float(value):
    return float(value) if value not in (None, "") else None


def load_updates(csv_path: str = CSV_PATH) -> dict:
    updates = defaultdict(dict)
    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        for row in csv.DictReader(csvfile):
            enrollment_id = int(row["enrollment_id"])
            component = row["component"].strip().lower()
            payload = updates[enrollment_id]

            if component == "assignment":
                payload.setdefault("assignments", []).append({
                    "name": row.get("name") or None,
                    "score": float(row["score"]),
                    "max_score": float(row.get("max_score") or 100),
                })
            elif component == "attendance":
                payload["attendance"] = {"present": int(row["present"]), "total": int(row["total"])}
            elif component in ("midterm", "final", "participation"):
                payload[component] = {
                    "score": _optional_float(row.get("score")),
                    "max_score": float(row.get("max_score") or 100),
                }
            else:
                raise ValueError(f"알 수 없는 항목: {component!r} (enrollment_id={enrollment_id})")

    # ✅ 허용 필드 검증은 API 와 같은 DTO 사용
    return {eid: ScoresUpdate(**payload) for eid, payload in updates.items()}


def import_scores(csv_path: str = CSV_PATH, assign: bool = False, graded_by: int = None) -> int:
    updates = load_updates(csv_path)
    db: Session = SessionLocal()
    try:
        for enrollment_id, update in updates.items():
            enrollment_service.update_scores(db, enrollment_id, update)
            if assign:
                grade_service.assign_or_update_grade(db, enrollment_id, graded_by=graded_by)
    finally:
        db.close()
    return len(updates)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="원점수 CSV 반영")
    parser.add_argument("csv_path", nargs="?", default=CSV_PATH)
    parser.add_argument("--assign", action="store_true", help="반영 후 성적 산출")
    parser.add_argument("--graded-by", type=int, default=None, help="성적 입력 교사 ID")
    args = parser.parse_args()

    init_db()
    total = import_scores(args.csv_path, assign=args.assign, graded_by=args.graded_by)
    print(f"✅ 원점수 CSV → DB 반영 완료 ({total}건)")
