import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.subjects import Subject as SubjectModel  # ✅ 모델 import

CSV_PATH = "data/subjects.csv"  # ✅ 파일 경로

def migrate_subjects(csv_path: str = CSV_PATH) -> int:
    db: Session = SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                subject = SubjectModel(
                    id=int(row["id"]),                        # 과목 고유 ID
                    name=row["name"],                         # 과목 이름
                    code=row["code"].strip().upper(),         # 과목 코드 (예: CS101)
                    credits=int(row["credits"]),              # 학점
                    department=row.get("department") or "Other",
                )
                db.add(subject)
                count += 1
        db.commit()
    finally:
        db.close()
    return count

if __name__ == "__main__":
    init_db()
    total = migrate_subjects()
    print(f"✅ 과목 CSV → DB 마이그레이션 완료 ({total}건)")
