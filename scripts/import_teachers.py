import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.teachers import Teacher as TeacherModel  # ✅ 모델 import

CSV_PATH = "data/teachers.csv"  # ✅ 파일 경로

def migrate_teachers(csv_path: str = CSV_PATH) -> int:
    db: Session = SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                teacher = TeacherModel(
                    id=int(row["id"]),                                  # 교사 고유 ID
                    teacher_name=row["teacher_name"],                   # 교사 이름
                    email=row.get("email") or None,                     # 이메일 주소
                    role=(row.get("role") or "teacher").strip().lower(),  # teacher / admin
                )
                db.add(teacher)
                count += 1
        db.commit()
    finally:
        db.close()
    return count

if __name__ == "__main__":
    init_db()
    total = migrate_teachers()
    print(f"✅ 교사 정보 CSV → DB 마이그레이션 완료 ({total}건)")
