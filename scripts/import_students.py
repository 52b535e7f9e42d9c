import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.students import Student as StudentModel  # ✅ 모델 import

CSV_PATH = "data/students.csv"  # ✅ 파일 경로

def migrate_students(csv_path: str = CSV_PATH) -> int:
    db: Session = SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                student = StudentModel(
                    id=int(row["id"]),                          # 고유 학생 ID
                    student_name=row["student_name"],           # 학생 이름
                    email=row.get("email") or None,             # 이메일
                    roll_number=row.get("roll_number") or None, # 학번
                    program=row.get("program") or None,         # 과정/전공
                )
                db.add(student)
                count += 1
        db.commit()
    finally:
        db.close()
    return count

if __name__ == "__main__":
    init_db()
    total = migrate_students()
    print(f"✅ 학생 정보 CSV → DB 마이그레이션 완료 ({total}건)")
