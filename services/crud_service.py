"""
services/crud_service.py

- 기본 데이터(학생/교사/과목/학기/강좌) 저장 공통 헬퍼
- 유니크 제약 충돌(IntegrityError)은 롤백 후 Conflict(409) 로 바꿔 올려 보낸다.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from services.errors import Conflict

logger = logging.getLogger(__name__)


def commit_or_conflict(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"유니크 제약 충돌: {message} ({exc.orig})")
        raise Conflict(message) from None


def save(db: Session, obj, message: str):
    """새 행 저장 → 충돌 시 Conflict, 성공 시 refresh 된 객체 반환"""
    db.add(obj)
    commit_or_conflict(db, message)
    db.refresh(obj)
    return obj
