"""
dependencies/security.py

- 성적 입력/확정, 강좌 개설·수정, 원점수 기록 등 변경 API 를 내부 토큰(Bearer)으로 보호
- 실패 시 Unauthorized(401) → 전역 에러 핸들러가 다른 서비스 예외와 같은 포맷으로 응답
"""

import hmac
import logging
from typing import Annotated, Optional

from fastapi import Header

from config.settings import settings
from services.errors import Unauthorized

logger = logging.getLogger(__name__)

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _bearer_token(authorization: Optional[str]) -> str:
    """'Bearer <token>' 헤더에서 토큰만 추출"""
    scheme, _, token = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing or malformed bearer token")
    return token.strip()


def require_staff_token(authorization: AuthHeader = None) -> None:
    token = _bearer_token(authorization)
    # 타이밍 안전 비교 (bytes 로 비교해야 비ASCII 토큰에서도 TypeError 없음)
    if not hmac.compare_digest(token.encode(), settings.GRADEBOOK_INTERNAL_TOKEN.encode()):
        logger.warning("잘못된 내부 토큰으로 변경 API 호출 거부")
        raise Unauthorized("Invalid staff token")
