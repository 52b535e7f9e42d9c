from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import init_db

# ✅ 로그 레벨은 설정값 기준, HTTP 라이브러리 디버그 로그 비활성화
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("fontTools").setLevel(logging.WARNING)   # WeasyPrint 폰트 서브셋 로그

logger = logging.getLogger(__name__)


# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import (
    courses, enrollments, grades, grades_dashboard, pdf_reports,
    semesters, students, subjects, teachers,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ✅ 테이블 생성 (운영 환경에서는 마이그레이션으로 관리 가능)
    init_db()
    logger.info(f"{settings.APP_TITLE} 시작 (env={settings.ENV})")
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS 설정 (프론트엔드 연동 대비)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(students.router,         prefix="/v1")
app.include_router(teachers.router,         prefix="/v1")
app.include_router(subjects.router,         prefix="/v1")
app.include_router(semesters.router,        prefix="/v1")
app.include_router(courses.router,          prefix="/v1")
app.include_router(enrollments.router,      prefix="/v1")
app.include_router(grades_dashboard.router, prefix="/v1")   # ✅ /grades/{grade_id} 보다 먼저 등록
app.include_router(grades.router,           prefix="/v1")
app.include_router(pdf_reports.router,      prefix="/v1")   # ✅ 성적증명서 PDF

# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - {settings.APP_DESCRIPTION}"}
