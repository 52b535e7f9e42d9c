import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session
from database.db import get_db
from services.pdf_service import PDFService, get_pdf_service
from services.transcript_service import build_transcript

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pdf", tags=["PDF 생성"])


# ✅ [PDF] 성적증명서 생성 (확정 성적만, 학기 순)
@router.get("/transcript/{student_id}")
def generate_transcript_pdf(
    student_id: int,
    db: Session = Depends(get_db),
    pdf_service: PDFService = Depends(get_pdf_service),
):
    data = build_transcript(db, student_id)
    pdf_content = pdf_service.generate_transcript_pdf(data)
    logger.info(f"성적증명서 생성: student_id={student_id} semesters={len(data['semesters'])}")

    filename = quote(f"transcript_{data['student']['name']}.pdf")
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )


# ✅ [HTML] 성적증명서 미리보기
@router.get("/transcript/{student_id}/preview", response_class=HTMLResponse)
def preview_transcript(
    student_id: int,
    db: Session = Depends(get_db),
    pdf_service: PDFService = Depends(get_pdf_service),
):
    data = build_transcript(db, student_id)
    return HTMLResponse(pdf_service.render_transcript_html(data))
