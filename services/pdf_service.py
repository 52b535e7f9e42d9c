from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Dict, Any

from config.settings import settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class PDFService:
    def __init__(self, template_dir: str = None):
        # 템플릿 환경 설정 (상대 경로는 프로젝트 루트 기준)
        template_dir = Path(template_dir or settings.TEMPLATE_DIR)
        if not template_dir.is_absolute():
            template_dir = PROJECT_ROOT / template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["points"] = lambda value: f"{value:.2f}"

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # WeasyPrint는 pango 등 시스템 라이브러리가 필요하므로 실제 변환 시점에 import
        import weasyprint

        return weasyprint.HTML(string=html_content).write_pdf()

    def render_transcript_html(self, data: Dict[str, Any]) -> str:
        """성적증명서 HTML (미리보기용)"""
        return self._render_template("transcript.html", data)

    def generate_transcript_pdf(self, data: Dict[str, Any]) -> bytes:
        """성적증명서 PDF 생성"""
        return self._html_to_pdf(self.render_transcript_html(data))


# ✅ 라우터 의존성 (테스트에서 dependency_overrides로 교체 가능)
def get_pdf_service() -> PDFService:
    return PDFService()
