# app/schemas/export_docx.py
from typing import Optional

from app.schemas.paper import GenerateResponse

# ── 시험지 DOCX 내보내기 요청 ────────────────────────────────────
class ExportPayload(GenerateResponse):
    """/api/generate 응답을 그대로 보내고 필요한 경우 제목 등을 덧붙임"""
    title: Optional[str] = None          # 비우면 "Mid-I Examination" 등 유형별 기본값
    institution: Optional[str] = None
    show_unit: bool = True               # 단원/BT 레벨 열 표시
