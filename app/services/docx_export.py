# app/services/docx_export.py
import re
from tempfile import NamedTemporaryFile
from typing import Any, List

from app.core.constants import PaperTypes
from app.schemas.export_docx import ExportPayload

FONT_BODY = "Times New Roman"

DEFAULT_TITLES = {
    PaperTypes.MID1: "Mid-I Examination",
    PaperTypes.MID2: "Mid-II Examination",
    PaperTypes.SPECIAL: "Special Mid Examination",
}

# ── 유틸 ───────────────────────────────────────────────────────────
def _strip_controls(s: str) -> str:
    return re.sub(r"[\u200B-\u200D\uFEFF]", "", s)

def _text(value: Any) -> str:
    if value is None:
        return ""
    return _strip_controls(str(value)).strip()

def _safe_filename(name: str) -> str:
    cleaned = re.sub(r"[^\w\-. ]+", "_", name).strip()
    return cleaned or "question_paper"

# ── DOCX 빌드 보조 ─────────────────────────────────────────────────
def _docx_primitives():
    from docx import Document
    from docx.oxml.ns import qn
    from docx.oxml import OxmlElement
    from docx.shared import Pt
    from docx.enum.table import WD_TABLE_ALIGNMENT
    from docx.enum.text import WD_ALIGN_PARAGRAPH
    return Document, qn, OxmlElement, Pt, WD_TABLE_ALIGNMENT, WD_ALIGN_PARAGRAPH

def add_body_run(par, text: str, bold: bool = False):
    _, qn, _, _, _, _ = _docx_primitives()
    run = par.add_run(text)
    rPr = run._element.get_or_add_rPr()
    rFonts = rPr.get_or_add_rFonts()
    run.font.name = FONT_BODY
    rFonts.set(qn("w:ascii"), FONT_BODY)
    rFonts.set(qn("w:hAnsi"), FONT_BODY)
    run.bold = bold
    return run

def set_cell_borders(cell, spec=("single", 8, "000000")):
    _, qn, OxmlElement, _, _, _ = _docx_primitives()
    tcPr = cell._tc.get_or_add_tcPr()
    tcBorders = tcPr.find(qn("w:tcBorders"))
    if tcBorders is None:
        tcBorders = OxmlElement("w:tcBorders")
        tcPr.append(tcBorders)
    val, sz, color = spec
    for tag in ("top", "left", "bottom", "right"):
        edge = tcBorders.find(qn(f"w:{tag}"))
        if edge is None:
            edge = OxmlElement(f"w:{tag}")
            tcBorders.append(edge)
        edge.set(qn("w:val"), val)
        edge.set(qn("w:sz"), str(sz))
        edge.set(qn("w:color"), color)

def add_details_block(doc, payload: ExportPayload):
    """과목/학과/규정/학년/학기 헤더 (첫 문항 기준 paperDetails)"""
    d = payload.paperDetails
    lines = [
        ("Subject", f"{_text(d.subject)} ({_text(d.subjectCode)})" if d.subjectCode else _text(d.subject)),
        ("Branch", _text(d.branch)),
        ("Regulation", _text(d.regulation)),
        ("Year / Semester", " / ".join(x for x in (_text(d.year), _text(d.semester)) if x)),
    ]
    for label, value in lines:
        if not value:
            continue
        par = doc.add_paragraph()
        add_body_run(par, f"{label}: ", bold=True)
        add_body_run(par, value)

def add_question_table(doc, payload: ExportPayload):
    _, _, _, _, WD_TABLE_ALIGNMENT, WD_ALIGN_PARAGRAPH = _docx_primitives()
    headers: List[str] = ["Q.No", "Question"]
    if payload.show_unit:
        headers += ["Unit", "B.T Level"]

    tbl = doc.add_table(rows=1, cols=len(headers))
    tbl.alignment = WD_TABLE_ALIGNMENT.CENTER
    tbl.autofit = True
    for j, h in enumerate(headers):
        cell = tbl.rows[0].cells[j]
        set_cell_borders(cell)
        ph = cell.paragraphs[0]; add_body_run(ph, h, bold=True)
        ph.alignment = WD_ALIGN_PARAGRAPH.CENTER

    for idx, q in enumerate(payload.questions, 1):
        values = [str(idx), _text(q.question)]
        if payload.show_unit:
            values += ["" if q.unit is None else str(q.unit), _text(q.bt_level)]
        row = tbl.add_row()
        for j, val in enumerate(values):
            cell = row.cells[j]
            set_cell_borders(cell)
            p = cell.paragraphs[0]; add_body_run(p, val)
            if j != 1:
                p.alignment = WD_ALIGN_PARAGRAPH.CENTER

# ── 진입점 ────────────────────────────────────────────────────────
def paper_title(payload: ExportPayload) -> str:
    if payload.title:
        return payload.title
    title = DEFAULT_TITLES.get(payload.paperType or "", "Question Paper")
    if payload.paperType == PaperTypes.SPECIAL and payload.mainUnit:
        title = f"{title} (Unit {payload.mainUnit})"
    return title

def build_paper_docx(payload: ExportPayload) -> tuple[str, str]:
    """
    생성된 시험지를 DOCX로 저장

    Returns:
        (임시 파일 절대경로, 다운로드 파일명). 임시 파일 삭제는 호출 측 책임
    """
    Document, _, _, Pt, _, WD_ALIGN_PARAGRAPH = _docx_primitives()

    title = paper_title(payload)

    doc = Document()
    normal = doc.styles["Normal"]
    normal.font.name = FONT_BODY
    normal.font.size = Pt(11)

    if payload.institution:
        p = doc.add_paragraph(); add_body_run(p, _text(payload.institution), bold=True)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    heading = doc.add_heading(_text(title), level=1)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    add_details_block(doc, payload)
    doc.add_paragraph("")
    add_question_table(doc, payload)

    # 파일 저장
    tmp = NamedTemporaryFile(delete=False, suffix=".docx")
    tmp_path = tmp.name; tmp.close(); doc.save(tmp_path)
    return tmp_path, f"{_safe_filename(title)}.docx"
