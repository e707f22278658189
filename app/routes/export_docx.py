# app/routes/export_docx.py
from fastapi import APIRouter, Request, HTTPException
from starlette.background import BackgroundTask
from fastapi.responses import FileResponse
import os, time

from app.core.constants import HTTPHeaders
from app.core.logging import logger
from app.schemas.export_docx import ExportPayload
from app.services.docx_export import build_paper_docx

router = APIRouter(prefix="/export", tags=["export"])

def _remove_file(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)

def _send_docx(tmp_path: str, filename: str) -> FileResponse:
    # 삭제는 FileResponse의 background에 연결 (응답 전송 완료 후 실행 보장)
    return FileResponse(
        path=tmp_path,
        media_type=HTTPHeaders.DOCX_CONTENT,
        filename=filename,
        background=BackgroundTask(_remove_file, tmp_path),
    )

@router.post("/docx")
def export_paper_docx(payload: ExportPayload, request: Request):
    """생성된 시험지(/api/generate 응답)를 DOCX로 내려받기"""
    t0 = time.time()
    trace_id = getattr(request.state, "trace_id", None)
    try:
        tmp_path, filename = build_paper_docx(payload)
    except Exception as e:
        logger.exception(
            "export_docx_failed",
            extra={"trace_id": trace_id, "paper_type": payload.paperType},
        )
        raise HTTPException(status_code=500, detail="DOCX export failed") from e

    logger.info(
        "export_docx",
        extra={
            "trace_id": trace_id,
            "paper_type": payload.paperType,
            "question_count": len(payload.questions),
            "elapsed_ms": int((time.time() - t0) * 1000),
        },
    )
    return _send_docx(tmp_path, filename)
