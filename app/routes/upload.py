# app/routes/upload.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
import logging

from app.core.constants import UploadConfig
from app.core.exceptions import (
    AppException,
    NoFileProvidedError,
    ParseFailureError,
    UnsupportedFileTypeError,
)
from app.core.settings import settings
from app.schemas.error import ErrorResponse
from app.schemas.paper import UploadResponse
from app.services.ingestion import ingest_workbook, upload_to_tempfile
from app.services.question_bank import QuestionBankStore, get_question_bank_store

router = APIRouter(tags=["upload"])
log = logging.getLogger("app.upload")


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def upload_question_bank(
    request: Request,
    excel_file: Optional[UploadFile] = File(None, alias=UploadConfig.FIELD_NAME),
    store: QuestionBankStore = Depends(get_question_bank_store),
):
    """
    엑셀 문제은행 업로드
    - 첫 번째 시트만 사용, 성공 시 기존 문제은행을 통째로 교체
    - 실패 시 기존 문제은행 유지
    """
    trace_id = getattr(request.state, "trace_id", None)

    if excel_file is None:
        raise NoFileProvidedError(UploadConfig.FIELD_NAME)

    if excel_file.content_type not in UploadConfig.ALLOWED_MIME_TYPES:
        log.warning(
            "upload_rejected",
            extra={
                "trace_id": trace_id,
                "upload_filename": excel_file.filename,
                "content_type": excel_file.content_type,
            },
        )
        raise UnsupportedFileTypeError(excel_file.content_type)

    try:
        with upload_to_tempfile(excel_file, settings.MAX_UPLOAD_SIZE) as tmp_path:
            bank = ingest_workbook(tmp_path, store, source_filename=excel_file.filename)
    except AppException:
        raise
    except Exception as e:
        log.exception(
            "upload_processing_failed",
            extra={"trace_id": trace_id, "upload_filename": excel_file.filename},
        )
        raise ParseFailureError(original_error=e) from e

    return UploadResponse(questionCount=len(bank))
