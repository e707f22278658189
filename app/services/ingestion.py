"""
엑셀 문제은행 적재
업로드 파일 → 첫 번째 시트 행 목록 → QuestionRecord 목록 → 문제은행 교체
"""
import logging
import math
import os
import re
from contextlib import contextmanager
from datetime import date, datetime, time
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from fastapi import UploadFile

from app.core.constants import ExcelColumns, UploadConfig
from app.core.exceptions import FileTooLargeError, ParseFailureError
from app.models.question import QuestionBank, QuestionRecord
from app.services.question_bank import QuestionBankStore

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# 엑셀 헤더 → QuestionRecord 필드
COLUMN_MAP = {
    ExcelColumns.QUESTION: "question",
    ExcelColumns.BT_LEVEL: "bt_level",
    ExcelColumns.SUBJECT_CODE: "subject_code",
    ExcelColumns.SUBJECT: "subject",
    ExcelColumns.BRANCH: "branch",
    ExcelColumns.REGULATION: "regulation",
    ExcelColumns.YEAR: "year",
    ExcelColumns.SEMESTER: "semester",
    ExcelColumns.MONTH: "month",
}


def coerce_unit(value: Any) -> Optional[int]:
    """
    단원 값을 정수로 변환 (앞부분 정수만 인정)

    "3" → 3, " 2 " → 2, "4a" → 4, 2.0 → 2
    "Unit 1", "", None, True → None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else None
    return None


def _clean_cell(value: Any) -> Any:
    if isinstance(value, np.generic):
        value = value.item()
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def read_sheet_rows(path: str) -> List[Dict[str, Any]]:
    """
    워크북의 첫 번째 시트를 행 목록으로 읽기

    - 첫 행은 헤더
    - 모든 칸이 빈 행은 건너뜀
    - 빈 칸은 키 자체를 넣지 않음

    Raises:
        ParseFailureError: 엑셀로 읽을 수 없는 파일
    """
    try:
        df = pd.read_excel(path, sheet_name=0, header=0, dtype=object)
    except Exception as e:
        raise ParseFailureError(original_error=e) from e

    df = df.dropna(how="all")

    rows: List[Dict[str, Any]] = []
    for raw in df.to_dict(orient="records"):
        row = {}
        for key, value in raw.items():
            cleaned = _clean_cell(value)
            if cleaned is not None:
                row[str(key)] = cleaned
        rows.append(row)
    return rows


def records_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[QuestionRecord]:
    """
    행 목록을 QuestionRecord 목록으로 변환 (행 순서 유지, 누락 행 없음)
    id는 1부터 순서대로 새로 부여
    """
    records = []
    for index, row in enumerate(rows, start=1):
        fields = {attr: row.get(column) for column, attr in COLUMN_MAP.items()}
        records.append(
            QuestionRecord(
                id=index,
                unit=coerce_unit(row.get(ExcelColumns.UNIT)),
                **fields,
            )
        )
    return records


def ingest_workbook(
    path: str,
    store: QuestionBankStore,
    source_filename: Optional[str] = None
) -> QuestionBank:
    """
    엑셀 파일을 읽어 문제은행을 교체

    Raises:
        ParseFailureError: 파일 파싱 실패 (기존 문제은행은 유지)
    """
    rows = read_sheet_rows(path)
    records = records_from_rows(rows)

    skipped_units = sum(1 for r in records if r.unit is None)
    if skipped_units:
        logger.warning(
            "unit_not_numeric",
            extra={"count": skipped_units, "source_filename": source_filename},
        )

    return store.replace(records, source_filename=source_filename)


@contextmanager
def upload_to_tempfile(
    upload: UploadFile,
    max_size: int
) -> Iterator[str]:
    """
    업로드 파일을 임시 파일로 저장하고 경로를 넘겨줌
    블록을 빠져나가면 성공/실패와 관계없이 임시 파일 삭제

    Raises:
        FileTooLargeError: max_size 초과
    """
    suffix = Path(upload.filename or "").suffix.lower() or ".xlsx"
    tmp = NamedTemporaryFile(delete=False, suffix=suffix, prefix="upload_")
    tmp_path = tmp.name
    try:
        size = 0
        with tmp:
            while True:
                chunk = upload.file.read(UploadConfig.CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_size:
                    raise FileTooLargeError(limit=max_size)
                tmp.write(chunk)
        yield tmp_path
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
