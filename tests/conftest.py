"""
테스트 공통 설정 및 Fixtures
pytest의 conftest.py는 모든 테스트에서 공유되는 fixture를 정의
"""
import os
import sys
import pytest
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# settings는 import 시점에 만들어지므로 app import 전에 지정
os.environ.setdefault("ENV", "test")

import xlwt
from fastapi.testclient import TestClient
from openpyxl import Workbook

from app.core.constants import UploadConfig
from app.models.question import QuestionBank, QuestionRecord
from app.services.question_bank import get_question_bank_store


DEFAULT_HEADERS = [
    "S.No", "Unit", "Question", "B.T Level", "Subject Code", "Subject",
    "Branch", "Regulation", "Year", "Sem", "Month",
]


# ===========================================
# FastAPI 클라이언트
# ===========================================

@pytest.fixture(scope="module")
def app():
    """FastAPI 애플리케이션 인스턴스"""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture(scope="module")
def client(app) -> Generator:
    """테스트 클라이언트"""
    with TestClient(app) as test_client:
        yield test_client


# ===========================================
# 문제은행 Fixtures
# ===========================================

@pytest.fixture(autouse=True)
def bank_store():
    """전역 문제은행을 테스트마다 비움"""
    store = get_question_bank_store()
    store.clear()
    yield store
    store.clear()


def _record(record_id: int, unit: Optional[int], **overrides) -> QuestionRecord:
    fields = {
        "id": record_id,
        "unit": unit,
        "question": f"Question {record_id} (unit {unit})",
        "btLevel": "L2",
        "subjectCode": "CS501",
        "subject": "Operating Systems",
        "branch": "CSE",
        "regulation": "R20",
        "year": "III",
        "semester": "I",
        "month": "Oct",
    }
    fields.update(overrides)
    return QuestionRecord(**fields)


@pytest.fixture
def make_records() -> Callable[..., List[QuestionRecord]]:
    """
    단원별 문항 수로 레코드 목록 생성
    make_records({1: 2, 2: 2, 3: 1}) → unit 1 ×2, unit 2 ×2, unit 3 ×1
    """
    def _make(unit_counts: Dict[Optional[int], int], **overrides) -> List[QuestionRecord]:
        records = []
        for unit, count in unit_counts.items():
            for _ in range(count):
                records.append(_record(len(records) + 1, unit, **overrides))
        return records
    return _make


@pytest.fixture
def make_bank(make_records) -> Callable[..., QuestionBank]:
    def _make(unit_counts: Dict[Optional[int], int], **overrides) -> QuestionBank:
        return QuestionBank(records=tuple(make_records(unit_counts, **overrides)))
    return _make


@pytest.fixture
def load_bank(bank_store, make_records):
    """전역 문제은행에 직접 적재 (업로드 없이 라우트 테스트용)"""
    def _load(unit_counts: Dict[Optional[int], int], **overrides) -> QuestionBank:
        return bank_store.replace(make_records(unit_counts, **overrides), source_filename="fixture.xlsx")
    return _load


# ===========================================
# 엑셀 파일 Fixtures
# ===========================================

def _question_row(index: int, unit: Any, **overrides) -> Dict[str, Any]:
    row = {
        "S.No": index,
        "Unit": unit,
        "Question": f"Explain concept {index}",
        "B.T Level": "L3",
        "Subject Code": "CS501",
        "Subject": "Operating Systems",
        "Branch": "CSE",
        "Regulation": "R20",
        "Year": "III",
        "Sem": "I",
        "Month": "Oct",
    }
    row.update(overrides)
    return row


@pytest.fixture
def question_row() -> Callable[..., Dict[str, Any]]:
    """엑셀 한 행 (헤더→값) 생성"""
    return _question_row


@pytest.fixture
def write_workbook(tmp_path) -> Callable[..., str]:
    """
    openpyxl로 실제 .xlsx 파일 생성
    rows의 각 항목은 헤더→값 dict (None이면 빈 칸, 리스트 None이면 빈 행)
    """
    def _write(
        rows: Sequence[Optional[Dict[str, Any]]],
        headers: Sequence[str] = DEFAULT_HEADERS,
        filename: str = "bank.xlsx",
    ) -> str:
        wb = Workbook()
        ws = wb.active
        ws.title = "Questions"
        ws.append(list(headers))
        for row in rows:
            if row is None:
                ws.append([None] * len(headers))
            else:
                ws.append([row.get(h) for h in headers])
        path = tmp_path / filename
        wb.save(path)
        return str(path)
    return _write


@pytest.fixture
def workbook_bytes(write_workbook) -> Callable[..., bytes]:
    def _bytes(rows, **kwargs) -> bytes:
        with open(write_workbook(rows, **kwargs), "rb") as f:
            return f.read()
    return _bytes


@pytest.fixture
def upload_files(workbook_bytes):
    """multipart 업로드 files 인자 생성"""
    def _files(rows, content_type: str = UploadConfig.XLSX_MIME, filename: str = "bank.xlsx"):
        return {UploadConfig.FIELD_NAME: (filename, workbook_bytes(rows), content_type)}
    return _files


@pytest.fixture
def write_xls(tmp_path) -> Callable[..., str]:
    """
    xlwt로 실제 구형 .xls (BIFF8) 파일 생성
    빈 칸은 쓰지 않음, None 행은 빈 행
    """
    def _write(
        rows: Sequence[Optional[Dict[str, Any]]],
        headers: Sequence[str] = DEFAULT_HEADERS,
        filename: str = "bank.xls",
    ) -> str:
        book = xlwt.Workbook()
        sheet = book.add_sheet("Questions")
        for col, header in enumerate(headers):
            sheet.write(0, col, header)
        for r, row in enumerate(rows, start=1):
            for col, header in enumerate(headers):
                value = None if row is None else row.get(header)
                if value is not None:
                    sheet.write(r, col, value)
        path = tmp_path / filename
        book.save(str(path))
        return str(path)
    return _write
