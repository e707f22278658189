"""
엑셀 적재 테스트
단원 변환, 행→레코드 변환, 실제 xlsx 파싱, 임시 파일 정리
"""
import glob
import io
import os
import tempfile

import pytest
from fastapi import UploadFile

from app.core.exceptions import FileTooLargeError, ParseFailureError
from app.services.ingestion import (
    coerce_unit,
    ingest_workbook,
    read_sheet_rows,
    records_from_rows,
    upload_to_tempfile,
)


class TestCoerceUnit:
    """단원 값 정수 변환 테스트"""

    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        (5, 5),
        (2.0, 2),
        (3.9, 3),
        ("3", 3),
        (" 2 ", 2),
        ("4a", 4),
        ("-1", -1),
        ("+2", 2),
    ])
    def test_numeric(self, value, expected):
        """앞부분 정수 인정"""
        assert coerce_unit(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "Unit 1", "abc", True, False, float("nan"), float("inf"), [1],
    ])
    def test_non_numeric_sentinel(self, value):
        """숫자가 아니면 None"""
        assert coerce_unit(value) is None


class TestRecordsFromRows:
    """행 → QuestionRecord 변환 테스트"""

    def test_sequential_ids_in_row_order(self, question_row):
        """행 순서대로 1부터 id 부여"""
        rows = [question_row(i, unit=(i % 5) + 1, **{"S.No": 100 - i}) for i in range(7)]

        records = records_from_rows(rows)

        assert len(records) == 7
        assert [r.id for r in records] == list(range(1, 8))
        assert [r.question for r in records] == [row["Question"] for row in rows]

    def test_field_mapping(self, question_row):
        """헤더 → 필드 매핑"""
        row = question_row(1, unit="2", **{"B.T Level": "L4", "Year": 2024, "Month": "Nov"})

        (record,) = records_from_rows([row])

        assert record.unit == 2
        assert record.bt_level == "L4"
        assert record.subject_code == "CS501"
        assert record.subject == "Operating Systems"
        assert record.branch == "CSE"
        assert record.regulation == "R20"
        assert record.year == 2024
        assert record.semester == "I"
        assert record.month == "Nov"

    def test_missing_fields_become_none(self):
        """누락 필드는 None"""
        (record,) = records_from_rows([{"Question": "Only a question"}])

        assert record.id == 1
        assert record.unit is None
        assert record.question == "Only a question"
        assert record.subject is None
        assert record.bt_level is None

    def test_no_row_dropped(self):
        """행 누락 없음"""
        rows = [{}, {"Unit": "x"}, {"Unit": 1}]

        records = records_from_rows(rows)

        assert [r.id for r in records] == [1, 2, 3]
        assert [r.unit for r in records] == [None, None, 1]

    def test_record_is_frozen(self, question_row):
        """레코드 불변"""
        (record,) = records_from_rows([question_row(1, unit=1)])

        with pytest.raises(Exception):
            record.unit = 2

    def test_serializes_with_wire_names(self, question_row):
        """camelCase 필드명으로 직렬화"""
        (record,) = records_from_rows([question_row(1, unit=1)])

        data = record.model_dump(by_alias=True)

        assert set(data) == {
            "id", "unit", "question", "btLevel", "subjectCode", "subject",
            "branch", "regulation", "year", "semester", "month",
        }


class TestReadSheetRows:
    """실제 xlsx 파싱 테스트"""

    def test_reads_first_sheet(self, write_workbook, question_row):
        """첫 번째 시트 읽기"""
        path = write_workbook([question_row(1, 1), question_row(2, 2)])

        rows = read_sheet_rows(path)

        assert len(rows) == 2
        assert rows[0]["Unit"] == 1
        assert rows[1]["Question"] == "Explain concept 2"

    def test_blank_rows_skipped(self, write_workbook, question_row):
        """빈 행 건너뜀"""
        path = write_workbook([question_row(1, 1), None, question_row(2, 2)])

        rows = read_sheet_rows(path)

        assert [r["Unit"] for r in rows] == [1, 2]

    def test_empty_cells_omitted(self, write_workbook, question_row):
        """빈 칸은 키 없음"""
        path = write_workbook([question_row(1, 1, Branch=None)])

        (row,) = read_sheet_rows(path)

        assert "Branch" not in row
        assert row["Subject"] == "Operating Systems"

    def test_values_are_plain_python(self, write_workbook, question_row):
        """numpy 값이 아닌 파이썬 값"""
        path = write_workbook([question_row(1, 3, Year=2024)])

        (row,) = read_sheet_rows(path)

        assert type(row["Unit"]) is int
        assert type(row["Year"]) is int

    def test_reads_legacy_xls(self, write_xls, question_row):
        """구형 xls 파일 읽기"""
        path = write_xls([question_row(1, 2), None, question_row(2, "3a", Branch=None)])

        rows = read_sheet_rows(path)

        assert len(rows) == 2
        assert rows[0]["Question"] == "Explain concept 1"
        assert coerce_unit(rows[0]["Unit"]) == 2
        assert coerce_unit(rows[1]["Unit"]) == 3
        assert "Branch" not in rows[1]

    def test_headers_only(self, write_workbook):
        """헤더만 있는 시트"""
        assert read_sheet_rows(write_workbook([])) == []

    def test_not_a_workbook(self, tmp_path):
        """엑셀이 아닌 파일"""
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"this is not a spreadsheet")

        with pytest.raises(ParseFailureError):
            read_sheet_rows(str(path))


class TestIngestWorkbook:
    """문제은행 교체 테스트"""

    def test_loads_bank(self, bank_store, write_workbook, question_row):
        """문제은행 적재"""
        path = write_workbook([question_row(i, (i % 3) + 1) for i in range(1, 10)])

        bank = ingest_workbook(path, bank_store, source_filename="os.xlsx")

        assert len(bank) == 9
        assert bank_store.require() is bank
        assert bank.source_filename == "os.xlsx"

    def test_replaces_not_appends(self, bank_store, write_workbook, question_row):
        """추가가 아닌 교체"""
        ingest_workbook(write_workbook([question_row(i, 1) for i in range(5)], filename="a.xlsx"), bank_store)
        second = ingest_workbook(write_workbook([question_row(1, 2)], filename="b.xlsx"), bank_store)

        assert len(bank_store.require()) == 1
        assert bank_store.require() is second
        assert second.records[0].id == 1

    def test_parse_failure_keeps_previous_bank(self, bank_store, write_workbook, question_row, tmp_path):
        """파싱 실패 시 기존 문제은행 유지"""
        first = ingest_workbook(write_workbook([question_row(1, 1)]), bank_store)
        broken = tmp_path / "broken.xlsx"
        broken.write_bytes(b"garbage")

        with pytest.raises(ParseFailureError):
            ingest_workbook(str(broken), bank_store)

        assert bank_store.require() is first

    def test_non_numeric_unit_kept_as_sentinel(self, bank_store, write_workbook, question_row):
        """숫자 아닌 단원도 행은 유지"""
        path = write_workbook([question_row(1, "Unit 1"), question_row(2, 2)])

        bank = ingest_workbook(path, bank_store)

        assert [r.unit for r in bank.records] == [None, 2]


class TestUploadToTempfile:
    """업로드 임시 파일 정리 테스트"""

    def test_file_written_and_removed(self):
        """블록 안에서는 파일 존재, 빠져나오면 삭제"""
        upload = UploadFile(file=io.BytesIO(b"spreadsheet-bytes"), filename="bank.xlsx")

        with upload_to_tempfile(upload, max_size=1024) as path:
            saved = path
            with open(path, "rb") as f:
                assert f.read() == b"spreadsheet-bytes"
            assert path.endswith(".xlsx")

        assert not os.path.exists(saved)

    def test_file_removed_on_error(self):
        """블록에서 예외가 나도 삭제"""
        upload = UploadFile(file=io.BytesIO(b"data"), filename="bank.xls")
        saved = None

        with pytest.raises(ParseFailureError):
            with upload_to_tempfile(upload, max_size=1024) as path:
                saved = path
                raise ParseFailureError()

        assert saved is not None
        assert not os.path.exists(saved)

    def test_too_large(self):
        """크기 제한 초과 시 FileTooLargeError, 파일 남지 않음"""
        upload = UploadFile(file=io.BytesIO(b"x" * 100), filename="big_bank.xlsx")
        pattern = os.path.join(tempfile.gettempdir(), "upload_*")
        before = set(glob.glob(pattern))

        with pytest.raises(FileTooLargeError):
            with upload_to_tempfile(upload, max_size=10):
                pass

        assert set(glob.glob(pattern)) <= before
