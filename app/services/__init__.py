"""
서비스 레이어
문제은행 적재/보관, 시험지 문항 선택, DOCX 내보내기
"""
from app.services.question_bank import (
    QuestionBankStore,
    get_question_bank_store,
)
from app.services.ingestion import (
    coerce_unit,
    read_sheet_rows,
    records_from_rows,
    ingest_workbook,
    upload_to_tempfile,
)
from app.services.selector import (
    PAPER_RULES,
    Quota,
    PaperRule,
    special_rule,
    select_questions,
    paper_details,
    get_rng,
)

__all__ = [
    # Bank
    "QuestionBankStore",
    "get_question_bank_store",

    # Ingestion
    "coerce_unit",
    "read_sheet_rows",
    "records_from_rows",
    "ingest_workbook",
    "upload_to_tempfile",

    # Selector
    "PAPER_RULES",
    "Quota",
    "PaperRule",
    "special_rule",
    "select_questions",
    "paper_details",
    "get_rng",
]
