# app/routes/bank.py
from fastapi import APIRouter, Depends

from app.schemas.paper import BankSummary
from app.services.question_bank import QuestionBankStore, get_question_bank_store

router = APIRouter(tags=["bank"])


@router.get("/bank", response_model=BankSummary)
def get_bank_summary(store: QuestionBankStore = Depends(get_question_bank_store)):
    """현재 적재된 문제은행 요약 (단원별 문항 수 포함)"""
    bank = store.snapshot()
    if bank is None:
        return BankSummary(loaded=False)

    unit_counts = {
        ("unknown" if unit is None else str(unit)): count
        for unit, count in sorted(bank.unit_counts().items(), key=lambda kv: (kv[0] is None, kv[0] or 0))
    }
    return BankSummary(
        loaded=True,
        questionCount=len(bank),
        unitCounts=unit_counts,
        version=bank.version,
        loadedAt=bank.loaded_at,
        sourceFilename=bank.source_filename,
    )
