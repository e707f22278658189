# app/routes/generate.py
import logging
import random
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from app.core.exceptions import AppException, PaperGenerationError
from app.core.settings import settings
from app.schemas.error import ErrorResponse
from app.schemas.paper import GenerateRequest, GenerateResponse, PaperDetails
from app.services.question_bank import QuestionBankStore, get_question_bank_store
from app.services.selector import get_rng, paper_details, select_questions

router = APIRouter(tags=["generate"])
log = logging.getLogger("app.generate")


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_paper(
    request: Request,
    req: Optional[GenerateRequest] = Body(None),
    store: QuestionBankStore = Depends(get_question_bank_store),
    rng: random.Random = Depends(get_rng),
):
    """
    시험지 생성
    검사 순서: 문제은행 존재 → 유형/주 단원 → 단원별 할당량
    """
    trace_id = getattr(request.state, "trace_id", None)
    req = req or GenerateRequest()

    # 요청당 한 번만 참조를 읽음
    bank = store.require()

    try:
        questions = select_questions(
            bank,
            req.paperType,
            main_unit=req.mainUnit,
            rng=rng,
            exclude_selected=settings.POOLED_DRAW_EXCLUDES_SELECTED,
        )
    except AppException:
        raise
    except Exception as e:
        log.exception(
            "route_generate_unexpected_error",
            extra={"trace_id": trace_id, "paper_type": req.paperType},
        )
        raise PaperGenerationError(paper_type=req.paperType, original_error=e) from e

    log.info(
        "paper_generated",
        extra={
            "trace_id": trace_id,
            "paper_type": req.paperType,
            "main_unit": req.mainUnit,
            "bank_version": bank.version,
            "question_ids": [q.id for q in questions],
        },
    )

    return GenerateResponse(
        paperType=req.paperType,
        mainUnit=req.mainUnit,
        questions=questions,
        paperDetails=PaperDetails(**paper_details(questions)),
    )
