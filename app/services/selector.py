"""
시험지 문항 선택기
시험지 유형별 단원 할당표에 따라 문제은행에서 중복 없이 무작위 추첨

할당표
- mid1    : 1단원 2, 2단원 2, 3단원 1, (1+2단원 합산) 1
- mid2    : 3단원 1, 4단원 2, 5단원 2, (4+5단원 합산) 1
- special : 주 단원 2, 나머지 단원 전체 4, 최종 순서 섞기
"""
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.core.constants import ErrorMessages, PaperTypes
from app.core.settings import settings
from app.core.exceptions import (
    MissingParameterError,
    QuotaShortfallError,
    UnknownPaperTypeError,
)
from app.models.question import QuestionBank, QuestionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quota:
    """
    한 번의 추첨 단계
    - units: 추첨 대상 단원 (complement=True면 이 단원들을 제외한 나머지 전체)
    - pooled: 앞 단계들과 단원을 공유하는 합산 추첨
    """
    units: Tuple[int, ...]
    count: int
    pooled: bool = False
    complement: bool = False

    def matches(self, record: QuestionRecord) -> bool:
        # 단원 변환 실패 문항은 어떤 단계에도 포함되지 않음
        if record.unit is None:
            return False
        hit = record.unit in self.units
        return not hit if self.complement else hit

    @property
    def label(self) -> str:
        if self.complement:
            return "other units"
        if len(self.units) == 1:
            return f"Unit {self.units[0]}"
        return "Units " + " + ".join(str(u) for u in self.units)


@dataclass(frozen=True)
class PaperRule:
    paper_type: str
    quotas: Tuple[Quota, ...]
    shuffle: bool = False

    @property
    def size(self) -> int:
        return sum(q.count for q in self.quotas)


MID1_RULE = PaperRule(
    paper_type=PaperTypes.MID1,
    quotas=(
        Quota(units=(1,), count=2),
        Quota(units=(2,), count=2),
        Quota(units=(3,), count=1),
        Quota(units=(1, 2), count=1, pooled=True),
    ),
)

MID2_RULE = PaperRule(
    paper_type=PaperTypes.MID2,
    quotas=(
        Quota(units=(3,), count=1),
        Quota(units=(4,), count=2),
        Quota(units=(5,), count=2),
        Quota(units=(4, 5), count=1, pooled=True),
    ),
)

PAPER_RULES: Dict[str, PaperRule] = {
    MID1_RULE.paper_type: MID1_RULE,
    MID2_RULE.paper_type: MID2_RULE,
}


def special_rule(main_unit: int) -> PaperRule:
    """주 단원 2문항 + 나머지 단원 4문항, 최종 순서 섞기"""
    return PaperRule(
        paper_type=PaperTypes.SPECIAL,
        quotas=(
            Quota(units=(main_unit,), count=2),
            Quota(units=(main_unit,), count=4, complement=True),
        ),
        shuffle=True,
    )


def sample_questions(
    questions: Sequence[QuestionRecord],
    count: int,
    rng: random.Random
) -> List[QuestionRecord]:
    """questions에서 count개를 중복 없이 균등 추첨"""
    return rng.sample(list(questions), count)


def _partition(bank: QuestionBank, quota: Quota) -> List[QuestionRecord]:
    return [r for r in bank.records if quota.matches(r)]


def _overlapping_drawn(rule: PaperRule, index: int) -> int:
    """합산 단계 이전에 같은 단원 범위에서 이미 뽑힌 문항 수"""
    pooled = rule.quotas[index]
    return sum(
        q.count for q in rule.quotas[:index]
        if not q.complement and set(q.units) <= set(pooled.units)
    )


def check_quotas(
    bank: QuestionBank,
    rule: PaperRule,
    exclude_selected: bool = False
) -> List[Dict[str, Any]]:
    """
    모든 단계의 문항 수가 할당량 이상인지 추첨 전에 한 번에 검사

    Returns:
        부족한 단계 목록 (없으면 빈 리스트)
    """
    shortfalls = []
    for i, quota in enumerate(rule.quotas):
        available = len(_partition(bank, quota))
        if quota.pooled and exclude_selected:
            available = max(available - _overlapping_drawn(rule, i), 0)
        if available < quota.count:
            shortfalls.append({
                "label": quota.label,
                "units": list(quota.units),
                "required": quota.count,
                "available": available,
            })
    return shortfalls


def apply_rule(
    bank: QuestionBank,
    rule: PaperRule,
    rng: Optional[random.Random] = None,
    exclude_selected: bool = False
) -> List[QuestionRecord]:
    """
    할당표대로 추첨

    합산 단계는 기본적으로 두 단원을 새로 합친 풀에서 뽑기 때문에 앞 단계에서
    이미 뽑힌 문항이 다시 나올 수 있다. exclude_selected=True면 나머지에서만 뽑는다.

    Raises:
        QuotaShortfallError: 할당량을 채울 수 없는 단계가 있을 때
    """
    rng = rng or random.Random()

    shortfalls = check_quotas(bank, rule, exclude_selected=exclude_selected)
    if shortfalls:
        logger.warning(
            "quota_shortfall",
            extra={"paper_type": rule.paper_type, "shortfalls": shortfalls},
        )
        raise QuotaShortfallError(shortfalls)

    selected: List[QuestionRecord] = []
    for quota in rule.quotas:
        pool = _partition(bank, quota)
        if quota.pooled and exclude_selected:
            chosen = {r.id for r in selected}
            pool = [r for r in pool if r.id not in chosen]
        selected.extend(sample_questions(pool, quota.count, rng))

    if rule.shuffle:
        rng.shuffle(selected)
    return selected


def select_questions(
    bank: QuestionBank,
    paper_type: Optional[str],
    main_unit: Optional[int] = None,
    rng: Optional[random.Random] = None,
    exclude_selected: bool = False
) -> List[QuestionRecord]:
    """
    시험지 유형에 맞게 문항 선택

    Args:
        bank: 문제은행 스냅샷
        paper_type: "mid1" | "mid2" | "special"
        main_unit: special 전용 주 단원 (0/None이면 미지정)
        rng: 난수 생성기 (테스트에서 시드 고정용)
        exclude_selected: 합산 단계에서 이미 뽑힌 문항 제외 여부

    Raises:
        UnknownPaperTypeError, MissingParameterError, QuotaShortfallError
    """
    if paper_type == PaperTypes.SPECIAL:
        if not main_unit:
            raise MissingParameterError("mainUnit", ErrorMessages.MISSING_MAIN_UNIT)
        rule = special_rule(main_unit)
    elif paper_type in PAPER_RULES:
        rule = PAPER_RULES[paper_type]
    else:
        raise UnknownPaperTypeError(paper_type, supported=list(PaperTypes.ALL))

    return apply_rule(bank, rule, rng=rng, exclude_selected=exclude_selected)


def paper_details(questions: Sequence[QuestionRecord]) -> Dict[str, Any]:
    """
    시험지 헤더 정보는 첫 번째 문항에서 가져옴
    (문제은행이 한 과목으로만 구성되어 있다는 전제)
    """
    first = questions[0] if questions else None
    if first is None:
        return {
            "subject": None, "subjectCode": None, "branch": None,
            "regulation": None, "year": None, "semester": None,
        }
    return {
        "subject": first.subject,
        "subjectCode": first.subject_code,
        "branch": first.branch,
        "regulation": first.regulation,
        "year": first.year,
        "semester": first.semester,
    }


# ===========================================
# 난수 생성기 (FastAPI 의존성)
# ===========================================

_seeded_rng: Optional[random.Random] = None


def get_rng() -> random.Random:
    """RANDOM_SEED가 있으면 시드 고정 싱글톤, 없으면 요청마다 새 생성기"""
    global _seeded_rng
    if settings.RANDOM_SEED is None:
        return random.Random()
    if _seeded_rng is None:
        _seeded_rng = random.Random(settings.RANDOM_SEED)
    return _seeded_rng
