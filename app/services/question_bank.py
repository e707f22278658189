"""
문제은행 저장소
프로세스 전역에서 하나의 문제은행을 보관하고 업로드 시 통째로 교체
"""
import logging
import threading
from typing import Iterable, Optional

from app.core.exceptions import BankAbsentError
from app.models.question import QuestionBank, QuestionRecord

logger = logging.getLogger(__name__)


class QuestionBankStore:
    """
    문제은행 참조 셀 (absent | loaded)

    - 시작 시 비어 있음(absent)
    - 업로드 성공 시 새 QuestionBank로 참조 1회 대입 (병합/추가 없음)
    - 조회 요청은 snapshot()/require()로 참조를 한 번만 읽어서 사용

    라우트는 스레드풀에서 실행된다. 교체끼리는 잠금으로 직렬화해 version이
    겹치지 않게 하고, 읽기는 잠금 없이 참조만 가져간다. 업로드와 생성 요청이
    동시에 들어오면 생성 요청은 직전 문제은행으로 처리될 수 있다(stale read).
    참조 교체가 대입 한 번이므로 반쯤 교체된 문제은행을 읽는 경우는 없다.
    """

    def __init__(self):
        self._bank: Optional[QuestionBank] = None
        self._version = 0
        self._write_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        """업로드된 문제은행 존재 여부 (빈 문제은행도 loaded)"""
        return self._bank is not None

    def snapshot(self) -> Optional[QuestionBank]:
        """현재 문제은행 (없으면 None)"""
        return self._bank

    def require(self) -> QuestionBank:
        """
        현재 문제은행 반환

        Raises:
            BankAbsentError: 업로드된 문제은행이 없을 때
        """
        bank = self._bank
        if bank is None:
            raise BankAbsentError()
        return bank

    def replace(
        self,
        records: Iterable[QuestionRecord],
        source_filename: Optional[str] = None
    ) -> QuestionBank:
        """
        문제은행 교체

        Args:
            records: 새 문항 레코드들 (순서 유지)
            source_filename: 업로드 원본 파일명

        Returns:
            새로 적재된 QuestionBank
        """
        records = tuple(records)
        with self._write_lock:
            bank = QuestionBank(
                records=records,
                version=self._version + 1,
                source_filename=source_filename,
            )
            self._version = bank.version
            self._bank = bank

        logger.info(
            "bank_loaded",
            extra={
                "version": bank.version,
                "question_count": len(bank),
                "source_filename": source_filename,
            }
        )
        return bank

    def clear(self) -> None:
        """문제은행 제거 (absent 상태로 복귀)"""
        self._bank = None


# ===========================================
# 싱글톤 인스턴스
# ===========================================

_bank_store: Optional[QuestionBankStore] = None


def get_question_bank_store() -> QuestionBankStore:
    """QuestionBankStore 싱글톤 인스턴스 반환 (FastAPI 의존성으로도 사용)"""
    global _bank_store
    if _bank_store is None:
        _bank_store = QuestionBankStore()
    return _bank_store
