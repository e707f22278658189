# app/models/question.py
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class QuestionRecord(BaseModel):
    """
    엑셀 한 행에서 만든 문항 레코드 (생성 후 변경 불가)
    - id: 업로드 순서 기반 1부터 시작하는 번호 (엑셀의 번호 열과 무관)
    - unit: 정수 변환 실패 시 None → 어떤 단원 필터에도 걸리지 않음
    - 나머지 필드는 엑셀 값 그대로 (타입 검증 없음)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    unit: Optional[int] = None
    question: Any = None
    bt_level: Any = Field(default=None, alias="btLevel")
    subject_code: Any = Field(default=None, alias="subjectCode")
    subject: Any = None
    branch: Any = None
    regulation: Any = None
    year: Any = None
    semester: Any = None
    month: Any = None


@dataclass(frozen=True)
class QuestionBank:
    """업로드 1회분 문제은행 스냅샷. 교체만 되고 수정되지 않는다."""
    records: Tuple[QuestionRecord, ...]
    version: int = 1
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_filename: Optional[str] = None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def unit_counts(self) -> Dict[Optional[int], int]:
        """단원별 문항 수 (단원 변환 실패 문항은 None 키)"""
        return dict(Counter(r.unit for r in self.records))
