# app/schemas/paper.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.question import QuestionRecord


class UploadResponse(BaseModel):
    message: str = "File processed successfully"
    questionCount: int


class GenerateRequest(BaseModel):
    # 유형 검증은 선택기에서 (미지정/오타 모두 UNKNOWN_PAPER_TYPE)
    paperType: Optional[str] = None
    mainUnit: Optional[int] = None

    @field_validator("mainUnit", mode="before")
    @classmethod
    def reject_bool_main_unit(cls, v: Any) -> Any:
        # true가 1로 바뀌지 않도록 (숫자 문자열 "3"은 허용)
        if isinstance(v, bool):
            raise ValueError("mainUnit must be a unit number")
        return v


class PaperDetails(BaseModel):
    subject: Any = None
    subjectCode: Any = None
    branch: Any = None
    regulation: Any = None
    year: Any = None
    semester: Any = None


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    paperType: Optional[str] = None
    mainUnit: Optional[int] = None
    questions: List[QuestionRecord] = Field(default_factory=list)
    paperDetails: PaperDetails = Field(default_factory=PaperDetails)


class BankSummary(BaseModel):
    loaded: bool
    questionCount: int = 0
    unitCounts: Dict[str, int] = Field(default_factory=dict)
    version: Optional[int] = None
    loadedAt: Optional[datetime] = None
    sourceFilename: Optional[str] = None
