"""
커스텀 예외 클래스 정의
일관된 에러 처리를 위한 예외 계층 구조
"""
from typing import Any, Dict, List, Optional
from fastapi import status

from app.core.constants import ErrorCodes, ErrorMessages


class AppException(Exception):
    """
    기본 애플리케이션 예외
    모든 커스텀 예외의 베이스 클래스
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        """예외를 응답용 딕셔너리로 변환"""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if include_details and self.details:
            result["details"] = self.details
        return result


# ===========================================
# 업로드 관련 예외
# ===========================================

class NoFileProvidedError(AppException):
    """첨부 파일 없이 업로드 요청"""

    def __init__(self, field_name: Optional[str] = None):
        super().__init__(
            code=ErrorCodes.NO_FILE_PROVIDED,
            message=ErrorMessages.NO_FILE_PROVIDED,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field_name} if field_name else None
        )


class UnsupportedFileTypeError(AppException):
    """허용되지 않은 MIME 타입"""

    def __init__(self, content_type: Optional[str] = None):
        super().__init__(
            code=ErrorCodes.UNSUPPORTED_FILE_TYPE,
            message=ErrorMessages.UNSUPPORTED_FILE_TYPE,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"content_type": content_type}
        )


class FileTooLargeError(AppException):
    """업로드 크기 제한 초과"""

    def __init__(self, limit: int):
        super().__init__(
            code=ErrorCodes.FILE_TOO_LARGE,
            message=ErrorMessages.FILE_TOO_LARGE,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"max_bytes": limit}
        )


class ParseFailureError(AppException):
    """스프레드시트를 읽을 수 없음"""

    def __init__(self, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.PARSE_FAILED,
            message=ErrorMessages.PARSE_FAILED,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )


# ===========================================
# 문항 선택 관련 예외
# ===========================================

class BankAbsentError(AppException):
    """업로드된 문제은행이 없음"""

    def __init__(self):
        super().__init__(
            code=ErrorCodes.BANK_ABSENT,
            message=ErrorMessages.BANK_ABSENT,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class MissingParameterError(AppException):
    """필수 파라미터 누락"""

    def __init__(self, parameter: str, message: str):
        super().__init__(
            code=ErrorCodes.MISSING_PARAMETER,
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"parameter": parameter}
        )


class UnknownPaperTypeError(AppException):
    """지원하지 않는 시험지 유형"""

    def __init__(self, paper_type: Any, supported: Optional[List[str]] = None):
        super().__init__(
            code=ErrorCodes.UNKNOWN_PAPER_TYPE,
            message=ErrorMessages.UNKNOWN_PAPER_TYPE,
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"paper_type": paper_type, "supported": supported or []}
        )


class QuotaShortfallError(AppException):
    """
    단원별 할당량을 채울 문항이 부족함

    shortfalls 항목: {"label": "Unit 1", "required": 2, "available": 1}
    """

    def __init__(self, shortfalls: List[Dict[str, Any]]):
        self.shortfalls = shortfalls
        parts = [
            f"{s['label']} (need {s['required']}, found {s['available']})"
            for s in shortfalls
        ]
        super().__init__(
            code=ErrorCodes.QUOTA_SHORTFALL,
            message="Insufficient questions in " + "; ".join(parts),
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"shortfalls": shortfalls}
        )


class PaperGenerationError(AppException):
    """시험지 생성 중 예상치 못한 실패"""

    def __init__(
        self,
        message: str = ErrorMessages.GENERATION_FAILED,
        paper_type: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if paper_type:
            details["paper_type"] = paper_type
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.GENERATION_FAILED,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )
