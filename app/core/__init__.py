"""
Core 모듈
설정, 상수, 예외 등 핵심 컴포넌트
"""
from app.core.settings import settings, get_settings
from app.core.constants import (
    PaperTypes,
    ExcelColumns,
    UploadConfig,
    ErrorCodes,
    ErrorMessages,
    HTTPHeaders,
)
from app.core.exceptions import (
    AppException,
    NoFileProvidedError,
    UnsupportedFileTypeError,
    FileTooLargeError,
    ParseFailureError,
    BankAbsentError,
    MissingParameterError,
    UnknownPaperTypeError,
    QuotaShortfallError,
    PaperGenerationError,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",

    # Constants
    "PaperTypes",
    "ExcelColumns",
    "UploadConfig",
    "ErrorCodes",
    "ErrorMessages",
    "HTTPHeaders",

    # Exceptions
    "AppException",
    "NoFileProvidedError",
    "UnsupportedFileTypeError",
    "FileTooLargeError",
    "ParseFailureError",
    "BankAbsentError",
    "MissingParameterError",
    "UnknownPaperTypeError",
    "QuotaShortfallError",
    "PaperGenerationError",
]
