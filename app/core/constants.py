"""
상수 정의 모듈
매직 스트링을 상수로 관리하여 유지보수성 향상
"""


class PaperTypes:
    """시험지 유형"""
    MID1 = "mid1"
    MID2 = "mid2"
    SPECIAL = "special"

    ALL = (MID1, MID2, SPECIAL)


class ExcelColumns:
    """업로드 엑셀의 헤더명 (첫 행)"""
    UNIT = "Unit"
    QUESTION = "Question"
    BT_LEVEL = "B.T Level"
    SUBJECT_CODE = "Subject Code"
    SUBJECT = "Subject"
    BRANCH = "Branch"
    REGULATION = "Regulation"
    YEAR = "Year"
    SEMESTER = "Sem"
    MONTH = "Month"


class UploadConfig:
    """업로드 관련 상수"""
    FIELD_NAME = "excelFile"
    XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    XLS_MIME = "application/vnd.ms-excel"
    ALLOWED_MIME_TYPES = (XLSX_MIME, XLS_MIME)
    CHUNK_SIZE = 1024 * 1024  # 1MB


class ErrorCodes:
    """에러 코드"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_FILE_PROVIDED = "NO_FILE_PROVIDED"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    PARSE_FAILED = "PARSE_FAILED"
    BANK_ABSENT = "BANK_ABSENT"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    UNKNOWN_PAPER_TYPE = "UNKNOWN_PAPER_TYPE"
    QUOTA_SHORTFALL = "QUOTA_SHORTFALL"
    GENERATION_FAILED = "GENERATION_FAILED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorMessages:
    """사용자에게 보여줄 에러 메시지"""
    NO_FILE_PROVIDED = "No file uploaded"
    UNSUPPORTED_FILE_TYPE = "Only Excel files are allowed!"
    FILE_TOO_LARGE = "Uploaded file is too large"
    PARSE_FAILED = "Error processing file"
    BANK_ABSENT = "No questions available. Please upload an Excel file first."
    MISSING_MAIN_UNIT = "Main unit not specified for special mid"
    UNKNOWN_PAPER_TYPE = "Invalid paper type"
    GENERATION_FAILED = "Error generating questions"
    INVALID_INPUT = "Invalid request"
    INTERNAL_SERVER_ERROR = "Internal server error"


class HTTPHeaders:
    """HTTP 헤더 상수"""
    REQUEST_ID = "X-Request-Id"
    DOCX_CONTENT = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
