"""
전역 에러 핸들러
모든 예외를 {"code", "message", "trace_id"?, "details"?} 형식으로 응답
- details는 4xx에서만 포함 (5xx 원인은 서버 로그에만 기록)
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.constants import ErrorCodes, ErrorMessages
from app.core.exceptions import AppException

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, content: Dict[str, Any]) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        content["trace_id"] = trace_id
    return JSONResponse(status_code=status_code, content=content)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    애플리케이션에 전역 예외 핸들러 등록

    Args:
        app: FastAPI 애플리케이션 인스턴스
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException
    ) -> JSONResponse:
        """
        커스텀 AppException 처리
        4xx는 클라이언트가 고쳐서 재시도 가능, 5xx는 서버 로그에만 상세 기록
        """
        is_client_error = exc.status_code < 500
        logger.log(
            logging.WARNING if is_client_error else logging.ERROR,
            exc.code,
            extra={
                "trace_id": getattr(request.state, "trace_id", None),
                "error_message": exc.message,
                "status_code": exc.status_code,
                "details": exc.details,
                "path": str(request.url.path),
                "method": request.method,
            }
        )

        return _error_response(
            request,
            exc.status_code,
            exc.to_dict(include_details=is_client_error),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """
        요청 데이터 검증 실패 (예: mainUnit이 숫자가 아님)
        """
        errors = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]

        logger.warning(
            "validation_error",
            extra={
                "trace_id": getattr(request.state, "trace_id", None),
                "path": str(request.url.path),
                "errors": errors,
            }
        )

        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            {
                "code": ErrorCodes.VALIDATION_ERROR,
                "message": ErrorMessages.INVALID_INPUT,
                "details": {"errors": errors},
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(
            request,
            exc.status_code,
            {"code": f"HTTP_{exc.status_code}", "message": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """
        예상치 못한 일반 예외 처리
        프로세스는 계속 동작하고 클라이언트에는 일반 메시지만 전달
        """
        logger.error(
            "unhandled_exception",
            extra={
                "trace_id": getattr(request.state, "trace_id", None),
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "path": str(request.url.path),
                "method": request.method,
            },
            exc_info=True
        )

        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {
                "code": ErrorCodes.INTERNAL_SERVER_ERROR,
                "message": ErrorMessages.INTERNAL_SERVER_ERROR,
            },
        )
