# app/middleware/request_context.py
import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.constants import HTTPHeaders

access_logger = logging.getLogger("access")

def _get_req_id_from_headers(request: Request) -> Optional[str]:
    # Starlette 헤더 dict는 case-insensitive
    return request.headers.get(HTTPHeaders.REQUEST_ID)

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    요청마다 trace_id 부여 (X-Request-Id가 오면 그대로 사용)
    응답 헤더에 trace_id를 싣고 접근 로그 1줄 기록
    """
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        trace_id = _get_req_id_from_headers(request) or str(uuid.uuid4())
        request.state.trace_id = trace_id

        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)

            if response is not None:
                response.headers[HTTPHeaders.REQUEST_ID] = trace_id

                # 브라우저에서 읽을 수 있도록 노출 (기존 값과 병합)
                expose = response.headers.get("Access-Control-Expose-Headers")
                if expose:
                    items = {h.strip() for h in expose.split(",")}
                    items.add(HTTPHeaders.REQUEST_ID)
                    response.headers["Access-Control-Expose-Headers"] = ", ".join(sorted(items))
                else:
                    response.headers["Access-Control-Expose-Headers"] = HTTPHeaders.REQUEST_ID

            access_logger.info(
                "request_done",
                extra={
                    "trace_id": trace_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": getattr(response, "status_code", None),
                    "latency_ms": elapsed_ms,
                },
            )
