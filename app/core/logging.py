# app/core/logging.py
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger("app")
logger.setLevel(logging.INFO)

SAFE_ATTR_BLOCKLIST = {
    "args","asctime","created","exc_info","exc_text","filename",
    "funcName","levelname","levelno","lineno","module","msecs",
    "message","msg","name","pathname","process","processName",
    "relativeCreated","stack_info","thread","threadName","taskName",
}

class JsonFormatter(logging.Formatter):
    """
    표준 JSON 로그 포맷:
    {
      "ts": "2025-10-24T01:23:45.678Z",
      "ts_ms": 1698101025678,
      "level": "INFO",
      "logger": "app.generate",
      "msg": "paper_generated",
      "req_id": "...",
      "paper_type": "mid1",
      ... (extra)
    }
    """
    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "ts": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "ts_ms": int(now.timestamp() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # extra 필드
        for k, v in record.__dict__.items():
            if k in SAFE_ATTR_BLOCKLIST:
                continue
            # trace_id는 req_id 표준 키로
            if k == "trace_id" and "req_id" not in payload:
                payload["req_id"] = v
            else:
                payload[k] = v

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(payload, ensure_ascii=False, default=str)
        except TypeError:
            safe = {k: (str(v) if not isinstance(v, (str, int, float, bool, type(None), dict, list)) else v)
                    for k, v in payload.items()}
            return json.dumps(safe, ensure_ascii=False)

def configure_logging(level: str = "INFO") -> None:
    """
    - 루트/uvicorn 로거를 모두 JSON 포맷으로 교체
    - 콘솔(stdout) 출력
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.addHandler(handler)
        lg.setLevel(level.upper())

    logger.setLevel(level.upper())
