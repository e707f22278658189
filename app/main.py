# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.settings import settings
from app.core.logging import configure_logging
from app.middleware.error_handler import setup_exception_handlers
from app.middleware.request_context import RequestContextMiddleware

from app.routes.upload import router as upload_router
from app.routes.generate import router as generate_router
from app.routes.bank import router as bank_router
from app.routes.export_docx import router as export_router

# ---------- 앱 초기화 ----------
configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.SERVICE_NAME,
    version="1.0.0",
    description="엑셀 문제은행 업로드 후 중간고사(mid1/mid2/special) 시험지 무작위 생성",
)

# ---------- 미들웨어 ----------
app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
    max_age=600,
)

# ---------- 예외 핸들러 ----------
setup_exception_handlers(app)

# ---------- 라우터 등록 ----------
app.include_router(upload_router, prefix="/api")
app.include_router(generate_router, prefix="/api")
app.include_router(bank_router, prefix="/api")
app.include_router(export_router, prefix="/api")

# ---------- 헬스 체크 ----------
@app.get("/api/health")
def health_check():
    return {"message": "OK"}
