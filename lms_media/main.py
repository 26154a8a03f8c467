# lms_media/main.py
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from lms_media.core.errors import MultipartError, multipart_error_handler
from lms_media.core.logging_config import setup_logging, logger
from lms_media.core.settings import settings
from lms_media.observability.metrics import router as metrics_router
from lms_media.routers import multipart


# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title="LMS Media", version="0.1.0")

setup_logging()
logger.info("startup", service="lms-media", bucket=settings.MINIO_BUCKET)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    client_ip = request.client.host if request.client else "unknown"

    bound_logger = logger.bind(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.add_exception_handler(MultipartError, multipart_error_handler)


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(multipart.router)
app.include_router(metrics_router)  # /metrics
