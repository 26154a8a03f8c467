# lms_media/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

multipart_counter = Counter(
    "lms_media_multipart_total",
    "Multipart operations by outcome",
    ["operation", "result"],  # result: success|noop|invalid|upstream
)

dropped_parts_counter = Counter(
    "lms_media_multipart_dropped_parts_total",
    "Malformed part entries dropped at completion",
)

latency_hist = Histogram(
    "lms_media_multipart_latency_seconds",
    "Orchestrator latency per operation",
    ["operation"],  # initiate|sign_part|sign_parts|complete|abort
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
