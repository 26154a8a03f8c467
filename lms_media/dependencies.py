from functools import lru_cache

from lms_media.core.settings import settings
from lms_media.infra.s3_client import get_bucket, get_s3
from lms_media.services.multipart import MultipartOrchestrator
from lms_media.services.store import S3ObjectStore


@lru_cache(maxsize=1)
def get_orchestrator() -> MultipartOrchestrator:
    """Singleton orchestrator voor FastAPI DI (stateless, dus veilig om te delen)."""
    store = S3ObjectStore(get_s3(), get_bucket(), endpoint_url=settings.endpoint_url)
    return MultipartOrchestrator(
        store,
        expires_in=settings.presign_expiry_sec,
        default_content_type=settings.default_content_type,
    )
