# lms_media/infra/s3_client.py

import threading

import boto3
from botocore.config import Config

from lms_media.core.logging_config import logger
from lms_media.core.settings import settings

# path-style addressing: MinIO serveert buckets niet als subdomein
_BOTO_CFG = Config(
    region_name=settings.MINIO_REGION,
    signature_version="s3v4",
    s3={"addressing_style": "path"},
    retries={"max_attempts": 5, "mode": "standard"},
    connect_timeout=3,
    read_timeout=10,
)

_s3_client = None
_s3_lock = threading.Lock()


def get_s3():
    """Lazy singleton S3 client voor de geconfigureerde store."""
    global _s3_client
    with _s3_lock:
        if _s3_client is None:
            _s3_client = boto3.client(
                "s3",
                endpoint_url=settings.endpoint_url,
                aws_access_key_id=settings.MINIO_ACCESS_KEY,
                aws_secret_access_key=settings.MINIO_SECRET_KEY,
                config=_BOTO_CFG,
            )
            logger.info(
                "s3_client_initialized",
                endpoint=settings.endpoint_url,
                region=settings.MINIO_REGION,
                bucket=settings.MINIO_BUCKET,
            )
    return _s3_client


def get_bucket() -> str:
    return settings.MINIO_BUCKET
