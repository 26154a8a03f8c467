# lms_media/aws/s3_errors.py
from typing import Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from lms_media.core.errors import InvalidRequest, MultipartError, UpstreamFailure
from lms_media.core.logging_config import logger

# Codes waarbij de store eigenlijk zegt: de caller heeft iets fout
_CALLER_MISTAKE_CODES = {"NoSuchKey", "NotFound", "InvalidArgument", "KeyTooLongError"}
_NO_SUCH_UPLOAD_CODES = {"NoSuchUpload"}
_THROTTLE_CODES = {"SlowDown", "Throttling", "RequestTimeout"}


def _error_code(exc: ClientError) -> str:
    return (exc.response.get("Error", {}) or {}).get("Code", "") or ""


def is_no_such_upload(exc: Exception) -> bool:
    return isinstance(exc, ClientError) and _error_code(exc) in _NO_SUCH_UPLOAD_CODES


def classify_store_error(
    exc: BotoCoreError | ClientError,
    *,
    operation: str,
    key: Optional[str] = None,
    upload_id: Optional[str] = None,
) -> MultipartError:
    """
    Vertaal een botocore-fout naar InvalidRequest / UpstreamFailure.
    De boodschap van de store blijft behouden voor diagnose.
    """
    if isinstance(exc, ClientError):
        err = exc.response.get("Error", {}) or {}
        meta = exc.response.get("ResponseMetadata", {}) or {}

        code = err.get("Code", "") or ""
        msg = err.get("Message", "") or str(exc)
        aws_http = int(meta.get("HTTPStatusCode", 500) or 500)
        aws_request_id = meta.get("RequestId")

        logger.warning(
            "multipart_store_error",
            operation=operation,
            key=key,
            upload_id=upload_id,
            code=code,
            aws_http=aws_http,
            aws_request_id=aws_request_id,
        )

        if code in _CALLER_MISTAKE_CODES:
            return InvalidRequest(
                msg,
                code=code,
                status_code=404 if code in {"NoSuchKey", "NotFound"} else 400,
                hint="Controleer key en uploadId.",
                operation=operation,
                aws_request_id=aws_request_id,
            )
        if code in _NO_SUCH_UPLOAD_CODES:
            return UpstreamFailure(
                msg,
                code=code,
                hint="Upload bestaat niet meer (al voltooid of afgebroken).",
                operation=operation,
                aws_request_id=aws_request_id,
            )
        if code in _THROTTLE_CODES:
            return UpstreamFailure(
                msg,
                code=code,
                status_code=429,
                hint="Store throttling/timeout; probeer zo opnieuw.",
                operation=operation,
                aws_request_id=aws_request_id,
            )
        if code in {"AccessDenied", "SignatureDoesNotMatch", "InvalidAccessKeyId"}:
            hint = "Controleer MINIO_ACCESS_KEY/MINIO_SECRET_KEY en bucket policy."
        elif code == "NoSuchBucket":
            hint = "Controleer MINIO_BUCKET."
        else:
            hint = None
        return UpstreamFailure(
            msg,
            code=code,
            hint=hint,
            operation=operation,
            aws_request_id=aws_request_id,
        )

    if isinstance(exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
        logger.warning(
            "multipart_store_unreachable",
            operation=operation,
            key=key,
            upload_id=upload_id,
            exc=type(exc).__name__,
        )
        return UpstreamFailure(
            str(exc),
            code="StoreUnreachable",
            status_code=504,
            hint="Controleer MINIO_ENDPOINT/MINIO_PORT/MINIO_USE_SSL.",
            operation=operation,
        )

    code = "NoCredentials" if isinstance(exc, NoCredentialsError) else "ClientFailure"

    logger.error(
        "multipart_store_failure",
        operation=operation,
        key=key,
        upload_id=upload_id,
        code=code,
        exc=type(exc).__name__,
    )
    return UpstreamFailure(str(exc), code=code, operation=operation)
