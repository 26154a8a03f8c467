# lms_media/services/store.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class ObjectStore(Protocol):
    """The four multipart calls the orchestrator needs from a store."""

    bucket: str

    def create_multipart_upload(self, key: str, content_type: str) -> str: ...

    def presign_upload_part(
        self, key: str, upload_id: str, part_number: int, expires_in: int
    ) -> str: ...

    def complete_multipart_upload(
        self, key: str, upload_id: str, parts: List[Dict[str, Any]]
    ) -> str: ...

    def abort_multipart_upload(self, key: str, upload_id: str) -> None: ...


class S3ObjectStore:
    """
    boto3-implementatie van ObjectStore.
    Fouten van botocore gaan ongewijzigd omhoog; de orchestrator normaliseert ze.
    """

    def __init__(self, client, bucket: str, endpoint_url: Optional[str] = None):
        self.client = client
        self.bucket = bucket
        self.endpoint_url = (endpoint_url or "").rstrip("/")

    def create_multipart_upload(self, key: str, content_type: str) -> str:
        resp = self.client.create_multipart_upload(
            Bucket=self.bucket,
            Key=key,
            ContentType=content_type,
        )
        return resp["UploadId"]

    def presign_upload_part(
        self, key: str, upload_id: str, part_number: int, expires_in: int
    ) -> str:
        # Puur lokaal tekenen, geen round-trip naar de store
        return self.client.generate_presigned_url(
            "upload_part",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "UploadId": upload_id,
                "PartNumber": part_number,
            },
            ExpiresIn=expires_in,
        )

    def complete_multipart_upload(
        self, key: str, upload_id: str, parts: List[Dict[str, Any]]
    ) -> str:
        # parts: [{"ETag": ..., "PartNumber": ...}], oplopend gesorteerd
        resp = self.client.complete_multipart_upload(
            Bucket=self.bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={"Parts": parts},
        )
        return resp.get("Location") or self.object_url(key)

    def abort_multipart_upload(self, key: str, upload_id: str) -> None:
        self.client.abort_multipart_upload(
            Bucket=self.bucket, Key=key, UploadId=upload_id
        )

    def object_url(self, key: str) -> str:
        return f"{self.endpoint_url}/{self.bucket}/{key}"
