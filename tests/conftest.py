import os

# Dummy env zodat settings/boto3 niet zeuren; moet vóór de lms_media imports
os.environ.setdefault("MINIO_ENDPOINT", "minio.test")
os.environ.setdefault("MINIO_PORT", "9000")
os.environ.setdefault("MINIO_USE_SSL", "false")
os.environ.setdefault("MINIO_ACCESS_KEY", "test")
os.environ.setdefault("MINIO_SECRET_KEY", "test")
os.environ.setdefault("MINIO_BUCKET", "test-bucket")
os.environ.setdefault("JWT_SECRET", "test-secret")

from uuid import uuid4

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from lms_media.auth.jwt import create_access_token
from lms_media.dependencies import get_orchestrator
from lms_media.main import app
from lms_media.services.multipart import MultipartOrchestrator, SessionState


def client_error(code: str, message: str = "", status: int = 400, operation: str = "Op") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message or code},
            "ResponseMetadata": {"HTTPStatusCode": status, "RequestId": "req-123"},
        },
        operation,
    )


class FakeObjectStore:
    """In-memory store met dezelfde sessieregels als S3/MinIO."""

    def __init__(self, bucket: str = "test-bucket"):
        self.bucket = bucket
        self.sessions = {}  # upload_id -> {"key", "content_type", "state", "parts"}
        self.calls = []

    def _session(self, key: str, upload_id: str, operation: str) -> dict:
        session = self.sessions.get(upload_id)
        if session is None or session["key"] != key or session["state"] != SessionState.INITIATED:
            raise client_error(
                "NoSuchUpload",
                "The specified multipart upload does not exist.",
                status=404,
                operation=operation,
            )
        return session

    def create_multipart_upload(self, key, content_type):
        self.calls.append(("create", key, content_type))
        upload_id = uuid4().hex
        self.sessions[upload_id] = {
            "key": key,
            "content_type": content_type,
            "state": SessionState.INITIATED,
            "parts": None,
        }
        return upload_id

    def presign_upload_part(self, key, upload_id, part_number, expires_in):
        self.calls.append(("sign", key, upload_id, part_number))
        return (
            f"https://store.test/{self.bucket}/{key}"
            f"?uploadId={upload_id}&partNumber={part_number}&X-Amz-Expires={expires_in}"
        )

    def complete_multipart_upload(self, key, upload_id, parts):
        self.calls.append(("complete", key, upload_id))
        session = self._session(key, upload_id, "CompleteMultipartUpload")
        session["state"] = SessionState.COMPLETED
        session["parts"] = list(parts)
        return f"https://store.test/{self.bucket}/{key}"

    def abort_multipart_upload(self, key, upload_id):
        self.calls.append(("abort", key, upload_id))
        session = self._session(key, upload_id, "AbortMultipartUpload")
        session["state"] = SessionState.ABORTED

    def store_calls(self, kind: str) -> list:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def orchestrator(store):
    return MultipartOrchestrator(store, expires_in=3600)


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(user_id="u1", role="student")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_client_error():
    return client_error
