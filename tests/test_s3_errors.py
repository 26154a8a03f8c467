import pytest
from botocore.exceptions import ConnectTimeoutError, NoCredentialsError

from lms_media.aws.s3_errors import classify_store_error, is_no_such_upload
from lms_media.core.errors import InvalidRequest, UpstreamFailure


@pytest.mark.parametrize(
    "code,status,expected_type,expected_status",
    [
        ("NoSuchKey", 404, InvalidRequest, 404),
        ("InvalidArgument", 400, InvalidRequest, 400),
        ("NoSuchUpload", 404, UpstreamFailure, 502),
        ("NoSuchBucket", 404, UpstreamFailure, 502),
        ("AccessDenied", 403, UpstreamFailure, 502),
        ("SlowDown", 503, UpstreamFailure, 429),
        ("InternalError", 500, UpstreamFailure, 502),
    ],
)
def test_client_errors_are_classified(make_client_error, code, status, expected_type, expected_status):
    err = classify_store_error(make_client_error(code, status=status), operation="complete", key="k", upload_id="u")
    assert type(err) is expected_type
    assert err.status_code == expected_status
    assert err.code == code
    assert err.aws_request_id == "req-123"


def test_store_message_is_preserved(make_client_error):
    err = classify_store_error(
        make_client_error("InvalidPartOrder", "The list of parts was not in ascending order."),
        operation="complete",
    )
    assert err.message == "The list of parts was not in ascending order."
    assert err.to_body()["error"]["type"] == "UpstreamFailure"


def test_timeouts_are_gateway_timeouts():
    err = classify_store_error(ConnectTimeoutError(endpoint_url="http://minio.test:9000"), operation="initiate")
    assert isinstance(err, UpstreamFailure)
    assert err.status_code == 504
    assert err.code == "StoreUnreachable"


def test_missing_credentials():
    err = classify_store_error(NoCredentialsError(), operation="sign_part")
    assert isinstance(err, UpstreamFailure)
    assert err.code == "NoCredentials"


def test_is_no_such_upload(make_client_error):
    assert is_no_such_upload(make_client_error("NoSuchUpload", status=404))
    assert not is_no_such_upload(make_client_error("NoSuchKey", status=404))
    assert not is_no_such_upload(NoCredentialsError())
