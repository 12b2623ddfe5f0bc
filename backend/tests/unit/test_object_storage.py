import httpx
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.core.utils.s3_utils import S3Client
from audionotes.services.object_storage import ObjectStorageService

SIGNED_URL = "https://bucket.example.test/recordings/u/r.webm?X-Amz-Signature=abc"


def _client_error(operation):
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


@pytest.fixture
def mock_s3_client():
    client = MagicMock(spec=S3Client)
    client.generate_presigned_url.return_value = SIGNED_URL
    return client


def _storage(s3_client, handler=None):
    transport = httpx.MockTransport(handler) if handler else None
    return ObjectStorageService(s3_client, http_transport=transport)


@pytest.mark.asyncio
async def test_upload_puts_object(mock_s3_client):
    await _storage(mock_s3_client).upload(b"abc", "recordings/u/r.webm", "audio/webm")

    mock_s3_client.upload_content.assert_called_once_with(b"abc", "recordings/u/r.webm", "audio/webm")


@pytest.mark.asyncio
async def test_upload_failure_raises(mock_s3_client):
    mock_s3_client.upload_content.side_effect = _client_error("PutObject")

    with pytest.raises(AppException) as exc_info:
        await _storage(mock_s3_client).upload(b"abc", "k")

    assert exc_info.value.error_key == ErrorKey.STORAGE_UPLOAD_FAILED
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_delete_failure_is_not_swallowed(mock_s3_client):
    mock_s3_client.delete_file.side_effect = _client_error("DeleteObject")

    with pytest.raises(AppException) as exc_info:
        await _storage(mock_s3_client).delete("k")

    assert exc_info.value.error_key == ErrorKey.STORAGE_DELETE_FAILED


@pytest.mark.asyncio
async def test_signed_url_default_ttl(mock_s3_client):
    url = await _storage(mock_s3_client).signed_url("recordings/u/r.webm")

    assert url == SIGNED_URL
    mock_s3_client.generate_presigned_url.assert_called_once_with("recordings/u/r.webm", 3600)


@pytest.mark.asyncio
async def test_signed_url_failure(mock_s3_client):
    mock_s3_client.generate_presigned_url.side_effect = _client_error("GetObject")

    with pytest.raises(AppException) as exc_info:
        await _storage(mock_s3_client).signed_url("k")

    assert exc_info.value.error_key == ErrorKey.STORAGE_SIGN_FAILED


@pytest.mark.asyncio
async def test_fetch_returns_bytes_and_content_type(mock_s3_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == SIGNED_URL
        return httpx.Response(200, content=b"audio-bytes", headers={"content-type": "audio/webm"})

    content, content_type = await _storage(mock_s3_client, handler).fetch("recordings/u/r.webm")

    assert content == b"audio-bytes"
    assert content_type == "audio/webm"
    mock_s3_client.generate_presigned_url.assert_called_once_with("recordings/u/r.webm", 300)


@pytest.mark.asyncio
async def test_fetch_non_success_status_is_fatal(mock_s3_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, content=b"denied")

    with pytest.raises(AppException) as exc_info:
        await _storage(mock_s3_client, handler).fetch("k")

    assert exc_info.value.error_key == ErrorKey.AUDIO_FETCH_FAILED
    assert "403" in exc_info.value.error_detail


@pytest.mark.asyncio
async def test_fetch_transport_error(mock_s3_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(AppException) as exc_info:
        await _storage(mock_s3_client, handler).fetch("k")

    assert exc_info.value.error_key == ErrorKey.AUDIO_FETCH_FAILED


def test_s3_client_targets_r2_endpoint():
    with patch("audionotes.core.utils.s3_utils.boto3.client") as boto_client:
        S3Client(
            bucket_name="bucket",
            endpoint_url="https://acc.r2.cloudflarestorage.com",
            aws_access_key_id="id",
            aws_secret_access_key="secret",
            region_name="auto",
        )

    args, kwargs = boto_client.call_args
    assert args == ("s3",)
    assert kwargs["endpoint_url"] == "https://acc.r2.cloudflarestorage.com"
    assert kwargs["region_name"] == "auto"


def test_s3_client_presigns_get_object():
    with patch("audionotes.core.utils.s3_utils.boto3.client") as boto_client:
        boto_client.return_value.generate_presigned_url.return_value = "signed"
        client = S3Client(bucket_name="bucket")

        assert client.generate_presigned_url("a/b.mp4", 300) == "signed"

    boto_client.return_value.generate_presigned_url.assert_called_once_with(
        "get_object", Params={"Bucket": "bucket", "Key": "a/b.mp4"}, ExpiresIn=300
    )


def test_s3_client_upload_sets_content_type_only_when_known():
    with patch("audionotes.core.utils.s3_utils.boto3.client") as boto_client:
        client = S3Client(bucket_name="bucket")
        client.upload_content(b"abc", "a/b.webm", "audio/webm")
        client.upload_content(b"abc", "a/b.dat")

    put_object = boto_client.return_value.put_object
    assert put_object.call_args_list[0].kwargs == {
        "Bucket": "bucket", "Key": "a/b.webm", "Body": b"abc", "ContentType": "audio/webm"
    }
    assert put_object.call_args_list[1].kwargs == {"Bucket": "bucket", "Key": "a/b.dat", "Body": b"abc"}


def test_s3_client_reraises_client_errors():
    with patch("audionotes.core.utils.s3_utils.boto3.client") as boto_client:
        boto_client.return_value.delete_object.side_effect = _client_error("DeleteObject")
        client = S3Client(bucket_name="bucket")

        with pytest.raises(ClientError):
            client.delete_file("a/b.webm")


def test_from_settings_derives_r2_endpoint():
    from audionotes.core.config.settings import settings

    with patch("audionotes.core.utils.s3_utils.boto3.client") as boto_client:
        ObjectStorageService.from_settings(settings)

    assert boto_client.call_args.kwargs["endpoint_url"] == "https://test-account.r2.cloudflarestorage.com"
