import asyncio
import logging
from typing import Optional, Tuple

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from audionotes.constants import SIGNED_URL_TTL_PLAYBACK, SIGNED_URL_TTL_PROCESSING
from audionotes.core.config.settings import ProjectSettings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.core.utils.s3_utils import S3Client


logger = logging.getLogger(__name__)

_STORAGE_ERRORS = (ClientError, BotoCoreError)


class ObjectStorageService:
    """
    Async facade over the blocking S3 client.

    boto3 calls run in a worker thread.
    Every failure is raised as an AppException, nothing is swallowed here.
    """

    def __init__(
        self,
        s3_client: S3Client,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 60.0,
        connect_timeout: float = 10.0,
    ):
        self.s3_client = s3_client
        self._http_transport = http_transport
        self._timeout = httpx.Timeout(timeout, connect=connect_timeout)

    @classmethod
    def from_settings(cls, settings: ProjectSettings) -> "ObjectStorageService":
        s3_client = S3Client(
            bucket_name=settings.R2_BUCKET_NAME,
            endpoint_url=settings.R2_ENDPOINT,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            region_name=settings.R2_REGION,
            connect_timeout=settings.CONNECT_TIMEOUT,
            read_timeout=settings.DEFAULT_TIMEOUT,
        )
        return cls(
            s3_client,
            timeout=settings.DEFAULT_TIMEOUT,
            connect_timeout=settings.CONNECT_TIMEOUT,
        )

    async def upload(self, content: bytes, key: str, content_type: Optional[str] = None) -> None:
        try:
            await asyncio.to_thread(self.s3_client.upload_content, content, key, content_type)
        except _STORAGE_ERRORS as error:
            raise AppException(
                ErrorKey.STORAGE_UPLOAD_FAILED,
                status_code=500,
                error_detail=f"Upload of {key} failed: {error}",
                error_obj=error,
            )
        logger.debug(f"Uploaded {len(content)} bytes to {key}")

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.s3_client.delete_file, key)
        except _STORAGE_ERRORS as error:
            raise AppException(
                ErrorKey.STORAGE_DELETE_FAILED,
                status_code=500,
                error_detail=f"Delete of {key} failed: {error}",
                error_obj=error,
            )
        logger.debug(f"Deleted object {key}")

    async def signed_url(self, key: str, ttl_seconds: int = SIGNED_URL_TTL_PLAYBACK) -> str:
        try:
            return await asyncio.to_thread(self.s3_client.generate_presigned_url, key, ttl_seconds)
        except _STORAGE_ERRORS as error:
            raise AppException(
                ErrorKey.STORAGE_SIGN_FAILED,
                status_code=500,
                error_detail=f"Signing {key} failed: {error}",
                error_obj=error,
            )

    async def fetch(
        self, key: str, ttl_seconds: int = SIGNED_URL_TTL_PROCESSING
    ) -> Tuple[bytes, Optional[str]]:
        """
        Download an object through a short-lived signed URL.

        Returns the object bytes and the Content-Type reported by the store,
        or None when the store did not send one.
        """
        url = await self.signed_url(key, ttl_seconds)
        try:
            async with httpx.AsyncClient(
                transport=self._http_transport, timeout=self._timeout
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as error:
            raise AppException(
                ErrorKey.AUDIO_FETCH_FAILED,
                status_code=500,
                error_detail=f"Fetching {key} failed: {error}",
                error_obj=error,
            )

        if not response.is_success:
            raise AppException(
                ErrorKey.AUDIO_FETCH_FAILED,
                status_code=500,
                error_detail=f"Fetching {key} returned HTTP {response.status_code}",
            )

        return response.content, response.headers.get("content-type")
