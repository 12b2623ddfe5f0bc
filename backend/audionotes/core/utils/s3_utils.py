import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class S3Client:
    """
    Blocking client bound to one bucket of an S3 compatible store.
    Cloudflare R2 is reached by passing its account endpoint as ``endpoint_url``.
    Errors are logged and re-raised as botocore exceptions.
    """

    def __init__(
        self,
        bucket_name: str,
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: Optional[str] = None,
        connect_timeout: float = 10,
        read_timeout: float = 60,
    ):
        self.bucket_name = bucket_name
        self.s3_client = boto3.client(
            's3',
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name,
            config=Config(
                signature_version="s3v4",
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
            ),
        )

    def _call(self, operation: str, key: str, **kwargs) -> Any:
        try:
            return getattr(self.s3_client, operation)(Bucket=self.bucket_name, Key=key, **kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "unknown")
            logger.error(f"S3 {operation} failed for {self.bucket_name}/{key} ({code}): {e}")
            raise

    def upload_content(self, content: bytes, key: str, content_type: Optional[str] = None) -> None:
        extra = {'ContentType': content_type} if content_type else {}
        self._call('put_object', key, Body=content, **extra)

    def delete_file(self, file_key: str) -> None:
        self._call('delete_object', file_key)

    def generate_presigned_url(self, file_key: str, expires_in: int = 3600) -> str:
        """Time-limited GET URL for ``file_key``. Signing happens locally, no request is made."""
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': file_key},
                ExpiresIn=expires_in,
            )
        except ClientError as e:
            logger.error(f"Could not sign URL for {self.bucket_name}/{file_key}: {e}")
            raise
