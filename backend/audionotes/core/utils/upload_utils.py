from fastapi import UploadFile

from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException


async def read_upload_file(
    file: UploadFile, max_size: int = settings.MAX_CONTENT_LENGTH
) -> bytes:
    """Read the whole upload in chunks.
    Raises 413 as soon as the file grows past ``max_size``.
    """
    chunks = []
    size = 0
    CHUNK_SIZE = 1024 * 1024  # 1MB

    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > max_size:
            raise AppException(error_key=ErrorKey.FILE_SIZE_TOO_LARGE, status_code=413,
                               error_detail=f"Upload exceeds {max_size} bytes")
        chunks.append(chunk)

    return b"".join(chunks)
