import logging
from typing import List
from uuid import UUID, uuid4

from fastapi import UploadFile
from injector import inject
from sqlalchemy.exc import SQLAlchemyError

from audionotes.constants import (
    DEFAULT_RECORDING_TITLE,
    RECORDING_LANGUAGE,
    RECORDINGS_KEY_PREFIX,
    SIGNED_URL_TTL_PLAYBACK,
)
from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.core.utils.enums.recording_status_enum import RecordingStatus
from audionotes.core.utils.transcript_utils import audio_extension_for
from audionotes.core.utils.upload_utils import read_upload_file
from audionotes.db.models.recording import RecordingModel
from audionotes.repositories.recordings import RecordingsRepository
from audionotes.schemas.recording import RecordingDetailResponse, RecordingRead
from audionotes.services.object_storage import ObjectStorageService


logger = logging.getLogger(__name__)


def recording_storage_key(user_id: UUID, recording_id: UUID, extension: str) -> str:
    return f"{RECORDINGS_KEY_PREFIX}/{user_id}/{recording_id}{extension}"


@inject
class RecordingService:
    def __init__(self, repository: RecordingsRepository, storage: ObjectStorageService):
        self.repository = repository
        self.storage = storage


    async def upload(self, audio: UploadFile, user_id: UUID) -> UUID:
        """
        Store an uploaded recording and create its row in ``processing`` state.

        The blob is written before the row. A row insert failure after a
        successful upload leaves the blob behind; it is logged with its key.
        """
        content = await read_upload_file(audio, settings.MAX_CONTENT_LENGTH)
        if not content:
            raise AppException(ErrorKey.EMPTY_AUDIO_FILE, status_code=400)

        recording_id = uuid4()
        key = recording_storage_key(
            user_id, recording_id, audio_extension_for(audio.content_type, audio.filename)
        )
        await self.storage.upload(content, key, audio.content_type or "application/octet-stream")

        try:
            await self.repository.create(
                {
                    "id": recording_id,
                    "user_id": user_id,
                    "title": DEFAULT_RECORDING_TITLE,
                    "duration": 0,
                    "r2_key": key,
                    "transcript": "",
                    "summary": "",
                    "status": RecordingStatus.PROCESSING.value,
                    "language": RECORDING_LANGUAGE,
                }
            )
        except SQLAlchemyError as error:
            logger.error(f"Recording row insert failed, stored object {key} is orphaned: {error}")
            raise AppException(
                ErrorKey.RECORDING_SAVE_FAILED,
                status_code=500,
                error_detail=str(error),
                error_obj=error,
            )

        logger.info(f"Uploaded recording {recording_id} ({len(content)} bytes) to {key}")
        return recording_id


    async def list_for_user(self, user_id: UUID) -> List[RecordingRead]:
        rows = await self.repository.list_for_user(user_id)
        return [RecordingRead.model_validate(r, from_attributes=True) for r in rows]


    async def get_detail(self, recording_id: UUID, user_id: UUID) -> RecordingDetailResponse:
        recording = await self._get_owned(recording_id, user_id)
        read = RecordingRead.model_validate(recording, from_attributes=True)
        if not recording.r2_key:
            return RecordingDetailResponse(recording=read)

        try:
            audio_url = await self.storage.signed_url(recording.r2_key, SIGNED_URL_TTL_PLAYBACK)
        except AppException as error:
            logger.warning(f"Playback link for recording {recording_id} omitted: {error.error_detail}")
            return RecordingDetailResponse(recording=read)

        return RecordingDetailResponse(recording=read, audio_url=audio_url)


    async def update_title(self, recording_id: UUID, user_id: UUID, title: str) -> RecordingRead:
        if not title.strip():
            raise AppException(ErrorKey.INVALID_TITLE, status_code=400)

        await self._get_owned(recording_id, user_id)
        updated = await self.repository.update(recording_id, {"title": title})
        return RecordingRead.model_validate(updated, from_attributes=True)


    async def delete(self, recording_id: UUID, user_id: UUID) -> None:
        """Delete the stored audio, then the row. A failed blob delete keeps the row."""
        recording = await self._get_owned(recording_id, user_id)
        if recording.r2_key:
            await self.storage.delete(recording.r2_key)
        await self.repository.delete(recording_id)
        logger.info(f"Deleted recording {recording_id}")


    async def _get_owned(self, recording_id: UUID, user_id: UUID) -> RecordingModel:
        # someone else's recording is reported exactly like a missing one
        recording = await self.repository.get_by_id(recording_id)
        if recording is None or recording.user_id != user_id:
            raise AppException(ErrorKey.RECORDING_NOT_FOUND, status_code=404)
        return recording
