import asyncio
import logging
from uuid import UUID

from injector import inject

from audionotes.constants import (
    DEFAULT_RECORDING_TITLE,
    RECORDING_LANGUAGE,
    SIGNED_URL_TTL_PROCESSING,
    TITLE_MAX_LENGTH,
)
from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.core.utils.enums.recording_status_enum import RecordingStatus
from audionotes.core.utils.transcript_utils import (
    TranscriptHeader,
    extract_transcript_header,
    filename_from_key,
    infer_audio_content_type,
)
from audionotes.db.models.recording import RecordingModel
from audionotes.repositories.recordings import RecordingsRepository
from audionotes.schemas.recording import ProcessRecordingResult
from audionotes.services.inference import InferenceClient
from audionotes.services.object_storage import ObjectStorageService
from audionotes.services.processing_guard import ProcessingGuard


logger = logging.getLogger(__name__)


@inject
class ProcessingService:
    """
    Runs the recording pipeline: fetch audio, transcribe, split the header,
    summarize and title in parallel, then persist.
    """

    def __init__(
        self,
        repository: RecordingsRepository,
        storage: ObjectStorageService,
        inference: InferenceClient,
        guard: ProcessingGuard,
    ):
        self.repository = repository
        self.storage = storage
        self.inference = inference
        self.guard = guard
        self.enable_header_extraction = settings.ENABLE_HEADER_EXTRACTION


    async def process(self, recording_id: UUID, user_id: UUID) -> ProcessRecordingResult:
        recording = await self.repository.get_by_id(recording_id)
        if recording is None or recording.user_id != user_id:
            raise AppException(ErrorKey.RECORDING_NOT_FOUND, status_code=404)

        if recording.status == RecordingStatus.COMPLETED.value:
            logger.debug(f"Recording {recording_id} already completed, returning stored result")
            return _to_result(recording)

        return await self.guard.run(recording_id, lambda: self._run_pipeline(recording))


    async def _run_pipeline(self, recording: RecordingModel) -> ProcessRecordingResult:
        recording_id = recording.id
        current_title = recording.title
        key = recording.r2_key

        try:
            if not key:
                raise ValueError(f"Recording {recording_id} has no stored audio")

            audio, content_type = await self.storage.fetch(key, SIGNED_URL_TTL_PROCESSING)
            content_type = content_type or infer_audio_content_type(key)
            logger.info(f"Transcribing recording {recording_id} ({len(audio)} bytes, {content_type})")

            transcript = await self.inference.transcribe(audio, filename_from_key(key), content_type)
            header = self._split_header(transcript)

            summary, title = await asyncio.gather(
                self.inference.summarize(header.body),
                self.inference.title_from(header.body),
            )

            fields = {
                "status": RecordingStatus.COMPLETED.value,
                "transcript": transcript,
                "transcript_body": header.body,
                "summary": summary,
                "language": RECORDING_LANGUAGE,
                "client_company": header.client_company,
                "client_person": header.client_person,
            }
            if not current_title or current_title == DEFAULT_RECORDING_TITLE:
                fields["title"] = title[:TITLE_MAX_LENGTH]

            updated = await self.repository.update(recording_id, fields)
        except Exception as error:
            logger.exception(f"Processing of recording {recording_id} failed: {error}")
            await self._mark_failed(recording_id)
            raise AppException(ErrorKey.INTERNAL_ERROR, status_code=500, error_obj=error)

        logger.info(f"Recording {recording_id} processed")
        return _to_result(updated)


    def _split_header(self, transcript: str) -> TranscriptHeader:
        if not self.enable_header_extraction:
            return TranscriptHeader(None, None, None, transcript)
        return extract_transcript_header(transcript)


    async def _mark_failed(self, recording_id: UUID) -> None:
        try:
            await self.repository.update(recording_id, {"status": RecordingStatus.FAILED.value})
        except Exception as error:
            logger.error(f"Could not mark recording {recording_id} as failed: {error}")


def _to_result(recording: RecordingModel) -> ProcessRecordingResult:
    return ProcessRecordingResult(
        recording_id=recording.id,
        status=recording.status,
        transcript=recording.transcript or "",
        summary=recording.summary or "",
        title=recording.title or "",
    )
