import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi_injector import Injected
from starlette.datastructures import UploadFile

from audionotes.auth.dependencies import auth
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.schemas.auth import AuthenticatedUser
from audionotes.schemas.recording import (
    ProcessRecordingRequest,
    ProcessRecordingResult,
    RecordingDetailResponse,
    RecordingEnvelope,
    RecordingRead,
    RecordingTitleUpdate,
    RecordingUploadResponse,
)
from audionotes.services.processing import ProcessingService
from audionotes.services.recordings import RecordingService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=RecordingUploadResponse)
async def upload_recording(
    request: Request,
    user: AuthenticatedUser = Depends(auth),
    service: RecordingService = Injected(RecordingService),
):
    """
    Upload a recorded audio file (multipart field ``audio``).
    Creates the recording in ``processing`` state and returns its id.
    """
    try:
        form = await request.form()
    except Exception as error:
        raise AppException(ErrorKey.FORMDATA_PARSE_FAILED, status_code=400,
                           error_detail=str(error), error_obj=error)

    audio = form.get("audio")
    if not isinstance(audio, UploadFile):
        raise AppException(ErrorKey.MISSING_AUDIO_FIELD, status_code=400)

    recording_id = await service.upload(audio, user.id)
    return RecordingUploadResponse(recording_id=recording_id)


@router.post("/process", response_model=ProcessRecordingResult)
async def process_recording(
    dto: ProcessRecordingRequest,
    user: AuthenticatedUser = Depends(auth),
    service: ProcessingService = Injected(ProcessingService),
):
    return await service.process(dto.recording_id, user.id)


@router.get("/recordings", response_model=List[RecordingRead])
async def list_recordings(
    user: AuthenticatedUser = Depends(auth),
    service: RecordingService = Injected(RecordingService),
):
    """The caller's recordings, newest first."""
    return await service.list_for_user(user.id)


@router.get(
    "/recordings/{recording_id}",
    response_model=RecordingDetailResponse,
    response_model_exclude_unset=True,
)
async def get_recording(
    recording_id: UUID,
    user: AuthenticatedUser = Depends(auth),
    service: RecordingService = Injected(RecordingService),
):
    return await service.get_detail(recording_id, user.id)


@router.patch("/recordings/{recording_id}", response_model=RecordingEnvelope)
async def update_recording_title(
    recording_id: UUID,
    dto: RecordingTitleUpdate,
    user: AuthenticatedUser = Depends(auth),
    service: RecordingService = Injected(RecordingService),
):
    recording = await service.update_title(recording_id, user.id, dto.title)
    return RecordingEnvelope(recording=recording)


@router.delete("/recordings/{recording_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recording(
    recording_id: UUID,
    user: AuthenticatedUser = Depends(auth),
    service: RecordingService = Injected(RecordingService),
):
    await service.delete(recording_id, user.id)
