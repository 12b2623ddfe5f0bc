from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

from audionotes.core.utils.enums.recording_status_enum import RecordingStatus


class RecordingRead(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    duration: float
    r2_key: Optional[str] = None
    transcript: str
    transcript_body: Optional[str] = None
    summary: str
    status: RecordingStatus
    language: str
    client_company: Optional[str] = None
    client_person: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes = True
    )


class RecordingUploadResponse(BaseModel):
    recording_id: UUID = Field(alias="recordingId")

    model_config = ConfigDict(populate_by_name=True)


class ProcessRecordingRequest(BaseModel):
    recording_id: UUID = Field(alias="recordingId")

    model_config = ConfigDict(populate_by_name=True)


class ProcessRecordingResult(BaseModel):
    recording_id: UUID = Field(alias="recordingId")
    status: RecordingStatus
    transcript: str
    summary: str
    title: str

    model_config = ConfigDict(populate_by_name=True)


class RecordingTitleUpdate(BaseModel):
    title: str = Field(..., strict=True)


class RecordingEnvelope(BaseModel):
    recording: RecordingRead


class RecordingDetailResponse(RecordingEnvelope):
    """``audioUrl`` is left unset when the playback link could not be signed."""
    audio_url: Optional[str] = Field(None, alias="audioUrl")

    model_config = ConfigDict(populate_by_name=True)
