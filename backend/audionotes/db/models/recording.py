import uuid
from typing import Optional

from sqlalchemy import Float, Index, PrimaryKeyConstraint, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from audionotes.constants import DEFAULT_RECORDING_TITLE, RECORDING_LANGUAGE
from audionotes.core.utils.enums.recording_status_enum import RecordingStatus
from audionotes.db.base import Base


class RecordingModel(Base):
    __tablename__ = 'recordings'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='recordings_pkey'),
        Index('ix_recordings_user_id_created_at', 'user_id', 'created_at'),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_RECORDING_TITLE)
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    r2_key: Mapped[Optional[str]] = mapped_column(String(1024))

    transcript: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transcript_body: Mapped[Optional[str]] = mapped_column(Text)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[str] = mapped_column(String(32), nullable=False, default=RecordingStatus.PROCESSING.value)
    language: Mapped[str] = mapped_column(String(16), nullable=False, default=RECORDING_LANGUAGE)

    client_company: Mapped[Optional[str]] = mapped_column(Text)
    client_person: Mapped[Optional[str]] = mapped_column(Text)
