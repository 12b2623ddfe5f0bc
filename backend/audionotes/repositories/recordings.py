import logging
from typing import Any, List, Mapping, Optional
from uuid import UUID
from injector import inject
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from audionotes.auth.utils import get_current_user_id
from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.db.models.recording import RecordingModel
from audionotes.repositories.db_repository import DbRepository


logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


@inject
class RecordingsRepository(DbRepository[RecordingModel]):
    """Typed access to the recordings table."""

    def __init__(self, db: AsyncSession):
        super().__init__(RecordingModel, db)


    async def list_for_user(self, user_id: UUID) -> List[RecordingModel]:
        stmt = (
            select(RecordingModel)
            .where(RecordingModel.user_id == user_id)
            .order_by(RecordingModel.created_at.desc(), RecordingModel.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


    async def list_for_current_user(self) -> List[RecordingModel]:
        user_id = get_current_user_id()
        if user_id is None:
            raise AppException(ErrorKey.NOT_AUTHENTICATED, status_code=401)
        return await self.list_for_user(user_id)


    async def create(self, fields: Mapping[str, Any]) -> RecordingModel:
        """Insert a recording. ``user_id`` defaults to the authenticated user."""
        values = dict(fields)
        if values.get("user_id") is None:
            user_id = get_current_user_id()
            if user_id is None:
                raise AppException(ErrorKey.NOT_AUTHENTICATED, status_code=401)
            values["user_id"] = user_id

        recording = RecordingModel(**values)
        return await super().create(recording)


    async def update(self, recording_id: UUID, fields: Mapping[str, Any]) -> RecordingModel:
        """Apply a partial update. Unknown ids raise a 404 AppException."""
        recording = await self.get_by_id(recording_id)
        if recording is None:
            raise AppException(ErrorKey.RECORDING_NOT_FOUND, status_code=404)

        for name, value in fields.items():
            if name not in RecordingModel.__table__.columns:
                raise ValueError(f"Unknown recording field: {name}")
            if name in _IMMUTABLE_FIELDS:
                logger.warning(f"Ignoring update of immutable field '{name}' on recording {recording_id}")
                continue
            setattr(recording, name, value)

        return await super().update(recording)


    async def delete(self, recording_id: UUID) -> None:
        recording: Optional[RecordingModel] = await self.get_by_id(recording_id)
        if recording is None:
            return
        await super().delete(recording)
