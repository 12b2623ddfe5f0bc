import logging
from typing import Generic, Optional, Type, TypeVar
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from audionotes.db.base import Base


logger = logging.getLogger(__name__)
OrmModelT = TypeVar("OrmModelT", bound=Base)


class DbRepository(Generic[OrmModelT]):
    """
    Generic async repository for one ORM model.
    Every write commits on its own; a failed write rolls the session back
    before the error propagates.
    """

    def __init__(self, model: Type[OrmModelT], db: AsyncSession):
        self.model = model
        self.db = db
        logger.debug("Initialised DbRepository for %s", model.__name__)


    async def get_by_id(self, obj_id: UUID) -> Optional[OrmModelT]:
        stmt = select(self.model).where(self.model.id == obj_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()


    # ---------- WRITE ----------
    async def create(self, obj: OrmModelT) -> OrmModelT:
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj


    async def update(self, obj: OrmModelT) -> OrmModelT:
        """
        Accepts a *managed* ORM object whose attributes have already been
        mutated by the caller.  Flush/commit & refresh are done here.
        """
        await self._commit()
        await self.db.refresh(obj)
        return obj


    async def delete(self, obj: OrmModelT) -> None:
        await self.db.delete(obj)
        await self._commit()


    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
