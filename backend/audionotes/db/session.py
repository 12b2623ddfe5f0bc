import logging
from typing import Optional
from sqlalchemy.ext.asyncio import (
    async_sessionmaker,
    create_async_engine,
    AsyncEngine,
)
from audionotes.core.config.settings import settings
from audionotes.db.base import Base


from audionotes.db import models  # noqa: F401

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the process-wide async engine and session factory."""

    def __init__(self, database_url: Optional[str] = None):
        self._database_url = database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None


    async def initialize(self):
        """Create the engine and, when CREATE_DB is set, the schema."""
        engine = self.get_engine()
        if settings.CREATE_DB:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema created from metadata")


    def get_engine(self) -> AsyncEngine:
        if self._engine is None:
            url = self._database_url or settings.DATABASE_URL
            logger.info("Creating pooled database engine")
            self._engine = create_async_engine(
                    url,
                    echo=False,
                    pool_size=settings.DB_POOL_SIZE,
                    max_overflow=settings.DB_MAX_OVERFLOW,
                    pool_timeout=settings.DB_POOL_TIMEOUT,
                    pool_recycle=settings.DB_POOL_RECYCLE,
                    pool_pre_ping=True,
                    )
        return self._engine


    def get_session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.get_engine(),
                expire_on_commit=False,
            )
        return self._session_factory


    async def close(self):
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


session_manager = SessionManager()
