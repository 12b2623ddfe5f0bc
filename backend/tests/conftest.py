import os
import sys
from pathlib import Path
from uuid import uuid4

# Settings are read at import time, so the environment has to be in place
# before anything from audionotes is imported.
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_USER", "audionotes")
os.environ.setdefault("DB_PASS", "audionotes")
os.environ.setdefault("DB_NAME", "audionotes_test")
os.environ.setdefault("R2_ACCOUNT_ID", "test-account")
os.environ.setdefault("R2_ACCESS_KEY_ID", "test-access-key")
os.environ.setdefault("R2_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("R2_BUCKET_NAME", "recordings-test")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("AUTH_PROVIDER_URL", "https://auth.example.test")
os.environ.setdefault("AUTH_JWT_PUBLIC_KEY", "test-jwt-secret")
os.environ.setdefault("AUTH_JWT_ALGORITHM", "HS256")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add the project root directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from audionotes.core.config.settings import settings
from audionotes.db.base import Base


@pytest.fixture(scope="session")
def anyio_backend():
    return 'asyncio'


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def make_token():
    """Build access tokens the way the identity provider issues them."""
    def _make(sub, expires_in=timedelta(hours=1), **claims):
        payload = {
            "sub": str(sub),
            "aud": settings.AUTH_JWT_AUDIENCE,
            "iss": settings.AUTH_JWT_ISSUER,
            "exp": datetime.now(timezone.utc) + expires_in,
            "email": "user@example.test",
            **claims,
        }
        return jwt.encode(payload, settings.AUTH_JWT_PUBLIC_KEY, algorithm=settings.AUTH_JWT_ALGORITHM)

    return _make


@pytest_asyncio.fixture
async def async_db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
    await engine.dispose()


@pytest.fixture
def make_recording(user_id):
    """Detached RecordingModel with every column populated."""
    from audionotes.db.models.recording import RecordingModel

    def _make(**overrides):
        recording_id = overrides.pop("id", None) or uuid4()
        owner = overrides.pop("user_id", user_id)
        now = datetime.now(timezone.utc)
        values = dict(
            id=recording_id,
            user_id=owner,
            title="Posnetek",
            duration=0,
            r2_key=f"recordings/{owner}/{recording_id}.webm",
            transcript="",
            transcript_body=None,
            summary="",
            status="processing",
            language="sl",
            client_company=None,
            client_person=None,
            created_at=now,
            updated_at=now,
        )
        values.update(overrides)
        return RecordingModel(**values)

    return _make
