import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from uuid import uuid4
from sqlalchemy import Text

from audionotes.core.exceptions.error_messages import ErrorKey
from audionotes.core.exceptions.exception_classes import AppException
from audionotes.core.utils.transcript_utils import extract_transcript_header
from audionotes.db.models.recording import RecordingModel
from audionotes.repositories.recordings import RecordingsRepository


def _fields(user_id, **overrides):
    values = {
        "user_id": user_id,
        "title": "Posnetek",
        "r2_key": f"recordings/{user_id}/{uuid4()}.webm",
        "status": "processing",
    }
    values.update(overrides)
    return values


@pytest.mark.asyncio
async def test_create_applies_column_defaults(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)

    recording = await repo.create(_fields(user_id))

    assert recording.id is not None
    assert recording.duration == 0
    assert recording.transcript == ""
    assert recording.summary == ""
    assert recording.language == "sl"
    assert recording.client_company is None
    assert recording.created_at is not None


@pytest.mark.asyncio
async def test_create_defaults_user_to_authenticated_caller(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)

    with patch("audionotes.repositories.recordings.get_current_user_id", return_value=user_id):
        recording = await repo.create({"title": "Posnetek", "r2_key": "k"})

    assert recording.user_id == user_id


@pytest.mark.asyncio
async def test_create_without_any_user_is_rejected(async_db_session):
    repo = RecordingsRepository(async_db_session)

    with pytest.raises(AppException) as exc_info:
        await repo.create({"title": "Posnetek"})

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_list_is_newest_first_and_scoped_to_user(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    await repo.create(_fields(user_id, title="oldest", created_at=base))
    await repo.create(_fields(user_id, title="newest", created_at=base + timedelta(hours=2)))
    await repo.create(_fields(user_id, title="middle", created_at=base + timedelta(hours=1)))
    await repo.create(_fields(uuid4(), title="someone else"))

    recordings = await repo.list_for_user(user_id)

    assert [r.title for r in recordings] == ["newest", "middle", "oldest"]


@pytest.mark.asyncio
async def test_list_for_current_user(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)
    await repo.create(_fields(user_id))

    with patch("audionotes.repositories.recordings.get_current_user_id", return_value=user_id):
        recordings = await repo.list_for_current_user()

    assert len(recordings) == 1


@pytest.mark.asyncio
async def test_list_for_current_user_requires_authentication(async_db_session):
    repo = RecordingsRepository(async_db_session)

    with pytest.raises(AppException) as exc_info:
        await repo.list_for_current_user()

    assert exc_info.value.error_key == ErrorKey.NOT_AUTHENTICATED


@pytest.mark.asyncio
async def test_update_is_partial(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)
    recording = await repo.create(_fields(user_id, summary="old"))

    updated = await repo.update(recording.id, {"status": "completed", "transcript": "text"})

    assert updated.status == "completed"
    assert updated.transcript == "text"
    assert updated.summary == "old"
    assert updated.title == "Posnetek"


@pytest.mark.asyncio
async def test_update_ignores_owner_change(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)
    recording = await repo.create(_fields(user_id))

    updated = await repo.update(recording.id, {"user_id": uuid4(), "title": "Novo"})

    assert updated.user_id == user_id
    assert updated.title == "Novo"


@pytest.mark.parametrize("column", ["title", "transcript", "transcript_body", "summary", "client_company", "client_person"])
def test_free_text_columns_are_unbounded(column):
    column_type = RecordingModel.__table__.c[column].type

    assert isinstance(column_type, Text)
    assert column_type.length is None


@pytest.mark.asyncio
async def test_update_keeps_long_header_fields_in_full(async_db_session, user_id):
    transcript = "Pozdravljeni, danes bomo govorili o proračunu. " + "Nadaljujemo z razpravo o odhodkih. " * 20
    header = extract_transcript_header(transcript)
    repo = RecordingsRepository(async_db_session)
    recording = await repo.create(_fields(user_id))

    await repo.update(
        recording.id,
        {
            "transcript": transcript,
            "transcript_body": header.body,
            "client_company": header.client_company,
            "client_person": header.client_person,
            "title": "Letni pregled " * 30,
        },
    )
    async_db_session.expunge_all()
    stored = await repo.get_by_id(recording.id)

    assert len(header.client_person) > 255
    assert stored.client_company == "Pozdravljeni"
    assert stored.client_person == header.client_person
    assert stored.title == "Letni pregled " * 30


@pytest.mark.asyncio
async def test_update_unknown_id_is_not_found(async_db_session):
    repo = RecordingsRepository(async_db_session)

    with pytest.raises(AppException) as exc_info:
        await repo.update(uuid4(), {"title": "x"})

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_key == ErrorKey.RECORDING_NOT_FOUND


@pytest.mark.asyncio
async def test_delete(async_db_session, user_id):
    repo = RecordingsRepository(async_db_session)
    recording = await repo.create(_fields(user_id))

    await repo.delete(recording.id)

    assert await repo.get_by_id(recording.id) is None
