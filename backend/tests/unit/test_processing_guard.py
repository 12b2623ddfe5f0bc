import asyncio
import pytest
from uuid import uuid4

from audionotes.services.processing_guard import ProcessingGuard


@pytest.mark.asyncio
async def test_waiter_receives_the_running_error():
    guard = ProcessingGuard()
    recording_id = uuid4()
    release = asyncio.Event()
    runs = []

    async def failing_pipeline():
        runs.append(1)
        await release.wait()
        raise RuntimeError("transcription failed")

    first = asyncio.create_task(guard.run(recording_id, failing_pipeline))
    await asyncio.sleep(0)
    second = asyncio.create_task(guard.run(recording_id, failing_pipeline))
    await asyncio.sleep(0)
    release.set()

    results = await asyncio.gather(first, second, return_exceptions=True)

    assert len(runs) == 1
    assert all(isinstance(r, RuntimeError) for r in results)
    assert not guard.is_running(recording_id)


@pytest.mark.asyncio
async def test_runs_again_after_completion():
    guard = ProcessingGuard()
    recording_id = uuid4()
    counter = iter(range(10))

    async def pipeline():
        return next(counter)

    assert await guard.run(recording_id, pipeline) == 0
    assert await guard.run(recording_id, pipeline) == 1


@pytest.mark.asyncio
async def test_different_recordings_run_independently():
    guard = ProcessingGuard()
    started = []
    release = asyncio.Event()

    async def pipeline(name):
        started.append(name)
        await release.wait()
        return name

    a = asyncio.create_task(guard.run(uuid4(), lambda: pipeline("a")))
    b = asyncio.create_task(guard.run(uuid4(), lambda: pipeline("b")))
    await asyncio.sleep(0)
    assert sorted(started) == ["a", "b"]

    release.set()
    assert await asyncio.gather(a, b) == ["a", "b"]


@pytest.mark.asyncio
async def test_cancelled_leader_cancels_waiters():
    guard = ProcessingGuard()
    recording_id = uuid4()

    async def pipeline():
        await asyncio.Event().wait()

    leader = asyncio.create_task(guard.run(recording_id, pipeline))
    await asyncio.sleep(0)
    waiter = asyncio.create_task(guard.run(recording_id, pipeline))
    await asyncio.sleep(0)

    leader.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert not guard.is_running(recording_id)
