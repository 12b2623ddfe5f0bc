import asyncio
import logging
from typing import Awaitable, Callable, Dict, TypeVar
from uuid import UUID


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProcessingGuard:
    """
    Single-flight registry for recording pipelines.

    While a pipeline for a recording is running, further calls for the same
    recording wait for that run and receive its result or its error instead
    of starting another one. State is per process.
    """

    def __init__(self):
        self._in_flight: Dict[UUID, asyncio.Future] = {}

    def is_running(self, recording_id: UUID) -> bool:
        return recording_id in self._in_flight

    async def run(self, recording_id: UUID, pipeline: Callable[[], Awaitable[T]]) -> T:
        running = self._in_flight.get(recording_id)
        if running is not None:
            logger.info(f"Recording {recording_id} is already processing, waiting for that run")
            return await asyncio.shield(running)

        future = asyncio.get_running_loop().create_future()
        self._in_flight[recording_id] = future
        try:
            result = await pipeline()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as error:
            future.set_exception(error)
            # the error is re-raised here, waiters are optional
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._in_flight.pop(recording_id, None)
