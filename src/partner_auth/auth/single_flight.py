from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

from partner_auth.utils import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Coalesce concurrent callers onto one in-flight operation.

    The first caller starts ``operation()`` as a task; everyone arriving while
    it runs awaits that same task and observes the same result or exception.
    Results are not retained: once the task settles the slot is empty again.
    """

    def __init__(self, name: str = "operation") -> None:
        self._name = name
        self._task: asyncio.Task[T] | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        task = self._task
        if task is None or task.done():
            # Must be published before the first await so a burst of callers
            # scheduled in the same loop iteration all join this task.
            task = asyncio.ensure_future(self._execute(operation))
            task.add_done_callback(self._release)
            self._task = task
            logger.debug("Started single-flight operation", name=self._name)
        else:
            logger.debug("Joined in-flight operation", name=self._name)
        return await asyncio.shield(task)

    async def _execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await operation()
        finally:
            self._task = None

    def _release(self, task: asyncio.Task[T]) -> None:
        # Waiters may all have been cancelled; mark the outcome as retrieved.
        if not task.cancelled():
            task.exception()


__all__ = ["SingleFlight"]
