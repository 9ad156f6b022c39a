import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from flashdeck.core.exceptions.domain import SchedulingError

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Union[Any, Awaitable[Any]]]


class RepeatingTask:
    """
    Calls `callback` every `interval` seconds on the running event loop until cancelled.

    The first call happens one full interval after `start()`. There is no
    jitter and no catch-up: each tick sleeps the interval again.
    """

    def __init__(self, interval: float, callback: TickCallback, name: str = "repeating-task"):
        if interval <= 0:
            raise SchedulingError("Interval must be greater than zero", name, {"interval": interval})
        self.interval = interval
        self.callback = callback
        self.name = name
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """
        Schedule the loop on the running event loop.

        Raises:
            SchedulingError: If the task is already running
        """
        if self.running:
            raise SchedulingError("Task is already running", self.name)
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info(f"Started {self.name} (every {self.interval}s)")

    async def cancel(self) -> None:
        """Stop the loop and wait for it to exit. Safe to call more than once."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info(f"Cancelled {self.name} after {self.ticks} ticks")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"{self.name} tick {self.ticks} failed: {str(e)}", exc_info=e)
