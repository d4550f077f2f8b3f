import asyncio
import time
from typing import Awaitable, Callable, Optional, TypeVar

from quote_relay.errors import DeadlineExceeded, ScopeCancelled

T = TypeVar("T")

class Deadline:
    """
    A time budget for one pipeline stage.

    The clock starts when the scope is created, never from a parent's remaining
    budget. An optional cancellation event lets an outer party (the inbound
    request) abort the stage early without lending it any of its own time.
    """

    def __init__(
        self,
        timeout: float,
        stage: str = "fetch",
        cancelled: Optional[asyncio.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout = timeout
        self.stage = stage
        self._cancelled = cancelled
        self._clock = clock
        self.started_at = clock()
        self.expires_at = self.started_at + timeout

    def remaining(self) -> float:
        return max(self.expires_at - self._clock(), 0.0)

    def cancelled(self) -> bool:
        return self._cancelled is not None and self._cancelled.is_set()

    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    def check(self) -> None:
        """Raise if the scope is already done; used as a guard before non-cancellable work."""
        if self.cancelled():
            raise ScopeCancelled(self.stage)
        if self.expired():
            raise DeadlineExceeded(self.timeout, self.stage)

    async def run(self, aw: Awaitable[T]) -> T:
        """
        Await `aw` within the scope.

        Whichever comes first of the timer and the cancellation event cancels the
        inner task, so the operation itself is aborted rather than abandoned.
        """
        task = asyncio.ensure_future(aw)
        waiters = {task}
        watcher = None
        if self._cancelled is not None:
            watcher = asyncio.ensure_future(self._cancelled.wait())
            waiters.add(watcher)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=self.remaining(), return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if watcher is not None:
                watcher.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        if watcher is not None and watcher in done:
            raise ScopeCancelled(self.stage)
        raise DeadlineExceeded(self.timeout, self.stage)
