"""Deadline and cancellation shared by a group of network calls.

A ProbeContext is created once per validation call (or model test) and handed
to every probe spawned by that call. Each probe awaits its HTTP request
through ``ProbeContext.run``, so a single deadline or a single ``cancel()``
aborts every in-flight request at once.

Usage:
    ctx = ProbeContext.with_timeout(10)
    response = await ctx.run(client.send(request))
"""

import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from modelprobe.core.exceptions import ModelProbeException

T = TypeVar("T")

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"


class ContextError(ModelProbeException):
    """Base class for context termination errors."""


class ContextCancelledError(ContextError):
    """Raised when the context was cancelled."""

    def __init__(self):
        super().__init__(CANCELED, code="CANCELLED")


class ContextDeadlineExceededError(ContextError):
    """Raised when the context deadline passed."""

    def __init__(self):
        super().__init__(DEADLINE_EXCEEDED, code="TIMEOUT")


class ProbeContext:
    """Cancellable, deadline-bearing execution context.

    Class Invariants:
        - The deadline is absolute (monotonic clock) and never moves
        - Once cancelled a context stays cancelled

    Thread Safety:
        Intended for use from a single event loop. ``cancel()`` must be
        called from that loop.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )
        self._cancelled = asyncio.Event()

    @classmethod
    def background(cls) -> "ProbeContext":
        """Context without deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "ProbeContext":
        """Context expiring ``seconds`` from now."""
        return cls(timeout=seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def err(self) -> Optional[str]:
        """Why the context is done, or None while it is still live."""
        if self.cancelled:
            return CANCELED
        if self.expired:
            return DEADLINE_EXCEEDED
        return None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (None when unbounded)."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel the context and every operation running under it."""
        self._cancelled.set()

    def _raise_done(self) -> None:
        if self.cancelled:
            raise ContextCancelledError()
        raise ContextDeadlineExceededError()

    async def run(self, aw: Awaitable[T]) -> T:
        """Await ``aw`` unless the context ends first.

        When the deadline passes or the context is cancelled before ``aw``
        completes, the underlying task is cancelled and awaited so the
        network call is torn down before the context error is raised. The
        same teardown happens when the calling task is itself cancelled.

        Raises:
            ContextCancelledError: The context was cancelled
            ContextDeadlineExceededError: The deadline passed
        """
        if self.err is not None:
            if asyncio.iscoroutine(aw):
                aw.close()
            self._raise_done()

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            # The caller itself was cancelled: take the work down with it
            await self._stop(task)
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        await self._stop(task)
        self._raise_done()

    @staticmethod
    async def _stop(task: "asyncio.Future[T]") -> None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
