"""Synthetic progress reporting around a resolution attempt.

Mirror resolution is a chain of opaque network calls with no useful progress
signal, so the caller gets a timer-driven estimate instead.  ``ProgressTicker``
runs that timer as an asyncio task alongside the awaited pipeline and always
tears it down on exit.

State machine::

    running ──(body returns)──▶ completed   (report 100)
       └────(body raises)───▶ failed      (report 100, exception propagates)
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from types import TracebackType

import structlog

from mirrorarr.domain.ports.embed import ProgressSink

log = structlog.get_logger(__name__)

PROGRESS_DONE = 100


class ProgressTicker:
    """Async context manager reporting increasing progress until exit.

    While running, every *interval* seconds the counter grows by *step* up to
    *ceiling* and each new value is reported.  Leaving the block cancels the
    timer task and reports ``100`` exactly once, whether the block succeeded
    or raised.
    """

    def __init__(
        self,
        sink: ProgressSink | None,
        *,
        initial: int = 10,
        step: int = 5,
        ceiling: int = 90,
        interval: float = 0.1,
    ) -> None:
        self._sink = sink
        self._value = initial
        self._step = step
        self._ceiling = ceiling
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self._finished = False

    @property
    def value(self) -> int:
        return self._value

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> ProgressTicker:
        self._task = asyncio.create_task(self._tick(), name="progress-ticker")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def stop(self) -> None:
        """Cancel the timer and emit the final ``100`` (idempotent)."""
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        if not self._finished:
            self._finished = True
            self._value = PROGRESS_DONE
            self._report(PROGRESS_DONE)

    async def _tick(self) -> None:
        while self._value < self._ceiling:
            await asyncio.sleep(self._interval)
            self._value = min(self._value + self._step, self._ceiling)
            self._report(self._value)

    def _report(self, value: int) -> None:
        if self._sink is None:
            return
        try:
            self._sink(value)
        except Exception:  # noqa: BLE001
            log.warning("progress_sink_failed", value=value, exc_info=True)
