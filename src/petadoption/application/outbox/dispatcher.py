"""Application outbox – OutboxDispatcher background loop."""
from __future__ import annotations

import asyncio
import dataclasses
from enum import Enum

from petadoption.kernel.messaging import (
    MAX_RETRY_COUNT,
    EventPublisher,
    EventRegistry,
    OutboxRecord,
    OutboxStore,
)
from petadoption.observability.logging import get_logger

logger = get_logger(__name__)


class DispatcherState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    PUBLISHING = "publishing"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclasses.dataclass
class DispatchReport:
    """Outcome of one polling tick."""

    fetched: int = 0
    dispatched: int = 0
    failed: int = 0
    skipped: int = 0


class OutboxDispatcher:
    """Drains the outbox into the broker on a fixed interval.

    One loop per process.  Each tick fetches a bounded, oldest-first batch
    and handles the records in order: records at the retry ceiling are
    skipped, the rest are published and marked processed, or marked failed
    with the error text.  One record's failure never aborts the batch and a
    failing tick never stops the loop.

    Delivery is at-least-once: a record published just before a crash or
    a second dispatcher instance may be published again.  Every message
    carries the outbox record id as its AMQP ``message_id`` for consumer
    deduplication.

    Usage::

        dispatcher = OutboxDispatcher(outbox, publisher, registry=registry)
        dispatcher.start()
        ...
        await dispatcher.stop()
    """

    def __init__(
        self,
        outbox: OutboxStore,
        publisher: EventPublisher,
        *,
        registry: EventRegistry | None = None,
        interval: float = 5.0,
        batch_size: int = 100,
        max_retries: int = MAX_RETRY_COUNT,
        initial_delay: float = 0.0,
    ) -> None:
        self._outbox = outbox
        self._publisher = publisher
        self._registry = registry
        self._interval = interval
        self._batch_size = batch_size
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        self._state = DispatcherState.IDLE
        self._stopping = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> asyncio.Task[None]:
        """Spawn the background loop on the running event loop."""
        if self.is_running:
            raise RuntimeError("OutboxDispatcher is already running")
        self._stopping.clear()
        self._state = DispatcherState.IDLE
        self._task = asyncio.create_task(self.run(), name="outbox-dispatcher")
        return self._task

    async def stop(self) -> None:
        """Signal cancellation and wait for the loop to exit."""
        self._stopping.set()
        if self._task is not None:
            await self._task
            self._task = None
        self._state = DispatcherState.STOPPED

    async def run(self) -> None:
        """Loop until :meth:`stop` is called."""
        logger.info("outbox.dispatcher_started", interval=self._interval, batch_size=self._batch_size)
        if self._initial_delay > 0:
            await self._sleep(self._initial_delay)
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except Exception as exc:
                logger.error("outbox.tick_failed", error=repr(exc), exc_info=True)
            self._state = DispatcherState.IDLE
            await self._sleep(self._interval)
        self._state = DispatcherState.STOPPED
        logger.info("outbox.dispatcher_stopped")

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
        except TimeoutError:
            pass

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------

    async def run_once(self) -> DispatchReport:
        """Fetch one batch and handle each record in creation order."""
        self._state = DispatcherState.POLLING
        records = await self._outbox.get_pending(self._batch_size)
        report = DispatchReport(fetched=len(records))
        if not records:
            self._state = DispatcherState.IDLE
            return report

        logger.info("outbox.batch_started", count=len(records))
        for record in records:
            if self._stopping.is_set():
                break
            if record.is_exhausted(self._max_retries):
                logger.warning(
                    "outbox.record_skipped",
                    record_id=record.id,
                    event_type=record.event_type,
                    retry_count=record.retry_count,
                )
                report.skipped += 1
                continue
            if await self._dispatch(record):
                report.dispatched += 1
            else:
                report.failed += 1

        self._state = DispatcherState.IDLE
        logger.info(
            "outbox.batch_completed",
            dispatched=report.dispatched,
            failed=report.failed,
            skipped=report.skipped,
        )
        return report

    async def _dispatch(self, record: OutboxRecord) -> bool:
        self._state = DispatcherState.PUBLISHING
        try:
            if self._registry is not None and self._registry.is_registered(record.event_type):
                # Decoding rejects malformed payloads before they reach the broker.
                self._registry.decode(record.event_type, record.event_data)
            await self._publisher.publish_raw(
                record.event_type, record.event_data, message_id=record.id
            )
        except Exception as exc:
            self._state = DispatcherState.RECORDING
            logger.error(
                "outbox.publish_failed",
                record_id=record.id,
                event_type=record.event_type,
                retry_count=record.retry_count,
                error=str(exc),
            )
            await self._outbox.mark_failed(record.id, str(exc))
            return False

        self._state = DispatcherState.RECORDING
        await self._outbox.mark_processed(record.id)
        logger.debug("outbox.record_published", record_id=record.id, event_type=record.event_type)
        return True


__all__ = ["DispatchReport", "DispatcherState", "OutboxDispatcher"]
