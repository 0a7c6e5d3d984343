"""Unit tests for the outbox dispatcher loop."""
from __future__ import annotations

import asyncio
import dataclasses
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from petadoption.application.outbox import DispatcherState, OutboxDispatcher
from petadoption.kernel.ddd import DomainEvent
from petadoption.kernel.errors import PublishError, StorageError
from petadoption.kernel.messaging import EventRegistry, OutboxRecord
from petadoption.testing import FakeEventPublisher, InMemoryOutboxStore

T0 = datetime(2024, 1, 1, tzinfo=UTC)


@dataclasses.dataclass(frozen=True)
class PetReservedEvent(DomainEvent):
    pet_name: str


def _registry() -> EventRegistry:
    return EventRegistry().register(PetReservedEvent, "pet.reserved.v1")


def _record(i: int, **kwargs) -> OutboxRecord:  # type: ignore[no-untyped-def]
    event = PetReservedEvent(f"pet-{i}", aggregate_id=f"p-{i}")
    record = OutboxRecord.from_event(event, created_at=T0 + timedelta(seconds=i))
    return dataclasses.replace(record, id=f"r-{i}", **kwargs)


async def _seed(outbox: InMemoryOutboxStore, *records: OutboxRecord) -> None:
    await outbox.add_many(list(records))


# ---------------------------------------------------------------------------
# One tick
# ---------------------------------------------------------------------------


class TestRunOnce:
    def test_publishes_in_creation_order_and_marks_processed(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        dispatcher = OutboxDispatcher(outbox, publisher, registry=_registry())

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, _record(2), _record(1), _record(3))
            return await dispatcher.run_once()

        report = asyncio.run(run())
        assert publisher.message_ids == ["r-1", "r-2", "r-3"]
        assert all(m.routing_key == "pet.reserved.v1" for m in publisher.published)
        assert report.dispatched == 3
        assert all(r.is_processed for r in outbox.all_records())

    def test_one_failure_does_not_abort_batch(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        publisher.fail_message_ids.add("r-2")
        dispatcher = OutboxDispatcher(outbox, publisher)

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, _record(1), _record(2), _record(3))
            return await dispatcher.run_once()

        report = asyncio.run(run())
        assert (report.dispatched, report.failed) == (2, 1)
        failed = outbox.get("r-2")
        assert failed is not None
        assert failed.is_processed is False
        assert failed.retry_count == 1
        assert "broker unavailable" in (failed.last_error or "")
        assert outbox.get("r-1").is_processed  # type: ignore[union-attr]
        assert outbox.get("r-3").is_processed  # type: ignore[union-attr]

    def test_payload_forwarded_byte_for_byte(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        record = _record(1)

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, record)
            await OutboxDispatcher(outbox, publisher, registry=_registry()).run_once()

        asyncio.run(run())
        assert publisher.published[0].body == record.event_data

    def test_malformed_registered_payload_marked_failed(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        bad = _record(1, event_data="{broken")

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, bad)
            return await OutboxDispatcher(outbox, publisher, registry=_registry()).run_once()

        report = asyncio.run(run())
        assert report.failed == 1
        assert publisher.published == []
        assert outbox.get("r-1").retry_count == 1  # type: ignore[union-attr]

    def test_unregistered_type_is_still_forwarded(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        odd = _record(1, event_type="LegacyEvent", event_data='{"x":1}')

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, odd)
            await OutboxDispatcher(outbox, publisher, registry=_registry()).run_once()

        asyncio.run(run())
        assert publisher.published[0].routing_key == ""
        assert outbox.get("r-1").is_processed  # type: ignore[union-attr]

    def test_records_at_ceiling_are_skipped(self) -> None:
        outbox = MagicMock()
        outbox.get_pending = AsyncMock(return_value=[_record(1, retry_count=5), _record(2)])
        outbox.mark_processed = AsyncMock()
        outbox.mark_failed = AsyncMock()
        publisher = FakeEventPublisher()
        report = asyncio.run(OutboxDispatcher(outbox, publisher, max_retries=5).run_once())
        assert report.skipped == 1
        assert publisher.message_ids == ["r-2"]
        outbox.mark_processed.assert_awaited_once_with("r-2")

    def test_retry_ceiling_reached_after_repeated_failures(self) -> None:
        outbox = InMemoryOutboxStore(max_retries=3)
        publisher = FakeEventPublisher()
        publisher.fail_types.add("PetReservedEvent")
        dispatcher = OutboxDispatcher(outbox, publisher, max_retries=3)

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, _record(1))
            for _ in range(5):
                await dispatcher.run_once()
            return await outbox.get_pending()

        assert asyncio.run(run()) == []
        assert outbox.get("r-1").retry_count == 3  # type: ignore[union-attr]

    def test_batch_size_bounds_fetch(self) -> None:
        outbox = MagicMock()
        outbox.get_pending = AsyncMock(return_value=[])
        asyncio.run(OutboxDispatcher(outbox, FakeEventPublisher(), batch_size=7).run_once())
        outbox.get_pending.assert_awaited_once_with(7)

    def test_empty_batch(self) -> None:
        outbox = InMemoryOutboxStore()
        dispatcher = OutboxDispatcher(outbox, FakeEventPublisher())
        report = asyncio.run(dispatcher.run_once())
        assert report.fetched == 0
        assert dispatcher.state is DispatcherState.IDLE

    def test_stop_mid_batch_leaves_remaining_records_untouched(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher(_registry())
        dispatcher = OutboxDispatcher(outbox, publisher)
        original_publish_raw = publisher.publish_raw

        async def publish_then_stop(*args, **kwargs):  # type: ignore[no-untyped-def]
            await original_publish_raw(*args, **kwargs)
            await dispatcher.stop()

        publisher.publish_raw = publish_then_stop  # type: ignore[method-assign]

        async def run():  # type: ignore[no-untyped-def]
            await _seed(outbox, _record(1), _record(2), _record(3))
            return await dispatcher.run_once()

        report = asyncio.run(run())
        assert (report.fetched, report.dispatched) == (3, 1)
        assert publisher.message_ids == ["r-1"]
        assert outbox.get("r-1").is_processed  # type: ignore[union-attr]
        for record_id in ("r-2", "r-3"):
            record = outbox.get(record_id)
            assert record is not None
            assert record.is_processed is False
            assert record.retry_count == 0


# ---------------------------------------------------------------------------
# Loop lifecycle
# ---------------------------------------------------------------------------


class TestLoop:
    def test_start_and_stop(self) -> None:
        outbox = InMemoryOutboxStore()
        publisher = FakeEventPublisher()
        dispatcher = OutboxDispatcher(outbox, publisher, interval=0.01)

        async def run() -> None:
            await _seed(outbox, _record(1))
            dispatcher.start()
            assert dispatcher.is_running
            for _ in range(100):
                if publisher.published:
                    break
                await asyncio.sleep(0.01)
            await dispatcher.stop()

        asyncio.run(run())
        assert publisher.message_ids == ["r-1"]
        assert dispatcher.state is DispatcherState.STOPPED
        assert not dispatcher.is_running

    def test_tick_failure_does_not_stop_loop(self) -> None:
        outbox = MagicMock()
        outbox.get_pending = AsyncMock(side_effect=[StorageError("outbox.get_pending"), [], [], [], []])
        dispatcher = OutboxDispatcher(outbox, FakeEventPublisher(), interval=0.001)

        async def run() -> None:
            dispatcher.start()
            for _ in range(200):
                if outbox.get_pending.await_count >= 3:
                    break
                await asyncio.sleep(0.005)
            await dispatcher.stop()

        asyncio.run(run())
        assert outbox.get_pending.await_count >= 3

    def test_stop_interrupts_long_sleep(self) -> None:
        outbox = InMemoryOutboxStore()
        dispatcher = OutboxDispatcher(outbox, FakeEventPublisher(), interval=3600)

        async def run() -> None:
            dispatcher.start()
            await asyncio.sleep(0.01)
            await asyncio.wait_for(dispatcher.stop(), timeout=1)

        asyncio.run(run())
        assert dispatcher.state is DispatcherState.STOPPED

    def test_initial_delay_postpones_first_tick(self) -> None:
        outbox = MagicMock()
        outbox.get_pending = AsyncMock(return_value=[])
        dispatcher = OutboxDispatcher(outbox, FakeEventPublisher(), interval=0.01, initial_delay=3600)

        async def run() -> None:
            dispatcher.start()
            await asyncio.sleep(0.05)
            await dispatcher.stop()

        asyncio.run(run())
        outbox.get_pending.assert_not_awaited()

    def test_double_start_rejected(self) -> None:
        dispatcher = OutboxDispatcher(InMemoryOutboxStore(), FakeEventPublisher(), interval=3600)

        async def run() -> None:
            dispatcher.start()
            try:
                dispatcher.start()
            finally:
                await dispatcher.stop()

        with pytest.raises(RuntimeError, match="already running"):
            asyncio.run(run())

    def test_publisher_error_is_recorded_not_raised(self) -> None:
        outbox = MagicMock()
        outbox.get_pending = AsyncMock(return_value=[_record(1)])
        outbox.mark_failed = AsyncMock()
        publisher = MagicMock()
        publisher.publish_raw = AsyncMock(side_effect=PublishError("PetReservedEvent", "nope"))
        report = asyncio.run(OutboxDispatcher(outbox, publisher).run_once())
        assert report.failed == 1
        outbox.mark_failed.assert_awaited_once()
        assert outbox.mark_failed.await_args.args[0] == "r-1"
