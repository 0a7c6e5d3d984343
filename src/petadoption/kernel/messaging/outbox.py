"""Kernel messaging – transactional outbox record and store port."""
from __future__ import annotations

import abc
import dataclasses
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from petadoption.kernel.ddd.domain_event import DomainEvent
from petadoption.kernel.messaging.registry import encode_payload

MAX_RETRY_COUNT = 5


@dataclasses.dataclass
class OutboxRecord:
    """Pending domain event stored in the same transaction as its aggregate.

    A record is either unprocessed (``is_processed=False``,
    ``processed_at=None``) or terminally processed.  It is never deleted;
    once ``retry_count`` reaches the ceiling it is left for inspection.
    """

    event_type: str
    event_data: str
    id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    created_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))
    processed_at: datetime | None = None
    is_processed: bool = False
    retry_count: int = 0
    last_error: str | None = None

    @classmethod
    def from_event(cls, event: DomainEvent, *, created_at: datetime | None = None) -> "OutboxRecord":
        """Serialise *event* into a new unprocessed record."""
        return cls(
            event_type=event.event_type,
            event_data=encode_payload(event.to_payload()),
            created_at=created_at or datetime.now(UTC),
        )

    def is_exhausted(self, max_retries: int = MAX_RETRY_COUNT) -> bool:
        return self.retry_count >= max_retries

    def is_dispatchable(self, max_retries: int = MAX_RETRY_COUNT) -> bool:
        return not self.is_processed and not self.is_exhausted(max_retries)


class OutboxStore(abc.ABC):
    """Port: durable queue of outbox records.

    ``session`` is the transport-specific transaction handle of the unit of
    work the insert must join (``None`` outside a transaction).
    """

    @abc.abstractmethod
    async def add(self, record: OutboxRecord, *, session: Any = None) -> None: ...

    @abc.abstractmethod
    async def add_many(self, records: list[OutboxRecord], *, session: Any = None) -> None: ...

    @abc.abstractmethod
    async def get_pending(self, batch_size: int = 100) -> list[OutboxRecord]:
        """Unprocessed records below the retry ceiling, oldest first."""

    @abc.abstractmethod
    async def mark_processed(self, record_id: str) -> None:
        """Set the terminal processed state. Idempotent."""

    @abc.abstractmethod
    async def mark_failed(self, record_id: str, error: str) -> None:
        """Increment the retry counter and remember *error*."""


__all__ = ["MAX_RETRY_COUNT", "OutboxRecord", "OutboxStore"]
