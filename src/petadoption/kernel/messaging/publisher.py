"""Kernel messaging – EventPublisher port."""
from __future__ import annotations

import abc
from collections.abc import Iterable

from petadoption.kernel.ddd.domain_event import DomainEvent


class EventPublisher(abc.ABC):
    """Port: ships domain events to the broker.

    ``publish_many`` is sequential and not atomic: a failure part-way leaves
    the earlier events published.  Callers track delivery per record.
    """

    @abc.abstractmethod
    async def publish(self, event: DomainEvent, *, message_id: str | None = None) -> None: ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    @abc.abstractmethod
    async def publish_raw(
        self,
        event_type: str,
        event_data: str,
        *,
        message_id: str | None = None,
    ) -> None:
        """Forward an already serialised payload unchanged."""

    async def close(self) -> None:
        """Release transport resources."""


__all__ = ["EventPublisher"]
