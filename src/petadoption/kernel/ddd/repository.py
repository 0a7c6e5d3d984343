"""AggregateStore port – versioned persistence of aggregates plus their events."""

from __future__ import annotations

import abc
from typing import Generic, TypeVar

from petadoption.kernel.ddd.aggregate import AggregateRoot
from petadoption.kernel.types.ids import EntityId

TAggregate = TypeVar("TAggregate", bound=AggregateRoot)


class AggregateStore(abc.ABC, Generic[TAggregate]):
    """Port: persists an aggregate and its pending events atomically.

    :meth:`save` contract:

    - new aggregate: single insert, no version check;
    - existing aggregate: compare-and-swap on ``(id, version)``, raising
      :class:`~petadoption.kernel.errors.ConcurrencyConflictError` when the
      stored version moved on;
    - every pending event becomes an outbox record in the same atomic unit;
    - the in-memory version is bumped and the pending events cleared only
      after the unit commits.
    """

    @abc.abstractmethod
    async def get(self, id: EntityId) -> TAggregate | None: ...  # noqa: A002

    @abc.abstractmethod
    async def get_or_raise(self, id: EntityId) -> TAggregate: ...  # noqa: A002

    @abc.abstractmethod
    async def save(self, aggregate: TAggregate) -> None: ...


__all__ = ["AggregateStore", "TAggregate"]
