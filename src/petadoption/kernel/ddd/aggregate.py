"""AggregateRoot – owns pending domain events and the concurrency version."""

from __future__ import annotations

from petadoption.kernel.ddd.domain_event import DomainEvent
from petadoption.kernel.ddd.entity import Entity
from petadoption.kernel.types.ids import EntityId


class AggregateRoot(Entity):
    """Aggregate root – consistency boundary with optimistic versioning.

    State-changing methods call :meth:`_record_event`.  The pending list is
    transient and is cleared by the store only after the events have been
    committed to the outbox together with the aggregate state.

    ``version`` is the version last stored; it is never changed by the
    aggregate itself.
    """

    _version: int
    _events: list[DomainEvent]
    _is_new: bool

    def __init__(self, id: EntityId, *, version: int = 0, is_new: bool = True) -> None:  # noqa: A002
        super().__init__(id)
        self._version = version
        self._is_new = is_new
        self._events = []

    def _record_event(self, event: DomainEvent) -> None:
        """Append a domain event to the pending list."""
        self._events.append(event)

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    @property
    def version(self) -> int:
        return self._version

    @property
    def is_new(self) -> bool:
        """``True`` until the aggregate has been stored or was loaded from storage."""
        return self._is_new

    def _mark_persisted(self, version: int) -> None:
        """Store hook: reflect a committed write in memory."""
        self._version = version
        self._is_new = False
        self._events.clear()


__all__ = ["AggregateRoot"]
