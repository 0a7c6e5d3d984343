"""Testing fakes – in-memory doubles for kernel ports."""
from petadoption.kernel.time import FrozenClock
from petadoption.testing.fakes.outbox import InMemoryOutboxStore
from petadoption.testing.fakes.publisher import FakeEventPublisher, PublishedMessage
from petadoption.testing.fakes.stores import InMemoryAggregateStore, InMemoryPetTypeStore, InMemoryUserStore

__all__ = [
    "FakeEventPublisher",
    "FrozenClock",
    "InMemoryAggregateStore",
    "InMemoryOutboxStore",
    "InMemoryPetTypeStore",
    "InMemoryUserStore",
    "PublishedMessage",
]
