"""Testing support – in-memory fakes for the stores and the publisher.

Use them to exercise command handlers and the dispatcher without MongoDB
or RabbitMQ::

    outbox = InMemoryOutboxStore()
    store = InMemoryAggregateStore[Pet](outbox)
"""
from petadoption.testing.fakes import (
    FakeEventPublisher,
    FrozenClock,
    InMemoryAggregateStore,
    InMemoryOutboxStore,
    InMemoryPetTypeStore,
    InMemoryUserStore,
    PublishedMessage,
)

__all__ = [
    "FakeEventPublisher",
    "FrozenClock",
    "InMemoryAggregateStore",
    "InMemoryOutboxStore",
    "InMemoryPetTypeStore",
    "InMemoryUserStore",
    "PublishedMessage",
]
