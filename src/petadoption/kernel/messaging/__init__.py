"""Kernel messaging – outbox, publisher, registry and topology (ports only)."""
from petadoption.kernel.messaging.outbox import MAX_RETRY_COUNT, OutboxRecord, OutboxStore
from petadoption.kernel.messaging.publisher import EventPublisher
from petadoption.kernel.messaging.registry import Decoder, EventRegistry, encode_payload
from petadoption.kernel.messaging.topology import (
    BindingSpec,
    ExchangeSpec,
    QueueSpec,
    TopologyBuilder,
    TopologySpec,
)

__all__ = [
    "MAX_RETRY_COUNT",
    "BindingSpec",
    "Decoder",
    "EventPublisher",
    "EventRegistry",
    "ExchangeSpec",
    "OutboxRecord",
    "OutboxStore",
    "QueueSpec",
    "TopologyBuilder",
    "TopologySpec",
    "encode_payload",
]
