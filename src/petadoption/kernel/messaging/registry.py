"""Kernel messaging – explicit event type registry.

Maps an event type tag to its event class (used as the typed decoder) and to
the broker routing key.  Populated once at startup by each service.
"""
from __future__ import annotations

import json
from typing import Any, Callable

from petadoption.kernel.ddd.domain_event import DomainEvent
from petadoption.kernel.errors import SerializationError, UnknownEventTypeError

Decoder = Callable[[dict[str, Any]], DomainEvent]


def encode_payload(payload: dict[str, Any]) -> str:
    """Canonical JSON: sorted keys, compact separators, UTF-8 kept as-is."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


class EventRegistry:
    """Event type tag → (decoder, routing key)."""

    def __init__(self) -> None:
        self._decoders: dict[str, Decoder] = {}
        self._routing_keys: dict[str, str] = {}

    def register(
        self,
        event_cls: type[DomainEvent],
        routing_key: str,
        *,
        decoder: Decoder | None = None,
    ) -> "EventRegistry":
        """Register *event_cls* under its class name (fluent API)."""
        tag = event_cls.__name__
        self._decoders[tag] = decoder or event_cls.from_payload
        self._routing_keys[tag] = routing_key
        return self

    def is_registered(self, event_type: str) -> bool:
        return event_type in self._decoders

    def tags(self) -> list[str]:
        return sorted(self._decoders)

    def routing_key_for(self, event_type: str) -> str:
        """Routing key for *event_type*; ``""`` when the tag is unknown."""
        return self._routing_keys.get(event_type, "")

    def encode(self, event: DomainEvent) -> str:
        return encode_payload(event.to_payload())

    def decode(self, event_type: str, data: str | bytes) -> DomainEvent:
        decoder = self._decoders.get(event_type)
        if decoder is None:
            raise UnknownEventTypeError(event_type)
        try:
            payload = json.loads(data)
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Payload of '{event_type}' is not valid JSON", payload_type=event_type, cause=exc
            ) from exc
        if not isinstance(payload, dict):
            raise SerializationError(
                f"Payload of '{event_type}' must be a JSON object", payload_type=event_type
            )
        try:
            return decoder(payload)
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Payload of '{event_type}' does not match the event", payload_type=event_type, cause=exc
            ) from exc


__all__ = ["Decoder", "EventRegistry", "encode_payload"]
