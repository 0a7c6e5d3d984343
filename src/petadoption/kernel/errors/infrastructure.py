"""Infrastructure errors – storage, broker and serialisation failures."""

from __future__ import annotations

from typing import Any

from petadoption.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class StorageError(InfrastructureError):
    """I/O failure against the aggregate or outbox store."""

    default_code = "storage_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Storage operation '{operation}' failed", **kwargs)
        self.operation = operation


class PublishError(InfrastructureError):
    """The broker was unreachable or rejected a message."""

    default_code = "publish_error"

    def __init__(
        self,
        event_type: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Failed to publish '{event_type}'", **kwargs)
        self.event_type = event_type


class TopologyError(InfrastructureError):
    """Broker topology could not be provisioned."""

    default_code = "topology_error"

    def __init__(
        self,
        message: str,
        *,
        attempts: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.attempts = attempts


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class UnknownEventTypeError(SerializationError):
    """No decoder is registered for an event type tag."""

    default_code = "unknown_event_type"

    def __init__(self, event_type: str, **kwargs: Any) -> None:
        super().__init__(
            f"No event registered for type '{event_type}'",
            payload_type=event_type,
            **kwargs,
        )
        self.event_type = event_type


__all__ = [
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "StorageError",
    "TopologyError",
    "UnknownEventTypeError",
]
