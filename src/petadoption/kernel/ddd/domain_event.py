"""Domain events and their JSON payload mapping."""

from __future__ import annotations

import dataclasses
import typing
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Self
from uuid import uuid4


def _to_json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _is_datetime_hint(hint: Any) -> bool:
    return hint is datetime or datetime in typing.get_args(hint)


@dataclasses.dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for domain events.

    Subclasses are frozen dataclasses adding their own payload fields. The
    base fields are keyword-only so subclasses may declare positional fields.

    Example::

        @dataclasses.dataclass(frozen=True)
        class PetReservedEvent(DomainEvent):
            pet_name: str

        PetReservedEvent("Rex", aggregate_id=str(pet.id))
    """

    aggregate_id: str
    event_id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = dataclasses.field(
        default_factory=lambda: datetime.now(UTC)
    )

    @property
    def event_type(self) -> str:
        """Type tag used for routing and decoding."""
        return type(self).__name__

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible dict of every field."""
        return {
            f.name: _to_json_value(getattr(self, f.name))
            for f in dataclasses.fields(self)
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        """Rebuild an event from :meth:`to_payload` output.

        Unknown keys are ignored; ISO-8601 strings are parsed back into
        ``datetime`` for fields annotated as such.
        """
        hints = typing.get_type_hints(cls)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if f.name not in payload:
                continue
            value = payload[f.name]
            if isinstance(value, str) and _is_datetime_hint(hints.get(f.name)):
                value = datetime.fromisoformat(value)
            kwargs[f.name] = value
        return cls(**kwargs)


__all__ = ["DomainEvent"]
