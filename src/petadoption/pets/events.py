"""Pet domain events."""

from __future__ import annotations

import dataclasses

from petadoption.kernel.ddd import DomainEvent


@dataclasses.dataclass(frozen=True)
class PetReservedEvent(DomainEvent):
    pet_name: str


@dataclasses.dataclass(frozen=True)
class PetAdoptedEvent(DomainEvent):
    pet_name: str


@dataclasses.dataclass(frozen=True)
class PetReservationCancelledEvent(DomainEvent):
    pet_name: str


__all__ = ["PetAdoptedEvent", "PetReservationCancelledEvent", "PetReservedEvent"]
