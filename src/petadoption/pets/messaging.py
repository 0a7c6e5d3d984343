"""Pet service broker addressing: routing table and topology."""

from __future__ import annotations

from petadoption.kernel.messaging import EventRegistry, TopologySpec
from petadoption.pets.events import PetAdoptedEvent, PetReservationCancelledEvent, PetReservedEvent

PET_EVENTS_EXCHANGE = "pet.events"
PET_DEAD_LETTER_EXCHANGE = "pet.deadletter"


class RoutingKeys:
    PET_RESERVED = "pet.reserved.v1"
    PET_ADOPTED = "pet.adopted.v1"
    RESERVATION_CANCELLED = "pet.reservation.cancelled.v1"


class Queues:
    PET_RESERVED_NOTIFICATIONS = "pet.reserved.notifications"
    PET_ADOPTED_NOTIFICATIONS = "pet.adopted.notifications"
    RESERVATION_CANCELLED_NOTIFICATIONS = "pet.reservation.cancelled.notifications"
    DEAD_LETTER = "pet.deadletter.queue"


def build_pet_registry() -> EventRegistry:
    return (
        EventRegistry()
        .register(PetReservedEvent, RoutingKeys.PET_RESERVED)
        .register(PetAdoptedEvent, RoutingKeys.PET_ADOPTED)
        .register(PetReservationCancelledEvent, RoutingKeys.RESERVATION_CANCELLED)
    )


def pet_topology(exchange: str = PET_EVENTS_EXCHANGE) -> TopologySpec:
    """Topic exchange, one notification queue per event, shared dead-letter queue."""
    dead_letter = {"x-dead-letter-exchange": PET_DEAD_LETTER_EXCHANGE}
    return (
        TopologySpec.builder()
        .exchange(exchange, "topic")
        .exchange(PET_DEAD_LETTER_EXCHANGE, "fanout")
        .queue(
            Queues.PET_RESERVED_NOTIFICATIONS,
            arguments=dead_letter,
            bindings=[(exchange, RoutingKeys.PET_RESERVED)],
        )
        .queue(
            Queues.PET_ADOPTED_NOTIFICATIONS,
            arguments=dead_letter,
            bindings=[(exchange, RoutingKeys.PET_ADOPTED)],
        )
        .queue(
            Queues.RESERVATION_CANCELLED_NOTIFICATIONS,
            arguments=dead_letter,
            bindings=[(exchange, RoutingKeys.RESERVATION_CANCELLED)],
        )
        .queue(Queues.DEAD_LETTER, bindings=[(PET_DEAD_LETTER_EXCHANGE, "")])
        .build()
    )


__all__ = [
    "PET_DEAD_LETTER_EXCHANGE",
    "PET_EVENTS_EXCHANGE",
    "Queues",
    "RoutingKeys",
    "build_pet_registry",
    "pet_topology",
]
