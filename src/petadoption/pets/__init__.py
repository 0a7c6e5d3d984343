"""Pet service – aggregate, pet type catalog, events, broker addressing and command handlers."""
from petadoption.pets.domain import Pet, PetDomainError, PetErrorCode, PetName, PetStatus
from petadoption.pets.events import PetAdoptedEvent, PetReservationCancelledEvent, PetReservedEvent
from petadoption.pets.messaging import PET_EVENTS_EXCHANGE, RoutingKeys, build_pet_registry, pet_topology
from petadoption.pets.pet_types import PetType, PetTypeStore

__all__ = [
    "PET_EVENTS_EXCHANGE",
    "Pet",
    "PetAdoptedEvent",
    "PetDomainError",
    "PetErrorCode",
    "PetName",
    "PetReservationCancelledEvent",
    "PetReservedEvent",
    "PetStatus",
    "PetType",
    "PetTypeStore",
    "RoutingKeys",
    "build_pet_registry",
    "pet_topology",
]
