"""Pet command handlers.

Each handler loads the pet, applies one state change and saves it.  A
:class:`~petadoption.kernel.errors.ConcurrencyConflictError` from the store
propagates unchanged; the HTTP layer maps it to 409.
"""

from __future__ import annotations

import dataclasses

from petadoption.application.cqrs import Command, CommandHandler, HandlerRegistry
from petadoption.kernel.ddd import AggregateStore
from petadoption.kernel.types import EntityId
from petadoption.pets.domain import Pet, PetDomainError, PetErrorCode
from petadoption.pets.pet_types import PetType, PetTypeStore, pet_type_already_exists, pet_type_not_found


@dataclasses.dataclass(frozen=True)
class PetResult:
    pet_id: str
    status: str
    version: int


@dataclasses.dataclass(frozen=True)
class CreatePet(Command):
    name: str
    pet_type_id: str


@dataclasses.dataclass(frozen=True)
class ReservePet(Command):
    pet_id: str


@dataclasses.dataclass(frozen=True)
class AdoptPet(Command):
    pet_id: str


@dataclasses.dataclass(frozen=True)
class CancelReservation(Command):
    pet_id: str


def _result(pet: Pet) -> PetResult:
    return PetResult(pet.id.value, pet.status.value, pet.version)


class _PetHandler:
    def __init__(self, store: AggregateStore[Pet]) -> None:
        self._store = store

    async def _load(self, pet_id: str) -> Pet:
        pet = await self._store.get(EntityId(pet_id))
        if pet is None:
            raise PetDomainError(
                PetErrorCode.PET_NOT_FOUND,
                f"Pet with ID {pet_id} was not found.",
                {"pet_id": pet_id},
            )
        return pet


class CreatePetHandler(_PetHandler, CommandHandler[CreatePet, PetResult]):
    """With a *pet_types* catalog, the pet type must exist and be active."""

    def __init__(self, store: AggregateStore[Pet], pet_types: PetTypeStore | None = None) -> None:
        super().__init__(store)
        self._pet_types = pet_types

    async def handle(self, command: CreatePet) -> PetResult:
        if self._pet_types is not None:
            await _require_active_type(self._pet_types, command.pet_type_id)
        pet = Pet.create(command.name, command.pet_type_id)
        await self._store.save(pet)
        return _result(pet)


async def _require_active_type(pet_types: PetTypeStore, pet_type_id: str) -> None:
    pet_type = await pet_types.get(EntityId(pet_type_id))
    if pet_type is None or not pet_type.is_active:
        raise PetDomainError(
            PetErrorCode.INVALID_PET_TYPE,
            f"Pet type '{pet_type_id}' does not exist or is inactive.",
            {"pet_type_id": pet_type_id},
        )


class ReservePetHandler(_PetHandler, CommandHandler[ReservePet, PetResult]):
    async def handle(self, command: ReservePet) -> PetResult:
        pet = await self._load(command.pet_id)
        pet.reserve()
        await self._store.save(pet)
        return _result(pet)


class AdoptPetHandler(_PetHandler, CommandHandler[AdoptPet, PetResult]):
    async def handle(self, command: AdoptPet) -> PetResult:
        pet = await self._load(command.pet_id)
        pet.adopt()
        await self._store.save(pet)
        return _result(pet)


class CancelReservationHandler(_PetHandler, CommandHandler[CancelReservation, PetResult]):
    async def handle(self, command: CancelReservation) -> PetResult:
        pet = await self._load(command.pet_id)
        pet.cancel_reservation()
        await self._store.save(pet)
        return _result(pet)


# -- pet type catalog -----------------------------------------------------


@dataclasses.dataclass(frozen=True)
class PetTypeResult:
    pet_type_id: str
    code: str
    name: str
    is_active: bool


@dataclasses.dataclass(frozen=True)
class CreatePetType(Command):
    code: str
    name: str


@dataclasses.dataclass(frozen=True)
class UpdatePetType(Command):
    pet_type_id: str
    name: str


@dataclasses.dataclass(frozen=True)
class ActivatePetType(Command):
    pet_type_id: str


@dataclasses.dataclass(frozen=True)
class DeactivatePetType(Command):
    pet_type_id: str


def _type_result(pet_type: PetType) -> PetTypeResult:
    return PetTypeResult(pet_type.id.value, pet_type.code, pet_type.name, pet_type.is_active)


class _PetTypeHandler:
    def __init__(self, pet_types: PetTypeStore) -> None:
        self._pet_types = pet_types

    async def _load(self, pet_type_id: str) -> PetType:
        pet_type = await self._pet_types.get(EntityId(pet_type_id))
        if pet_type is None:
            raise pet_type_not_found(pet_type_id)
        return pet_type


class CreatePetTypeHandler(_PetTypeHandler, CommandHandler[CreatePetType, PetTypeResult]):
    async def handle(self, command: CreatePetType) -> PetTypeResult:
        pet_type = PetType.create(command.code, command.name)
        if await self._pet_types.exists_with_code(pet_type.code):
            raise pet_type_already_exists(pet_type.code)
        await self._pet_types.add(pet_type)
        return _type_result(pet_type)


class UpdatePetTypeHandler(_PetTypeHandler, CommandHandler[UpdatePetType, PetTypeResult]):
    async def handle(self, command: UpdatePetType) -> PetTypeResult:
        pet_type = await self._load(command.pet_type_id)
        pet_type.update_name(command.name)
        await self._pet_types.update(pet_type)
        return _type_result(pet_type)


class ActivatePetTypeHandler(_PetTypeHandler, CommandHandler[ActivatePetType, PetTypeResult]):
    async def handle(self, command: ActivatePetType) -> PetTypeResult:
        pet_type = await self._load(command.pet_type_id)
        pet_type.activate()
        await self._pet_types.update(pet_type)
        return _type_result(pet_type)


class DeactivatePetTypeHandler(_PetTypeHandler, CommandHandler[DeactivatePetType, PetTypeResult]):
    async def handle(self, command: DeactivatePetType) -> PetTypeResult:
        pet_type = await self._load(command.pet_type_id)
        pet_type.deactivate()
        await self._pet_types.update(pet_type)
        return _type_result(pet_type)


def register_pet_handlers(
    registry: HandlerRegistry,
    store: AggregateStore[Pet],
    pet_types: PetTypeStore | None = None,
) -> HandlerRegistry:
    """Register the pet commands, plus the catalog commands when *pet_types* is given."""
    registry.register(CreatePet, CreatePetHandler(store, pet_types))
    registry.register(ReservePet, ReservePetHandler(store))
    registry.register(AdoptPet, AdoptPetHandler(store))
    registry.register(CancelReservation, CancelReservationHandler(store))
    if pet_types is not None:
        registry.register(CreatePetType, CreatePetTypeHandler(pet_types))
        registry.register(UpdatePetType, UpdatePetTypeHandler(pet_types))
        registry.register(ActivatePetType, ActivatePetTypeHandler(pet_types))
        registry.register(DeactivatePetType, DeactivatePetTypeHandler(pet_types))
    return registry


__all__ = [
    "ActivatePetType",
    "ActivatePetTypeHandler",
    "AdoptPet",
    "AdoptPetHandler",
    "CancelReservation",
    "CancelReservationHandler",
    "CreatePet",
    "CreatePetHandler",
    "CreatePetType",
    "CreatePetTypeHandler",
    "DeactivatePetType",
    "DeactivatePetTypeHandler",
    "PetResult",
    "PetTypeResult",
    "ReservePet",
    "ReservePetHandler",
    "UpdatePetType",
    "UpdatePetTypeHandler",
    "register_pet_handlers",
]
