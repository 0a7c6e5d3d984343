"""Pet aggregate, its value objects and domain errors."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from petadoption.kernel.ddd import AggregateRoot, ValueObject
from petadoption.kernel.errors import DomainError
from petadoption.kernel.types import EntityId
from petadoption.pets.events import PetAdoptedEvent, PetReservationCancelledEvent, PetReservedEvent


class PetErrorCode:
    """Snake-case error codes exposed to API clients."""

    PET_NOT_AVAILABLE = "pet_not_available"
    PET_NOT_RESERVED = "pet_not_reserved"
    PET_NOT_FOUND = "pet_not_found"
    INVALID_PET_NAME = "invalid_pet_name"
    INVALID_PET_TYPE = "invalid_pet_type"
    PET_TYPE_NOT_FOUND = "pet_type_not_found"
    PET_TYPE_ALREADY_EXISTS = "pet_type_already_exists"
    INVALID_OPERATION = "invalid_operation"


class PetDomainError(DomainError):
    """A pet business rule was violated; ``code`` is one of :class:`PetErrorCode`."""

    default_code = "pet_domain_error"

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message, code=code, detail=detail)


class PetStatus(str, Enum):
    AVAILABLE = "Available"
    RESERVED = "Reserved"
    ADOPTED = "Adopted"


@dataclasses.dataclass(frozen=True)
class PetName(ValueObject):
    """Trimmed pet name, 1 to 100 characters."""

    MAX_LENGTH = 100

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise PetDomainError(
                PetErrorCode.INVALID_PET_NAME,
                "Pet name cannot be empty or whitespace.",
                {"attempted_value": self.value, "reason": "empty_or_whitespace"},
            )
        object.__setattr__(self, "value", self.value.strip())
        super().__post_init__()

    def _validate(self) -> None:
        if len(self.value) > self.MAX_LENGTH:
            raise PetDomainError(
                PetErrorCode.INVALID_PET_NAME,
                f"Pet name cannot exceed {self.MAX_LENGTH} characters.",
                {"max_length": self.MAX_LENGTH, "actual_length": len(self.value), "reason": "too_long"},
            )

    def __str__(self) -> str:
        return self.value


class Pet(AggregateRoot):
    """A pet up for adoption: Available → Reserved → Adopted.

    A reservation can be cancelled, returning the pet to Available.
    """

    def __init__(
        self,
        id: EntityId,  # noqa: A002
        name: PetName,
        pet_type_id: str,
        status: PetStatus = PetStatus.AVAILABLE,
        *,
        version: int = 0,
        is_new: bool = True,
    ) -> None:
        super().__init__(id, version=version, is_new=is_new)
        if not pet_type_id:
            raise PetDomainError(PetErrorCode.INVALID_PET_TYPE, "Pet type ID cannot be empty.")
        self._name = name
        self._pet_type_id = pet_type_id
        self._status = status

    @classmethod
    def create(cls, name: str, pet_type_id: str) -> "Pet":
        return cls(EntityId.generate(), PetName(name), pet_type_id)

    @property
    def name(self) -> PetName:
        return self._name

    @property
    def pet_type_id(self) -> str:
        return self._pet_type_id

    @property
    def status(self) -> PetStatus:
        return self._status

    def reserve(self) -> None:
        self._require(PetStatus.AVAILABLE, PetErrorCode.PET_NOT_AVAILABLE, "reserved")
        self._status = PetStatus.RESERVED
        self._record_event(PetReservedEvent(self._name.value, aggregate_id=self.id.value))

    def adopt(self) -> None:
        self._require(PetStatus.RESERVED, PetErrorCode.PET_NOT_RESERVED, "adopted")
        self._status = PetStatus.ADOPTED
        self._record_event(PetAdoptedEvent(self._name.value, aggregate_id=self.id.value))

    def cancel_reservation(self) -> None:
        self._require(PetStatus.RESERVED, PetErrorCode.PET_NOT_RESERVED, "released from its reservation")
        self._status = PetStatus.AVAILABLE
        self._record_event(PetReservationCancelledEvent(self._name.value, aggregate_id=self.id.value))

    def _require(self, required: PetStatus, code: str, action: str) -> None:
        if self._status is not required:
            raise PetDomainError(
                code,
                f"Pet {self.id} cannot be {action} because it is {self._status.value}. "
                f"Only {required.value} pets can be {action}.",
                {
                    "pet_id": self.id.value,
                    "current_status": self._status.value,
                    "required_status": required.value,
                },
            )


__all__ = ["Pet", "PetDomainError", "PetErrorCode", "PetName", "PetStatus"]
