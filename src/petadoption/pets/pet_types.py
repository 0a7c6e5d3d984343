"""Pet type catalog – administrator-managed kinds of pet (dog, cat, ...).

Pet types are plain entities: they carry no version and record no events.
``Pet.pet_type_id`` refers to :attr:`PetType.id`.
"""

from __future__ import annotations

import abc
from datetime import datetime

from petadoption.kernel.ddd import Entity
from petadoption.kernel.time import utc_now
from petadoption.kernel.types import EntityId
from petadoption.pets.domain import PetDomainError, PetErrorCode

CODE_MIN_LENGTH = 2
CODE_MAX_LENGTH = 50
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def normalise_code(code: str) -> str:
    if not isinstance(code, str) or not code.strip():
        raise PetDomainError(
            PetErrorCode.INVALID_PET_TYPE,
            "Pet type code cannot be empty or whitespace.",
            {"attempted_code": code},
        )
    normalised = code.strip().lower()
    if not CODE_MIN_LENGTH <= len(normalised) <= CODE_MAX_LENGTH:
        raise PetDomainError(
            PetErrorCode.INVALID_PET_TYPE,
            f"Pet type code must be between {CODE_MIN_LENGTH} and {CODE_MAX_LENGTH} characters.",
            {"attempted_code": code, "length": len(normalised)},
        )
    return normalised


def _normalise_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise PetDomainError(
            PetErrorCode.INVALID_PET_TYPE,
            "Pet type name cannot be empty or whitespace.",
            {"attempted_name": name},
        )
    trimmed = name.strip()
    if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
        raise PetDomainError(
            PetErrorCode.INVALID_PET_TYPE,
            f"Pet type name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters.",
            {"attempted_name": name, "length": len(trimmed)},
        )
    return trimmed


class PetType(Entity):
    """A kind of pet.  Inactive types cannot be used for new pets."""

    def __init__(
        self,
        id: EntityId,  # noqa: A002
        code: str,
        name: str,
        *,
        is_active: bool = True,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        super().__init__(id)
        self._code = normalise_code(code)
        self._name = _normalise_name(name)
        self._is_active = is_active
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at

    @classmethod
    def create(cls, code: str, name: str) -> "PetType":
        return cls(EntityId.generate(), code, name)

    @property
    def code(self) -> str:
        return self._code

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    def update_name(self, name: str) -> None:
        self._name = _normalise_name(name)
        self._updated_at = utc_now()

    def deactivate(self) -> None:
        if not self._is_active:
            raise PetDomainError(
                PetErrorCode.INVALID_OPERATION,
                f"Pet type '{self._code}' is already inactive.",
                {"pet_type_id": self.id.value},
            )
        self._is_active = False
        self._updated_at = utc_now()

    def activate(self) -> None:
        if self._is_active:
            raise PetDomainError(
                PetErrorCode.INVALID_OPERATION,
                f"Pet type '{self._code}' is already active.",
                {"pet_type_id": self.id.value},
            )
        self._is_active = True
        self._updated_at = utc_now()


class PetTypeStore(abc.ABC):
    """Port: pet type catalog.  Codes are unique."""

    @abc.abstractmethod
    async def get(self, id: EntityId) -> PetType | None: ...  # noqa: A002

    @abc.abstractmethod
    async def get_by_code(self, code: str) -> PetType | None:
        """Look up by code; *code* is normalised first."""

    @abc.abstractmethod
    async def list_all(self, *, active_only: bool = False) -> list[PetType]:
        """All pet types ordered by name."""

    @abc.abstractmethod
    async def add(self, pet_type: PetType) -> None:
        """Insert; a taken code raises ``pet_type_already_exists``."""

    @abc.abstractmethod
    async def update(self, pet_type: PetType) -> None:
        """Replace; an unknown id raises ``pet_type_not_found``."""

    async def exists_with_code(self, code: str) -> bool:
        return await self.get_by_code(code) is not None


def pet_type_not_found(pet_type_id: str) -> PetDomainError:
    return PetDomainError(
        PetErrorCode.PET_TYPE_NOT_FOUND,
        f"Pet type with ID '{pet_type_id}' was not found.",
        {"pet_type_id": pet_type_id},
    )


def pet_type_already_exists(code: str) -> PetDomainError:
    return PetDomainError(
        PetErrorCode.PET_TYPE_ALREADY_EXISTS,
        f"Pet type with code '{code}' already exists.",
        {"code": code},
    )


__all__ = [
    "PetType",
    "PetTypeStore",
    "normalise_code",
    "pet_type_already_exists",
    "pet_type_not_found",
]
