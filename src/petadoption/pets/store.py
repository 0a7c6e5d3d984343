"""MongoDB persistence mapping for pets and the pet type catalog."""

from __future__ import annotations

from typing import Any

import pymongo
from pymongo.errors import DuplicateKeyError, PyMongoError

from petadoption.adapters.mongodb import MongoAggregateStore
from petadoption.kernel.errors import StorageError
from petadoption.kernel.types import EntityId
from petadoption.pets.domain import Pet, PetName, PetStatus
from petadoption.pets.pet_types import (
    PetType,
    PetTypeStore,
    normalise_code,
    pet_type_already_exists,
    pet_type_not_found,
)


class MongoPetStore(MongoAggregateStore[Pet]):
    COLLECTION_NAME = "pets"
    aggregate_type = "Pet"

    def _to_document(self, pet: Pet) -> dict[str, Any]:
        return {
            "name": pet.name.value,
            "petTypeId": pet.pet_type_id,
            "status": pet.status.value,
        }

    def _from_document(self, doc: dict[str, Any]) -> Pet:
        return Pet(
            EntityId(doc["_id"]),
            PetName(doc["name"]),
            doc["petTypeId"],
            PetStatus(doc["status"]),
        )


class MongoPetTypeStore(PetTypeStore):
    """Pet types in one collection with a unique ``code`` index.

    Writes are single-document and not versioned.
    """

    COLLECTION_NAME = "pet_types"

    def __init__(self, collection: Any) -> None:
        self._col = collection

    async def create_indexes(self) -> None:
        try:
            await self._col.create_index([("code", pymongo.ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StorageError("PetType.create_indexes", cause=exc) from exc

    async def get(self, id: EntityId) -> PetType | None:  # noqa: A002
        return await self._find_one({"_id": id.value}, "PetType.get")

    async def get_by_code(self, code: str) -> PetType | None:
        return await self._find_one({"code": normalise_code(code)}, "PetType.get_by_code")

    async def list_all(self, *, active_only: bool = False) -> list[PetType]:
        query = {"isActive": True} if active_only else {}
        try:
            cursor = self._col.find(query).sort("name", pymongo.ASCENDING)
            return [self._from_document(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("PetType.list_all", cause=exc) from exc

    async def add(self, pet_type: PetType) -> None:
        try:
            await self._col.insert_one(self._to_document(pet_type))
        except DuplicateKeyError as exc:
            raise pet_type_already_exists(pet_type.code) from exc
        except PyMongoError as exc:
            raise StorageError("PetType.add", cause=exc) from exc

    async def update(self, pet_type: PetType) -> None:
        try:
            result = await self._col.replace_one({"_id": pet_type.id.value}, self._to_document(pet_type))
        except PyMongoError as exc:
            raise StorageError("PetType.update", cause=exc) from exc
        if result.matched_count == 0:
            raise pet_type_not_found(pet_type.id.value)

    async def _find_one(self, query: dict[str, Any], operation: str) -> PetType | None:
        try:
            doc = await self._col.find_one(query)
        except PyMongoError as exc:
            raise StorageError(operation, cause=exc) from exc
        return self._from_document(doc) if doc is not None else None

    @staticmethod
    def _to_document(pet_type: PetType) -> dict[str, Any]:
        return {
            "_id": pet_type.id.value,
            "code": pet_type.code,
            "name": pet_type.name,
            "isActive": pet_type.is_active,
            "createdAt": pet_type.created_at,
            "updatedAt": pet_type.updated_at,
        }

    @staticmethod
    def _from_document(doc: dict[str, Any]) -> PetType:
        return PetType(
            EntityId(doc["_id"]),
            doc["code"],
            doc["name"],
            is_active=doc.get("isActive", True),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )


__all__ = ["MongoPetStore", "MongoPetTypeStore"]
