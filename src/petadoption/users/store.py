"""User persistence: store port with email lookup and its MongoDB mapping."""

from __future__ import annotations

import abc
from typing import Any

import pymongo
from pymongo.errors import PyMongoError

from petadoption.adapters.mongodb import MongoAggregateStore
from petadoption.kernel.ddd import AggregateStore
from petadoption.kernel.errors import StorageError
from petadoption.kernel.types import EntityId
from petadoption.users.domain import Email, FullName, PhoneNumber, User, UserRole, UserStatus


class UserStore(AggregateStore[User]):
    """Aggregate store for users, plus lookup by normalised email."""

    @abc.abstractmethod
    async def get_by_email(self, email: Email) -> User | None: ...

    async def exists_with_email(self, email: Email) -> bool:
        return await self.get_by_email(email) is not None


class MongoUserStore(MongoAggregateStore[User], UserStore):
    COLLECTION_NAME = "users"
    aggregate_type = "User"

    async def create_indexes(self) -> None:
        try:
            await self._col.create_index([("email", pymongo.ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StorageError("User.create_indexes", cause=exc) from exc

    async def get_by_email(self, email: Email) -> User | None:
        try:
            doc = await self._col.find_one({"email": email.value})
        except PyMongoError as exc:
            raise StorageError("User.get_by_email", cause=exc) from exc
        if doc is None:
            return None
        user = self._from_document(doc)
        user._mark_persisted(doc.get("version", 0))  # noqa: SLF001
        return user

    def _to_document(self, user: User) -> dict[str, Any]:
        return {
            "email": user.email.value,
            "fullName": user.full_name.value,
            "passwordHash": user.password_hash,
            "role": user.role.value,
            "status": user.status.value,
            "phoneNumber": user.phone_number.value if user.phone_number else None,
            "registeredAt": user.registered_at,
            "updatedAt": user.updated_at,
            "lastLoginAt": user.last_login_at,
        }

    def _from_document(self, doc: dict[str, Any]) -> User:
        phone = doc.get("phoneNumber")
        return User(
            EntityId(doc["_id"]),
            Email(doc["email"]),
            FullName(doc["fullName"]),
            doc["passwordHash"],
            role=UserRole(doc["role"]),
            status=UserStatus(doc["status"]),
            phone_number=PhoneNumber(phone) if phone else None,
            registered_at=doc.get("registeredAt"),
            updated_at=doc.get("updatedAt"),
            last_login_at=doc.get("lastLoginAt"),
        )


__all__ = ["MongoUserStore", "UserStore"]
