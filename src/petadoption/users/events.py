"""User domain events."""

from __future__ import annotations

import dataclasses
from datetime import datetime

from petadoption.kernel.ddd import DomainEvent


@dataclasses.dataclass(frozen=True)
class UserRegisteredEvent(DomainEvent):
    email: str
    full_name: str
    role: str
    registered_at: datetime


@dataclasses.dataclass(frozen=True)
class UserProfileUpdatedEvent(DomainEvent):
    """Only the changed fields are set; ``None`` means unchanged."""

    new_full_name: str | None
    new_phone_number: str | None
    updated_at: datetime


@dataclasses.dataclass(frozen=True)
class UserPasswordChangedEvent(DomainEvent):
    changed_at: datetime


@dataclasses.dataclass(frozen=True)
class UserRoleChangedEvent(DomainEvent):
    new_role: str
    changed_at: datetime


@dataclasses.dataclass(frozen=True)
class UserSuspendedEvent(DomainEvent):
    reason: str
    suspended_at: datetime


__all__ = [
    "UserPasswordChangedEvent",
    "UserProfileUpdatedEvent",
    "UserRegisteredEvent",
    "UserRoleChangedEvent",
    "UserSuspendedEvent",
]
