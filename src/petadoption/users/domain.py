"""User aggregate, its value objects and domain errors."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from petadoption.kernel.ddd import AggregateRoot, ValueObject
from petadoption.kernel.errors import ConflictError, DomainError
from petadoption.kernel.time import utc_now
from petadoption.kernel.types import EntityId
from petadoption.users.events import (
    UserPasswordChangedEvent,
    UserProfileUpdatedEvent,
    UserRegisteredEvent,
    UserRoleChangedEvent,
    UserSuspendedEvent,
)


class UserErrorCode:
    USER_NOT_FOUND = "user_not_found"
    USER_SUSPENDED = "user_suspended"
    USER_ALREADY_SUSPENDED = "user_already_suspended"
    USER_ALREADY_ACTIVE = "user_already_active"
    USER_ALREADY_ADMIN = "user_already_admin"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_EMAIL = "invalid_email"
    INVALID_FULL_NAME = "invalid_full_name"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    INVALID_PASSWORD = "invalid_password"
    INVALID_CREDENTIALS = "invalid_credentials"


class UserDomainError(DomainError):
    default_code = "user_domain_error"

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message, code=code, detail=detail)


class DuplicateEmailError(ConflictError):
    """Another user is already registered with this email."""

    default_code = UserErrorCode.DUPLICATE_EMAIL

    def __init__(self, email: str) -> None:
        super().__init__(f"A user with email '{email}' already exists.", detail={"email": email})
        self.email = email


class UserRole(str, Enum):
    USER = "User"
    ADMIN = "Admin"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100


def validate_plain_password(password: str) -> None:
    """Reject a plain-text password outside 8 to 100 characters before hashing."""
    if not isinstance(password, str) or not password.strip():
        raise UserDomainError(UserErrorCode.INVALID_PASSWORD, "Password cannot be empty.")
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise UserDomainError(
            UserErrorCode.INVALID_PASSWORD,
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters.",
            {"length": len(password)},
        )


def _require_text(value: Any, code: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise UserDomainError(code, f"{label} cannot be empty.")
    return value.strip()


@dataclasses.dataclass(frozen=True)
class Email(ValueObject):
    """Trimmed, lower-cased email address (at most 255 characters)."""

    MAX_LENGTH = 255

    value: str

    def __post_init__(self) -> None:
        normalised = _require_text(self.value, UserErrorCode.INVALID_EMAIL, "Email").lower()
        object.__setattr__(self, "value", normalised)
        super().__post_init__()

    def _validate(self) -> None:
        if "@" not in self.value or "." not in self.value:
            raise UserDomainError(UserErrorCode.INVALID_EMAIL, "Invalid email format.", {"email": self.value})
        if len(self.value) > self.MAX_LENGTH:
            raise UserDomainError(
                UserErrorCode.INVALID_EMAIL, f"Email cannot exceed {self.MAX_LENGTH} characters."
            )

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class FullName(ValueObject):
    """Trimmed display name, 2 to 100 characters."""

    MIN_LENGTH = 2
    MAX_LENGTH = 100

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _require_text(self.value, UserErrorCode.INVALID_FULL_NAME, "Name"))
        super().__post_init__()

    def _validate(self) -> None:
        if not self.MIN_LENGTH <= len(self.value) <= self.MAX_LENGTH:
            raise UserDomainError(
                UserErrorCode.INVALID_FULL_NAME,
                f"Name must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters.",
                {"actual_length": len(self.value)},
            )

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class PhoneNumber(ValueObject):
    """Digits and ``+`` only, 10 to 15 characters once formatting is stripped."""

    value: str

    @classmethod
    def from_optional(cls, raw: str | None) -> "PhoneNumber | None":
        if raw is None or not raw.strip():
            return None
        return cls("".join(c for c in raw.strip() if c.isdigit() or c == "+"))

    def _validate(self) -> None:
        if not 10 <= len(self.value) <= 15:
            raise UserDomainError(
                UserErrorCode.INVALID_PHONE_NUMBER,
                "Invalid phone number length (must be 10-15 digits).",
                {"phone_number": self.value},
            )

    def __str__(self) -> str:
        return self.value


class User(AggregateRoot):
    """A registered account.

    The password is held as an opaque hash produced by an injected hasher;
    this aggregate never sees plain text.
    """

    def __init__(
        self,
        id: EntityId,  # noqa: A002
        email: Email,
        full_name: FullName,
        password_hash: str,
        *,
        role: UserRole = UserRole.USER,
        status: UserStatus = UserStatus.ACTIVE,
        phone_number: PhoneNumber | None = None,
        registered_at: datetime | None = None,
        updated_at: datetime | None = None,
        last_login_at: datetime | None = None,
        version: int = 0,
        is_new: bool = True,
    ) -> None:
        super().__init__(id, version=version, is_new=is_new)
        self._email = email
        self._full_name = full_name
        self._password_hash = _require_text(password_hash, UserErrorCode.INVALID_PASSWORD, "Password hash")
        self._role = role
        self._status = status
        self._phone_number = phone_number
        self._registered_at = registered_at or utc_now()
        self._updated_at = updated_at or self._registered_at
        self._last_login_at = last_login_at

    @classmethod
    def register(
        cls,
        email: str,
        full_name: str,
        password_hash: str,
        phone_number: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> "User":
        user = cls(
            EntityId.generate(),
            Email(email),
            FullName(full_name),
            password_hash,
            role=role,
            phone_number=PhoneNumber.from_optional(phone_number),
        )
        user._record_event(
            UserRegisteredEvent(
                user.email.value,
                user.full_name.value,
                user.role.value,
                user.registered_at,
                aggregate_id=user.id.value,
            )
        )
        return user

    # -- read model -----------------------------------------------------

    @property
    def email(self) -> Email:
        return self._email

    @property
    def full_name(self) -> FullName:
        return self._full_name

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def status(self) -> UserStatus:
        return self._status

    @property
    def phone_number(self) -> PhoneNumber | None:
        return self._phone_number

    @property
    def registered_at(self) -> datetime:
        return self._registered_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def last_login_at(self) -> datetime | None:
        return self._last_login_at

    # -- behaviour ------------------------------------------------------

    def update_profile(self, full_name: str | None = None, phone_number: str | None = None) -> None:
        self._require_active("update the profile of")
        if full_name is None and phone_number is None:
            return
        if full_name is not None:
            self._full_name = FullName(full_name)
        if phone_number is not None:
            self._phone_number = PhoneNumber.from_optional(phone_number)
        self._updated_at = utc_now()
        self._record_event(
            UserProfileUpdatedEvent(
                self._full_name.value if full_name is not None else None,
                self._phone_number.value if phone_number is not None and self._phone_number else None,
                self._updated_at,
                aggregate_id=self.id.value,
            )
        )

    def change_password(self, new_password_hash: str) -> None:
        self._require_active("change the password of")
        self._password_hash = _require_text(new_password_hash, UserErrorCode.INVALID_PASSWORD, "Password hash")
        self._updated_at = utc_now()
        self._record_event(UserPasswordChangedEvent(self._updated_at, aggregate_id=self.id.value))

    def promote_to_admin(self) -> None:
        if self._role is UserRole.ADMIN:
            raise UserDomainError(UserErrorCode.USER_ALREADY_ADMIN, "User is already an admin.", {"user_id": self.id.value})
        self._role = UserRole.ADMIN
        self._updated_at = utc_now()
        self._record_event(UserRoleChangedEvent(UserRole.ADMIN.value, self._updated_at, aggregate_id=self.id.value))

    def suspend(self, reason: str) -> None:
        if self._status is UserStatus.SUSPENDED:
            raise UserDomainError(
                UserErrorCode.USER_ALREADY_SUSPENDED, "User is already suspended.", {"user_id": self.id.value}
            )
        self._status = UserStatus.SUSPENDED
        self._updated_at = utc_now()
        self._record_event(UserSuspendedEvent(reason, self._updated_at, aggregate_id=self.id.value))

    def activate(self) -> None:
        if self._status is UserStatus.ACTIVE:
            raise UserDomainError(UserErrorCode.USER_ALREADY_ACTIVE, "User is already active.", {"user_id": self.id.value})
        self._status = UserStatus.ACTIVE
        self._updated_at = utc_now()

    def record_login(self) -> None:
        # No event: logins are too frequent to publish.
        self._last_login_at = utc_now()

    def _require_active(self, action: str) -> None:
        if self._status is UserStatus.SUSPENDED:
            raise UserDomainError(
                UserErrorCode.USER_SUSPENDED,
                f"Cannot {action} a suspended user.",
                {"user_id": self.id.value},
            )


__all__ = [
    "DuplicateEmailError",
    "Email",
    "FullName",
    "PhoneNumber",
    "User",
    "UserDomainError",
    "UserErrorCode",
    "UserRole",
    "UserStatus",
    "validate_plain_password",
]
