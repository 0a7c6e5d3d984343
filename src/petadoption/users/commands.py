"""User command handlers."""

from __future__ import annotations

import dataclasses
import hmac
from typing import Callable

from petadoption.application.cqrs import Command, CommandHandler, HandlerRegistry
from petadoption.kernel.types import EntityId
from petadoption.users.domain import (
    DuplicateEmailError,
    Email,
    User,
    UserDomainError,
    UserErrorCode,
    validate_plain_password,
)
from petadoption.users.store import UserStore

PasswordHasher = Callable[[str], str]
PasswordVerifier = Callable[[str, str], bool]


def rehash_verifier(password_hasher: PasswordHasher) -> PasswordVerifier:
    """Verifier for deterministic hashers: hash again and compare in constant time."""

    def verify(plain: str, password_hash: str) -> bool:
        return hmac.compare_digest(password_hasher(plain), password_hash)

    return verify


@dataclasses.dataclass(frozen=True)
class UserResult:
    user_id: str
    email: str
    role: str
    status: str
    version: int


@dataclasses.dataclass(frozen=True)
class RegisterUser(Command):
    email: str
    full_name: str
    password: str = dataclasses.field(repr=False)
    phone_number: str | None = None


@dataclasses.dataclass(frozen=True)
class UpdateUserProfile(Command):
    """``None`` leaves a field unchanged."""

    user_id: str
    full_name: str | None = None
    phone_number: str | None = None


@dataclasses.dataclass(frozen=True)
class ChangePassword(Command):
    user_id: str
    current_password: str = dataclasses.field(repr=False)
    new_password: str = dataclasses.field(repr=False)


@dataclasses.dataclass(frozen=True)
class SuspendUser(Command):
    user_id: str
    reason: str


@dataclasses.dataclass(frozen=True)
class PromoteToAdmin(Command):
    user_id: str


def _result(user: User) -> UserResult:
    return UserResult(user.id.value, user.email.value, user.role.value, user.status.value, user.version)


class RegisterUserHandler(CommandHandler[RegisterUser, UserResult]):
    def __init__(self, store: UserStore, password_hasher: PasswordHasher) -> None:
        self._store = store
        self._hash = password_hasher

    async def handle(self, command: RegisterUser) -> UserResult:
        email = Email(command.email)
        validate_plain_password(command.password)
        if await self._store.exists_with_email(email):
            raise DuplicateEmailError(email.value)
        user = User.register(
            email.value,
            command.full_name,
            self._hash(command.password),
            command.phone_number,
        )
        await self._store.save(user)
        return _result(user)


class _UserHandler:
    def __init__(self, store: UserStore) -> None:
        self._store = store

    async def _load(self, user_id: str) -> User:
        user = await self._store.get(EntityId(user_id))
        if user is None:
            raise UserDomainError(
                UserErrorCode.USER_NOT_FOUND, f"User with ID {user_id} was not found.", {"user_id": user_id}
            )
        return user


class UpdateUserProfileHandler(_UserHandler, CommandHandler[UpdateUserProfile, UserResult]):
    async def handle(self, command: UpdateUserProfile) -> UserResult:
        user = await self._load(command.user_id)
        user.update_profile(command.full_name, command.phone_number)
        if user.pending_events:
            await self._store.save(user)
        return _result(user)


class ChangePasswordHandler(_UserHandler, CommandHandler[ChangePassword, UserResult]):
    """Checks the current password before storing the hash of the new one."""

    def __init__(
        self,
        store: UserStore,
        password_hasher: PasswordHasher,
        password_verifier: PasswordVerifier,
    ) -> None:
        super().__init__(store)
        self._hash = password_hasher
        self._verify = password_verifier

    async def handle(self, command: ChangePassword) -> UserResult:
        validate_plain_password(command.new_password)
        user = await self._load(command.user_id)
        if not self._verify(command.current_password, user.password_hash):
            raise UserDomainError(
                UserErrorCode.INVALID_CREDENTIALS,
                "Current password is incorrect.",
                {"user_id": command.user_id},
            )
        user.change_password(self._hash(command.new_password))
        await self._store.save(user)
        return _result(user)


class SuspendUserHandler(_UserHandler, CommandHandler[SuspendUser, UserResult]):
    async def handle(self, command: SuspendUser) -> UserResult:
        user = await self._load(command.user_id)
        user.suspend(command.reason)
        await self._store.save(user)
        return _result(user)


class PromoteToAdminHandler(_UserHandler, CommandHandler[PromoteToAdmin, UserResult]):
    async def handle(self, command: PromoteToAdmin) -> UserResult:
        user = await self._load(command.user_id)
        user.promote_to_admin()
        await self._store.save(user)
        return _result(user)


def register_user_handlers(
    registry: HandlerRegistry,
    store: UserStore,
    password_hasher: PasswordHasher,
    *,
    password_verifier: PasswordVerifier | None = None,
) -> HandlerRegistry:
    """Register every user command.

    *password_verifier* defaults to :func:`rehash_verifier`, which only suits
    deterministic hashers; salted hashers must pass their own verifier.
    """
    verifier = password_verifier or rehash_verifier(password_hasher)
    return (
        registry.register(RegisterUser, RegisterUserHandler(store, password_hasher))
        .register(UpdateUserProfile, UpdateUserProfileHandler(store))
        .register(ChangePassword, ChangePasswordHandler(store, password_hasher, verifier))
        .register(SuspendUser, SuspendUserHandler(store))
        .register(PromoteToAdmin, PromoteToAdminHandler(store))
    )


__all__ = [
    "ChangePassword",
    "ChangePasswordHandler",
    "PasswordHasher",
    "PasswordVerifier",
    "PromoteToAdmin",
    "PromoteToAdminHandler",
    "RegisterUser",
    "RegisterUserHandler",
    "SuspendUser",
    "SuspendUserHandler",
    "UpdateUserProfile",
    "UpdateUserProfileHandler",
    "UserResult",
    "register_user_handlers",
    "rehash_verifier",
]
