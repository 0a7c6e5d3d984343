"""Unit tests for the user service: aggregate, value objects and handlers."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from petadoption.application.cqrs import HandlerRegistry
from petadoption.kernel.errors import ConflictError
from petadoption.kernel.types import EntityId
from petadoption.testing import InMemoryOutboxStore, InMemoryUserStore
from petadoption.users import (
    DuplicateEmailError,
    Email,
    FullName,
    PhoneNumber,
    User,
    UserDomainError,
    UserErrorCode,
    UserPasswordChangedEvent,
    UserProfileUpdatedEvent,
    UserRegisteredEvent,
    UserRole,
    UserRoleChangedEvent,
    UserStatus,
    UserSuspendedEvent,
    build_user_registry,
    user_topology,
)
from petadoption.users.commands import (
    ChangePassword,
    PromoteToAdmin,
    RegisterUser,
    SuspendUser,
    UpdateUserProfile,
    register_user_handlers,
)
from petadoption.users.store import MongoUserStore


def _user() -> User:
    user = User.register("ana@example.com", "Ana Lima", "hash:secret")
    user.clear_events()
    return user


class TestValueObjects:
    def test_email_normalised(self) -> None:
        assert Email("  Ana@Example.COM ").value == "ana@example.com"

    @pytest.mark.parametrize("raw", ["", "no-at-sign.com", "ana@localhost", "a@" + "x" * 260 + ".com"])
    def test_email_rejected(self, raw: str) -> None:
        with pytest.raises(UserDomainError) as exc_info:
            Email(raw)
        assert exc_info.value.code == UserErrorCode.INVALID_EMAIL

    def test_full_name_bounds(self) -> None:
        assert FullName(" Al ").value == "Al"
        with pytest.raises(UserDomainError):
            FullName("A")
        with pytest.raises(UserDomainError):
            FullName("x" * 101)

    def test_phone_number_strips_formatting(self) -> None:
        phone = PhoneNumber.from_optional("+1 (555) 010-9999")
        assert phone is not None
        assert phone.value == "+15550109999"

    def test_phone_number_optional(self) -> None:
        assert PhoneNumber.from_optional("  ") is None

    def test_phone_number_too_short(self) -> None:
        with pytest.raises(UserDomainError):
            PhoneNumber.from_optional("123")


class TestUserAggregate:
    def test_register_records_event(self) -> None:
        user = User.register("ana@example.com", "Ana Lima", "hash:secret")
        (event,) = user.pending_events
        assert isinstance(event, UserRegisteredEvent)
        assert event.email == "ana@example.com"
        assert event.role == "User"
        assert event.registered_at == user.registered_at
        assert user.status is UserStatus.ACTIVE

    def test_update_profile_reports_changed_fields(self) -> None:
        user = _user()
        user.update_profile(full_name="Ana Maria")
        (event,) = user.pending_events
        assert isinstance(event, UserProfileUpdatedEvent)
        assert event.new_full_name == "Ana Maria"
        assert event.new_phone_number is None

    def test_update_profile_without_changes_is_silent(self) -> None:
        user = _user()
        user.update_profile()
        assert user.pending_events == ()

    def test_change_password(self) -> None:
        user = _user()
        user.change_password("hash:new")
        assert user.password_hash == "hash:new"
        assert isinstance(user.pending_events[0], UserPasswordChangedEvent)

    def test_promote(self) -> None:
        user = _user()
        user.promote_to_admin()
        assert user.role is UserRole.ADMIN
        assert isinstance(user.pending_events[0], UserRoleChangedEvent)
        with pytest.raises(UserDomainError) as exc_info:
            user.promote_to_admin()
        assert exc_info.value.code == UserErrorCode.USER_ALREADY_ADMIN

    def test_suspend_and_activate(self) -> None:
        user = _user()
        user.suspend("spam")
        assert user.status is UserStatus.SUSPENDED
        event = user.pending_events[0]
        assert isinstance(event, UserSuspendedEvent)
        assert event.reason == "spam"
        with pytest.raises(UserDomainError):
            user.suspend("again")
        user.activate()
        assert user.status is UserStatus.ACTIVE
        assert len(user.pending_events) == 1
        with pytest.raises(UserDomainError):
            user.activate()

    def test_suspended_user_cannot_change_profile(self) -> None:
        user = _user()
        user.suspend("spam")
        with pytest.raises(UserDomainError) as exc_info:
            user.update_profile(full_name="New Name")
        assert exc_info.value.code == UserErrorCode.USER_SUSPENDED
        with pytest.raises(UserDomainError):
            user.change_password("hash:x")

    def test_record_login_is_silent(self) -> None:
        user = _user()
        user.record_login()
        assert user.last_login_at is not None
        assert user.pending_events == ()


class TestUserMessaging:
    def test_registry(self) -> None:
        registry = build_user_registry()
        assert registry.routing_key_for("UserRegisteredEvent") == "user.registered.v1"
        assert registry.routing_key_for("UserProfileUpdatedEvent") == "user.profile-updated.v1"
        assert registry.routing_key_for("UserSuspendedEvent") == "user.suspended.v1"
        assert registry.routing_key_for("UserPasswordChangedEvent") == "user.password-changed.v1"
        assert registry.routing_key_for("UserRoleChangedEvent") == "user.role-changed.v1"

    def test_registered_event_decodes_with_datetime(self) -> None:
        registry = build_user_registry()
        user = User.register("ana@example.com", "Ana Lima", "hash:secret")
        event = user.pending_events[0]
        assert registry.decode(event.event_type, registry.encode(event)) == event

    def test_topology_is_single_topic_exchange(self) -> None:
        spec = user_topology()
        assert [(e.name, e.kind) for e in spec.exchanges] == [("user.events", "topic")]
        assert spec.queues == ()


class TestMongoUserStore:
    def _store(self, col: MagicMock | None = None) -> MongoUserStore:
        return MongoUserStore(col or MagicMock(), AsyncMock(), uow_factory=MagicMock())

    def test_document_round_trip(self) -> None:
        store = self._store()
        user = _user()
        doc = store._to_document(user)
        assert doc["email"] == "ana@example.com"
        assert doc["passwordHash"] == "hash:secret"
        doc["_id"] = user.id.value
        restored = store._from_document(doc)
        assert restored.email == user.email
        assert restored.registered_at == user.registered_at
        assert restored.role is UserRole.USER

    def test_unique_email_index(self) -> None:
        col = MagicMock()
        col.create_index = AsyncMock()
        asyncio.run(self._store(col).create_indexes())
        assert col.create_index.await_args.kwargs == {"unique": True}

    def test_get_by_email_marks_persisted(self) -> None:
        user = _user()
        store = self._store()
        doc = store._to_document(user) | {"_id": user.id.value, "version": 3}
        col = MagicMock()
        col.find_one = AsyncMock(return_value=doc)
        found = asyncio.run(self._store(col).get_by_email(Email("ANA@example.com")))
        col.find_one.assert_awaited_once_with({"email": "ana@example.com"})
        assert found is not None
        assert found.version == 3


def _wiring() -> tuple[HandlerRegistry, InMemoryUserStore, InMemoryOutboxStore]:
    outbox = InMemoryOutboxStore()
    store = InMemoryUserStore(outbox)
    registry = register_user_handlers(HandlerRegistry(), store, lambda pw: f"hash:{pw}")
    return registry, store, outbox


class TestUserHandlers:
    def test_register_hashes_password_and_writes_event(self) -> None:
        registry, store, outbox = _wiring()
        result = asyncio.run(registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "s3cret-pass")))
        user = asyncio.run(store.get(EntityId(result.user_id)))
        assert user is not None
        assert user.password_hash == "hash:s3cret-pass"
        assert [r.event_type for r in outbox.all_records()] == ["UserRegisteredEvent"]

    def test_duplicate_email_is_a_conflict(self) -> None:
        registry, *_ = _wiring()
        asyncio.run(registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456")))
        with pytest.raises(DuplicateEmailError) as exc_info:
            asyncio.run(registry.dispatch(RegisterUser("ANA@example.com", "Other", "pw-123456")))
        assert isinstance(exc_info.value, ConflictError)

    def test_suspend_and_promote(self) -> None:
        registry, _, outbox = _wiring()

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            await registry.dispatch(PromoteToAdmin(created.user_id))
            return await registry.dispatch(SuspendUser(created.user_id, "abuse"))

        result = asyncio.run(run())
        assert (result.role, result.status, result.version) == ("Admin", "Suspended", 2)
        assert [r.event_type for r in outbox.all_records()] == [
            "UserRegisteredEvent",
            "UserRoleChangedEvent",
            "UserSuspendedEvent",
        ]

    def test_unknown_user(self) -> None:
        registry, *_ = _wiring()
        with pytest.raises(UserDomainError) as exc_info:
            asyncio.run(registry.dispatch(SuspendUser("nope", "x")))
        assert exc_info.value.code == UserErrorCode.USER_NOT_FOUND

    def test_short_password_rejected_before_hashing(self) -> None:
        hasher = MagicMock(side_effect=lambda pw: f"hash:{pw}")
        store = InMemoryUserStore(InMemoryOutboxStore())
        registry = register_user_handlers(HandlerRegistry(), store, hasher)
        with pytest.raises(UserDomainError) as exc_info:
            asyncio.run(registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "short")))
        assert exc_info.value.code == UserErrorCode.INVALID_PASSWORD
        hasher.assert_not_called()
        assert len(store) == 0

    def test_update_profile_writes_event(self) -> None:
        registry, store, outbox = _wiring()

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            return await registry.dispatch(UpdateUserProfile(created.user_id, full_name="Ana Souza"))

        result = asyncio.run(run())
        user = asyncio.run(store.get(EntityId(result.user_id)))
        assert user is not None
        assert user.full_name.value == "Ana Souza"
        assert result.version == 1
        assert outbox.all_records()[-1].event_type == "UserProfileUpdatedEvent"

    def test_update_profile_without_changes_saves_nothing(self) -> None:
        registry, store, outbox = _wiring()

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            return await registry.dispatch(UpdateUserProfile(created.user_id))

        result = asyncio.run(run())
        assert result.version == 0
        assert store.stored_version(EntityId(result.user_id)) == 0
        assert len(outbox.all_records()) == 1

    def test_change_password_verifies_current_password(self) -> None:
        registry, store, outbox = _wiring()

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            return await registry.dispatch(ChangePassword(created.user_id, "pw-123456", "new-pass-789"))

        result = asyncio.run(run())
        user = asyncio.run(store.get(EntityId(result.user_id)))
        assert user is not None
        assert user.password_hash == "hash:new-pass-789"
        assert outbox.all_records()[-1].event_type == "UserPasswordChangedEvent"

    def test_change_password_with_wrong_current_password(self) -> None:
        registry, store, outbox = _wiring()

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            with pytest.raises(UserDomainError) as exc_info:
                await registry.dispatch(ChangePassword(created.user_id, "wrong-pass", "new-pass-789"))
            assert exc_info.value.code == UserErrorCode.INVALID_CREDENTIALS
            return created.user_id

        user_id = asyncio.run(run())
        assert store.stored_version(EntityId(user_id)) == 0
        assert [r.event_type for r in outbox.all_records()] == ["UserRegisteredEvent"]

    def test_change_password_uses_injected_verifier(self) -> None:
        verifier = MagicMock(return_value=True)
        store = InMemoryUserStore(InMemoryOutboxStore())
        registry = register_user_handlers(
            HandlerRegistry(), store, lambda pw: f"salted:{pw}", password_verifier=verifier
        )

        async def run():  # type: ignore[no-untyped-def]
            created = await registry.dispatch(RegisterUser("ana@example.com", "Ana Lima", "pw-123456"))
            return await registry.dispatch(ChangePassword(created.user_id, "pw-123456", "new-pass-789"))

        assert asyncio.run(run()).version == 1
        verifier.assert_called_once_with("pw-123456", "salted:pw-123456")
