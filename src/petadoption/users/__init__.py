"""User service – aggregate, events, broker addressing and command handlers."""
from petadoption.users.domain import (
    DuplicateEmailError,
    Email,
    FullName,
    PhoneNumber,
    User,
    UserDomainError,
    UserErrorCode,
    UserRole,
    UserStatus,
)
from petadoption.users.events import (
    UserPasswordChangedEvent,
    UserProfileUpdatedEvent,
    UserRegisteredEvent,
    UserRoleChangedEvent,
    UserSuspendedEvent,
)
from petadoption.users.messaging import USER_EVENTS_EXCHANGE, RoutingKeys, build_user_registry, user_topology

__all__ = [
    "USER_EVENTS_EXCHANGE",
    "DuplicateEmailError",
    "Email",
    "FullName",
    "PhoneNumber",
    "RoutingKeys",
    "User",
    "UserDomainError",
    "UserErrorCode",
    "UserPasswordChangedEvent",
    "UserProfileUpdatedEvent",
    "UserRegisteredEvent",
    "UserRoleChangedEvent",
    "UserStatus",
    "UserRole",
    "UserSuspendedEvent",
    "build_user_registry",
    "user_topology",
]
