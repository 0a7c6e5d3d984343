"""User service broker addressing: routing table and topology."""

from __future__ import annotations

from petadoption.kernel.messaging import EventRegistry, TopologySpec
from petadoption.users.events import (
    UserPasswordChangedEvent,
    UserProfileUpdatedEvent,
    UserRegisteredEvent,
    UserRoleChangedEvent,
    UserSuspendedEvent,
)

USER_EVENTS_EXCHANGE = "user.events"


class RoutingKeys:
    USER_REGISTERED = "user.registered.v1"
    USER_PROFILE_UPDATED = "user.profile-updated.v1"
    USER_SUSPENDED = "user.suspended.v1"
    USER_PASSWORD_CHANGED = "user.password-changed.v1"
    USER_ROLE_CHANGED = "user.role-changed.v1"


def build_user_registry() -> EventRegistry:
    return (
        EventRegistry()
        .register(UserRegisteredEvent, RoutingKeys.USER_REGISTERED)
        .register(UserProfileUpdatedEvent, RoutingKeys.USER_PROFILE_UPDATED)
        .register(UserSuspendedEvent, RoutingKeys.USER_SUSPENDED)
        .register(UserPasswordChangedEvent, RoutingKeys.USER_PASSWORD_CHANGED)
        .register(UserRoleChangedEvent, RoutingKeys.USER_ROLE_CHANGED)
    )


def user_topology(exchange: str = USER_EVENTS_EXCHANGE) -> TopologySpec:
    """The user service only owns its exchange; consumers declare their queues."""
    return TopologySpec.builder().exchange(exchange, "topic").build()


__all__ = ["USER_EVENTS_EXCHANGE", "RoutingKeys", "build_user_registry", "user_topology"]
