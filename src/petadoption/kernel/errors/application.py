"""Application-layer errors – cross-cutting concerns at use-case level."""

from __future__ import annotations

from petadoption.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class HandlerNotFoundError(ApplicationError):
    """No command handler is registered for a command type."""

    default_code = "handler_not_found"

    def __init__(self, command_type: type) -> None:
        super().__init__(f"No handler registered for {command_type.__name__!r}")
        self.command_type = command_type


__all__ = ["ApplicationError", "HandlerNotFoundError"]
