"""Application CQRS – Command, CommandHandler, HandlerRegistry."""
from __future__ import annotations

import abc
from typing import Any, Generic, TypeVar

from petadoption.application.pipeline import Pipeline
from petadoption.kernel.errors import HandlerNotFoundError

C = TypeVar("C", bound="Command")
R = TypeVar("R")


class Command:
    """Marker base for commands (intent to change state)."""


class CommandHandler(abc.ABC, Generic[C, R]):
    """Handle a single command type."""

    @abc.abstractmethod
    async def handle(self, command: C) -> R: ...


class HandlerRegistry:
    """Explicit command type → handler table, run through a :class:`Pipeline`.

    Handlers are registered one by one at startup; dispatch is a dict lookup.

    Usage::

        registry = HandlerRegistry(Pipeline().add(LoggingMiddleware()))
        registry.register(ReservePet, ReservePetHandler(store))
        result = await registry.dispatch(ReservePet(pet_id="..."))
    """

    def __init__(self, pipeline: Pipeline | None = None) -> None:
        self._handlers: dict[type[Command], CommandHandler[Any, Any]] = {}
        self._pipeline = pipeline or Pipeline()

    def register(self, command_type: type[C], handler: CommandHandler[C, Any]) -> "HandlerRegistry":
        self._handlers[command_type] = handler
        return self

    async def dispatch(self, command: Command) -> Any:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise HandlerNotFoundError(type(command))
        return await self._pipeline.execute(command, handler.handle)


__all__ = ["Command", "CommandHandler", "HandlerRegistry"]
