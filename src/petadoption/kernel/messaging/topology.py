"""Kernel messaging – declarative broker topology."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class ExchangeSpec:
    name: str
    kind: str = "topic"
    durable: bool = True
    auto_delete: bool = False
    arguments: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class QueueSpec:
    name: str
    durable: bool = True
    exclusive: bool = False
    auto_delete: bool = False
    arguments: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class BindingSpec:
    queue: str
    exchange: str
    routing_key: str = ""


@dataclasses.dataclass(frozen=True)
class TopologySpec:
    """Exchanges, queues and bindings to declare at process start."""

    exchanges: tuple[ExchangeSpec, ...] = ()
    queues: tuple[QueueSpec, ...] = ()
    bindings: tuple[BindingSpec, ...] = ()

    @staticmethod
    def builder() -> "TopologyBuilder":
        return TopologyBuilder()


class TopologyBuilder:
    """Fluent builder for :class:`TopologySpec`.

    Usage::

        spec = (
            TopologySpec.builder()
            .exchange("pet.events")
            .queue("pet.reserved.notifications", bindings=[("pet.events", "pet.reserved.v1")])
            .build()
        )
    """

    def __init__(self) -> None:
        self._exchanges: list[ExchangeSpec] = []
        self._queues: list[QueueSpec] = []
        self._bindings: list[BindingSpec] = []

    def exchange(
        self,
        name: str,
        kind: str = "topic",
        *,
        durable: bool = True,
        auto_delete: bool = False,
        arguments: dict[str, Any] | None = None,
    ) -> "TopologyBuilder":
        self._exchanges.append(
            ExchangeSpec(name, kind, durable, auto_delete, dict(arguments or {}))
        )
        return self

    def queue(
        self,
        name: str,
        *,
        durable: bool = True,
        exclusive: bool = False,
        auto_delete: bool = False,
        arguments: dict[str, Any] | None = None,
        bindings: list[tuple[str, str]] | None = None,
    ) -> "TopologyBuilder":
        """Add a queue; *bindings* is a list of ``(exchange, routing_key)``."""
        self._queues.append(
            QueueSpec(name, durable, exclusive, auto_delete, dict(arguments or {}))
        )
        for exchange, routing_key in bindings or []:
            self.bind(name, exchange, routing_key)
        return self

    def bind(self, queue: str, exchange: str, routing_key: str = "") -> "TopologyBuilder":
        self._bindings.append(BindingSpec(queue, exchange, routing_key))
        return self

    def build(self) -> TopologySpec:
        return TopologySpec(tuple(self._exchanges), tuple(self._queues), tuple(self._bindings))


__all__ = ["BindingSpec", "ExchangeSpec", "QueueSpec", "TopologyBuilder", "TopologySpec"]
