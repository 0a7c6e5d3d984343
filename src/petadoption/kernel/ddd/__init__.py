"""DDD building blocks – public re-export surface."""

from petadoption.kernel.ddd.aggregate import AggregateRoot
from petadoption.kernel.ddd.domain_event import DomainEvent
from petadoption.kernel.ddd.entity import Entity
from petadoption.kernel.ddd.repository import AggregateStore
from petadoption.kernel.ddd.unit_of_work import UnitOfWork
from petadoption.kernel.ddd.value_object import ValueObject

__all__ = [
    "AggregateRoot",
    "AggregateStore",
    "DomainEvent",
    "Entity",
    "UnitOfWork",
    "ValueObject",
]
