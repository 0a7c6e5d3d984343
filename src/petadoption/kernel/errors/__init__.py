"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ConflictError
    │       └── ConcurrencyConflictError
    ├── ApplicationError         (application.py)
    │   └── HandlerNotFoundError
    └── InfrastructureError      (infrastructure.py)
        ├── StorageError
        ├── PublishError
        ├── TopologyError
        └── SerializationError
            └── UnknownEventTypeError
"""

from petadoption.kernel.errors.application import ApplicationError, HandlerNotFoundError
from petadoption.kernel.errors.base import BaseError
from petadoption.kernel.errors.domain import (
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from petadoption.kernel.errors.infrastructure import (
    InfrastructureError,
    PublishError,
    SerializationError,
    StorageError,
    TopologyError,
    UnknownEventTypeError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "HandlerNotFoundError",
    "InfrastructureError",
    "NotFoundError",
    "PublishError",
    "SerializationError",
    "StorageError",
    "TopologyError",
    "UnknownEventTypeError",
    "ValidationError",
]
