"""Domain errors – business rule, invariant and concurrency violations."""

from __future__ import annotations

from typing import Any

from petadoption.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule / invariant is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


class ConcurrencyConflictError(ConflictError):
    """The aggregate was modified by another writer since it was loaded.

    Retryable from the caller's point of view (reload, re-apply, save again);
    the store itself never retries.
    """

    default_code = "concurrency_conflict"

    def __init__(
        self,
        aggregate_type: str,
        aggregate_id: str,
        expected_version: int,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"{aggregate_type} '{aggregate_id}' was modified concurrently "
            f"(expected version {expected_version})",
            detail={
                "aggregate_type": aggregate_type,
                "aggregate_id": aggregate_id,
                "expected_version": expected_version,
            },
            **kwargs,
        )
        self.aggregate_type = aggregate_type
        self.aggregate_id = aggregate_id
        self.expected_version = expected_version


__all__ = [
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
