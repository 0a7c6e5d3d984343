"""ValueObject base class."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class ValueObject:
    """Base class for value objects.

    Subclasses should be ``@dataclass(frozen=True)`` and override
    :meth:`_validate`; it runs on construction.
    """

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add invariant checks."""


__all__ = ["ValueObject"]
