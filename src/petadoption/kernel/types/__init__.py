"""Kernel types – identifiers."""
from petadoption.kernel.types.ids import EntityId

__all__ = ["EntityId"]
