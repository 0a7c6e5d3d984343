"""Observability – structured logging helpers."""
from petadoption.observability.logging.factory import JsonLoggerFactory
from petadoption.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
