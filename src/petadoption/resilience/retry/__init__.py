"""Resilience – tenacity-backed retry policy."""
from petadoption.resilience.retry.tenacity_adapter import TenacityRetryPolicy

__all__ = ["TenacityRetryPolicy"]
