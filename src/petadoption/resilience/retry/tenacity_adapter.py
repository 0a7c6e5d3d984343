"""Resilience – TenacityRetryPolicy adapter."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity

T = TypeVar("T")


class TenacityRetryPolicy:
    """Retry policy backed by the ``tenacity`` library.

    Used for the publisher's connect step and for topology provisioning.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy. Defaults to ``wait_fixed(1)``.
    retry:
        A ``tenacity`` retry predicate. Defaults to retrying on any exception.
    before_sleep:
        Optional hook called with the ``RetryCallState`` before each sleep.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        wait: Any = None,
        retry: Any = None,
        before_sleep: Callable[[tenacity.RetryCallState], None] | None = None,
    ) -> None:
        self.max_attempts = max_attempts
        self._wait = wait or tenacity.wait_fixed(1)
        self._retry = retry or tenacity.retry_if_exception_type(Exception)
        self._before_sleep = before_sleep

    @classmethod
    def fixed(cls, max_attempts: int, delay: float, **kwargs: Any) -> "TenacityRetryPolicy":
        """*max_attempts* attempts, *delay* seconds apart."""
        return cls(max_attempts=max_attempts, wait=tenacity.wait_fixed(delay), **kwargs)

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=self._retry,
            before_sleep=self._before_sleep,
            reraise=True,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Await *func* with tenacity retry; the last exception is re-raised."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["TenacityRetryPolicy"]
