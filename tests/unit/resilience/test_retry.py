"""Unit tests for the tenacity retry policy."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest
import tenacity

from petadoption.resilience.retry import TenacityRetryPolicy


class TestTenacityRetryPolicy:
    def test_fixed_retries_then_succeeds(self) -> None:
        func = AsyncMock(side_effect=[ConnectionError(), ConnectionError(), "ok"])
        policy = TenacityRetryPolicy.fixed(3, 0)
        assert asyncio.run(policy.execute_async(func)) == "ok"
        assert policy.max_attempts == 3

    def test_reraises_original_exception(self) -> None:
        func = AsyncMock(side_effect=ConnectionError("down"))
        with pytest.raises(ConnectionError, match="down"):
            asyncio.run(TenacityRetryPolicy.fixed(2, 0).execute_async(func))
        assert func.await_count == 2

    def test_before_sleep_hook_called_between_attempts(self) -> None:
        calls: list[int] = []
        policy = TenacityRetryPolicy.fixed(
            3, 0, before_sleep=lambda state: calls.append(state.attempt_number)
        )
        func = AsyncMock(side_effect=[OSError(), OSError(), "ok"])
        asyncio.run(policy.execute_async(func))
        assert calls == [1, 2]

    def test_custom_retry_predicate(self) -> None:
        policy = TenacityRetryPolicy(
            max_attempts=5,
            wait=tenacity.wait_none(),
            retry=tenacity.retry_if_exception_type(OSError),
        )
        func = AsyncMock(side_effect=ValueError("no"))
        with pytest.raises(ValueError):
            asyncio.run(policy.execute_async(func))
        assert func.await_count == 1
