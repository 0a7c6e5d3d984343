"""Application pipeline – built-in middleware implementations."""
from __future__ import annotations

import time
from typing import Any

from petadoption.application.pipeline.middleware import Middleware, Next
from petadoption.kernel.errors import BaseError
from petadoption.observability.logging import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(Middleware):
    """Log command completion or failure with timing."""

    async def __call__(self, request: Any, next_: Next) -> Any:
        name = type(request).__name__
        start = time.perf_counter()
        try:
            result = await next_(request)
        except BaseError as exc:
            duration = (time.perf_counter() - start) * 1000
            logger.warning(
                "use_case.rejected", request=name, code=exc.code, duration_ms=round(duration, 2)
            )
            raise
        except Exception:
            duration = (time.perf_counter() - start) * 1000
            logger.error("use_case.failed", request=name, duration_ms=round(duration, 2), exc_info=True)
            raise
        duration = (time.perf_counter() - start) * 1000
        logger.info("use_case.completed", request=name, duration_ms=round(duration, 2))
        return result


__all__ = ["LoggingMiddleware"]
