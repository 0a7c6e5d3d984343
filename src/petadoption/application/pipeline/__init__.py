"""Application pipeline – use-case middleware chain."""
from petadoption.application.pipeline.middleware import Handler, Middleware, Next
from petadoption.application.pipeline.middlewares import LoggingMiddleware
from petadoption.application.pipeline.pipeline import Pipeline

__all__ = ["Handler", "LoggingMiddleware", "Middleware", "Next", "Pipeline"]
