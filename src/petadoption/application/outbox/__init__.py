"""Application outbox – background relay from the outbox store to the broker."""
from petadoption.application.outbox.dispatcher import DispatchReport, DispatcherState, OutboxDispatcher

__all__ = ["DispatchReport", "DispatcherState", "OutboxDispatcher"]
