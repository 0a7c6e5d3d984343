"""
petadoption – reliable event-delivery core for the pet adoption services.

Import path convention::

    from petadoption.kernel.errors import ConcurrencyConflictError
    from petadoption.kernel.ddd import AggregateRoot, DomainEvent
    from petadoption.application.outbox import OutboxDispatcher
    from petadoption.adapters.rabbitmq import RabbitMQEventPublisher
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
