"""Process wiring – logging setup and the per-service outbox runtime.

Typical service start-up::

    settings = EnvSettingsLoader().load(ServiceSettings)
    initialize(settings)
    client = create_mongo_client(settings)
    async with build_pet_runtime(settings, client):
        commands = build_pet_commands(settings, client)
        ...  # serve requests
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

from petadoption.adapters.mongodb import MongoOutboxStore
from petadoption.adapters.rabbitmq import ProvisioningReport, RabbitMQEventPublisher, RabbitMQTopologyProvisioner
from petadoption.application.cqrs import HandlerRegistry
from petadoption.application.outbox import OutboxDispatcher
from petadoption.application.pipeline import LoggingMiddleware, Pipeline
from petadoption.config import ServiceSettings
from petadoption.kernel.messaging import EventPublisher, EventRegistry, TopologySpec
from petadoption.observability.logging import JsonLoggerFactory, get_logger
from petadoption.pets.commands import register_pet_handlers
from petadoption.pets.messaging import PET_EVENTS_EXCHANGE, build_pet_registry, pet_topology
from petadoption.pets.store import MongoPetStore, MongoPetTypeStore
from petadoption.users.commands import PasswordHasher, PasswordVerifier, register_user_handlers
from petadoption.users.messaging import USER_EVENTS_EXCHANGE, build_user_registry, user_topology
from petadoption.users.store import MongoUserStore

logger = get_logger(__name__)

StartupHook = Callable[[], Awaitable[Any]]


def _require_motor() -> Any:
    try:
        import motor.motor_asyncio  # type: ignore[import-untyped]
        return motor.motor_asyncio
    except ImportError as exc:
        raise ImportError("Install 'motor' to use the MongoDB adapter") from exc


def initialize(settings: ServiceSettings) -> None:
    """Configure process-wide logging.  Call once, before anything logs."""
    JsonLoggerFactory.configure(settings.log_level)
    logger.info("petadoption.initialized", database=settings.database, log_level=settings.log_level)


def create_mongo_client(settings: ServiceSettings) -> Any:
    """Return a motor client; timestamps are read back as UTC-aware datetimes."""
    return _require_motor().AsyncIOMotorClient(settings.mongo_url, tz_aware=True)


class OutboxRuntime:
    """Owns the broker side of one service: topology, relay loop, publisher.

    :meth:`start` provisions the topology first and raises
    :class:`~petadoption.kernel.errors.TopologyError` if that fails; the
    dispatcher is only started once the topology exists.
    """

    def __init__(
        self,
        provisioner: RabbitMQTopologyProvisioner,
        topology: TopologySpec,
        dispatcher: OutboxDispatcher,
        *,
        publisher: EventPublisher | None = None,
        startup_hooks: Sequence[StartupHook] = (),
    ) -> None:
        self._provisioner = provisioner
        self._topology = topology
        self._dispatcher = dispatcher
        self._publisher = publisher
        self._startup_hooks = tuple(startup_hooks)
        self._report: ProvisioningReport | None = None

    @property
    def dispatcher(self) -> OutboxDispatcher:
        return self._dispatcher

    @property
    def provisioning_report(self) -> ProvisioningReport | None:
        return self._report

    async def start(self) -> None:
        for hook in self._startup_hooks:
            await hook()
        self._report = await self._provisioner.provision(self._topology)
        self._dispatcher.start()
        logger.info("runtime.started")

    async def stop(self) -> None:
        try:
            await self._dispatcher.stop()
        finally:
            if self._publisher is not None:
                await self._publisher.close()
        logger.info("runtime.stopped")

    async def __aenter__(self) -> "OutboxRuntime":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()


def _build_runtime(
    settings: ServiceSettings,
    client: Any,
    *,
    exchange: str,
    registry: EventRegistry,
    topology: TopologySpec,
    startup_hooks: Sequence[StartupHook] = (),
) -> OutboxRuntime:
    outbox_collection = client[settings.database][MongoOutboxStore.COLLECTION_NAME]
    outbox = MongoOutboxStore(outbox_collection, max_retries=settings.max_retries)
    publisher = RabbitMQEventPublisher(exchange, registry, settings.rabbitmq_url)
    dispatcher = OutboxDispatcher(
        outbox,
        publisher,
        registry=registry,
        interval=settings.dispatch_interval_seconds,
        batch_size=settings.dispatch_batch_size,
        max_retries=settings.max_retries,
        initial_delay=settings.dispatch_initial_delay_seconds,
    )
    provisioner = RabbitMQTopologyProvisioner(
        settings.rabbitmq_url,
        max_attempts=settings.topology_max_attempts,
        retry_delay=settings.topology_retry_delay_seconds,
    )
    return OutboxRuntime(
        provisioner,
        topology,
        dispatcher,
        publisher=publisher,
        startup_hooks=(lambda: MongoOutboxStore.create_indexes(outbox_collection), *startup_hooks),
    )


def build_pet_runtime(settings: ServiceSettings, client: Any) -> OutboxRuntime:
    exchange = settings.exchange or PET_EVENTS_EXCHANGE
    return _build_runtime(
        settings,
        client,
        exchange=exchange,
        registry=build_pet_registry(),
        topology=pet_topology(exchange),
        startup_hooks=(_pet_type_store(settings, client).create_indexes,),
    )


def build_user_runtime(settings: ServiceSettings, client: Any) -> OutboxRuntime:
    exchange = settings.exchange or USER_EVENTS_EXCHANGE
    user_store = _user_store(settings, client)
    return _build_runtime(
        settings,
        client,
        exchange=exchange,
        registry=build_user_registry(),
        topology=user_topology(exchange),
        startup_hooks=(user_store.create_indexes,),
    )


def _outbox(settings: ServiceSettings, client: Any) -> MongoOutboxStore:
    return MongoOutboxStore(
        client[settings.database][MongoOutboxStore.COLLECTION_NAME], max_retries=settings.max_retries
    )


def _user_store(settings: ServiceSettings, client: Any) -> MongoUserStore:
    db = client[settings.database]
    return MongoUserStore(db[MongoUserStore.COLLECTION_NAME], _outbox(settings, client))


def _pet_type_store(settings: ServiceSettings, client: Any) -> MongoPetTypeStore:
    return MongoPetTypeStore(client[settings.database][MongoPetTypeStore.COLLECTION_NAME])


def build_pet_commands(
    settings: ServiceSettings, client: Any, pipeline: Pipeline | None = None
) -> HandlerRegistry:
    store = MongoPetStore(client[settings.database][MongoPetStore.COLLECTION_NAME], _outbox(settings, client))
    return register_pet_handlers(
        HandlerRegistry(pipeline or Pipeline().add(LoggingMiddleware())),
        store,
        _pet_type_store(settings, client),
    )


def build_user_commands(
    settings: ServiceSettings,
    client: Any,
    password_hasher: PasswordHasher,
    pipeline: Pipeline | None = None,
    *,
    password_verifier: PasswordVerifier | None = None,
) -> HandlerRegistry:
    return register_user_handlers(
        HandlerRegistry(pipeline or Pipeline().add(LoggingMiddleware())),
        _user_store(settings, client),
        password_hasher,
        password_verifier=password_verifier,
    )


__all__ = [
    "OutboxRuntime",
    "build_pet_commands",
    "build_pet_runtime",
    "build_user_commands",
    "build_user_runtime",
    "create_mongo_client",
    "initialize",
]
