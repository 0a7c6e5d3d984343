"""MongoDB adapter – MongoAggregateStore generic base."""

from __future__ import annotations

from abc import abstractmethod
from datetime import timedelta
from typing import Any, Callable, ClassVar, Generic

from pymongo.errors import DuplicateKeyError, PyMongoError

from petadoption.adapters.mongodb.uow import MongoUnitOfWork
from petadoption.kernel.ddd import AggregateStore, UnitOfWork
from petadoption.kernel.ddd.repository import TAggregate
from petadoption.kernel.errors import ConcurrencyConflictError, NotFoundError, StorageError
from petadoption.kernel.messaging import OutboxRecord, OutboxStore
from petadoption.kernel.time import Clock, SystemClock
from petadoption.kernel.types import EntityId
from petadoption.observability.logging import get_logger

logger = get_logger(__name__)


class MongoAggregateStore(AggregateStore[TAggregate], Generic[TAggregate]):
    """Optimistic-concurrency aggregate store with a transactional outbox.

    Subclasses implement :meth:`_to_document` / :meth:`_from_document`; the
    base owns the ``_id`` and ``version`` keys.

    Save protocol, all inside one :class:`MongoUnitOfWork`:

    1. new aggregate → ``insert_one`` (an existing ``_id`` is a conflict);
       existing aggregate → ``replace_one`` filtered on ``(_id, version)``
       writing ``version + 1``; no match is a conflict;
    2. every pending event → one :class:`OutboxRecord`, inserted with the
       same session;
    3. after commit only: in-memory version updated, pending events cleared.

    Usage::

        class PetStore(MongoAggregateStore[Pet]):
            aggregate_type = "Pet"

            def _to_document(self, pet: Pet) -> dict:
                return {"name": pet.name.value, "status": pet.status.value}

            def _from_document(self, doc: dict) -> Pet:
                return Pet(EntityId(doc["_id"]), PetName(doc["name"]), PetStatus(doc["status"]))
    """

    aggregate_type: ClassVar[str] = "Aggregate"

    def __init__(
        self,
        collection: Any,
        outbox: OutboxStore,
        *,
        uow_factory: Callable[[], UnitOfWork] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._col = collection
        self._outbox = outbox
        self._uow_factory = uow_factory or (lambda: MongoUnitOfWork(collection.database.client))
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Abstract serialisation hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _to_document(self, agg: TAggregate) -> dict[str, Any]:
        """Return the BSON-compatible business fields of *agg*."""

    @abstractmethod
    def _from_document(self, doc: dict[str, Any]) -> TAggregate:
        """Reconstruct an aggregate from a MongoDB document."""

    # ------------------------------------------------------------------
    # AggregateStore interface
    # ------------------------------------------------------------------

    async def get(self, id: EntityId) -> TAggregate | None:  # noqa: A002
        try:
            doc = await self._col.find_one({"_id": id.value})
        except PyMongoError as exc:
            raise StorageError(f"{self.aggregate_type}.get", cause=exc) from exc
        if doc is None:
            return None
        agg = self._from_document(doc)
        agg._mark_persisted(doc.get("version", 0))  # noqa: SLF001
        return agg

    async def get_or_raise(self, id: EntityId) -> TAggregate:  # noqa: A002
        agg = await self.get(id)
        if agg is None:
            raise NotFoundError(self.aggregate_type, id.value)
        return agg

    async def save(self, aggregate: TAggregate) -> None:
        aggregate_id = aggregate.id.value
        expected = aggregate.version
        new_version = expected if aggregate.is_new else expected + 1

        doc = self._to_document(aggregate)
        doc["_id"] = aggregate_id
        doc["version"] = new_version

        # Records of one save are stamped 1 ms apart: Mongo keeps millisecond
        # precision and the relay orders by createdAt.
        now = self._clock.now()
        records = [
            OutboxRecord.from_event(event, created_at=now + timedelta(milliseconds=i))
            for i, event in enumerate(aggregate.pending_events)
        ]

        try:
            async with self._uow_factory() as uow:
                if aggregate.is_new:
                    await self._insert(doc, expected, uow.session)
                else:
                    result = await self._col.replace_one(
                        {"_id": aggregate_id, "version": expected}, doc, session=uow.session
                    )
                    if result.matched_count == 0:
                        raise ConcurrencyConflictError(self.aggregate_type, aggregate_id, expected)
                await self._outbox.add_many(records, session=uow.session)
        except ConcurrencyConflictError:
            logger.warning(
                "aggregate.concurrency_conflict",
                aggregate_type=self.aggregate_type,
                aggregate_id=aggregate_id,
                expected_version=expected,
            )
            raise
        except PyMongoError as exc:
            raise StorageError(f"{self.aggregate_type}.save", cause=exc) from exc

        aggregate._mark_persisted(new_version)  # noqa: SLF001
        logger.debug(
            "aggregate.saved",
            aggregate_type=self.aggregate_type,
            aggregate_id=aggregate_id,
            version=new_version,
            outbox_records=len(records),
        )

    async def _insert(self, doc: dict[str, Any], expected: int, session: Any) -> None:
        try:
            await self._col.insert_one(doc, session=session)
        except DuplicateKeyError as exc:
            raise ConcurrencyConflictError(
                self.aggregate_type, doc["_id"], expected, cause=exc
            ) from exc


__all__ = ["MongoAggregateStore"]
