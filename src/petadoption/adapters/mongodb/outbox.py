"""MongoDB adapter – MongoOutboxStore."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pymongo.errors import PyMongoError

from petadoption.kernel.errors import StorageError
from petadoption.kernel.messaging import MAX_RETRY_COUNT, OutboxRecord, OutboxStore
from petadoption.kernel.time import Clock, SystemClock


class MongoOutboxStore(OutboxStore):
    """MongoDB-backed transactional outbox.

    Documents live in the ``outbox_events`` collection with the keys
    ``_id, eventType, eventData, createdAt, processedAt, isProcessed,
    retryCount, lastError``.  Records are never removed: there is no TTL
    index, exhausted records stay for operator inspection.
    """

    COLLECTION_NAME = "outbox_events"

    def __init__(
        self,
        collection: Any,
        *,
        max_retries: int = MAX_RETRY_COUNT,
        clock: Clock | None = None,
    ) -> None:
        self._col = collection
        self._max_retries = max_retries
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Index management
    # ------------------------------------------------------------------

    @classmethod
    async def create_indexes(cls, collection: Any) -> None:
        """Create the relay query index.  Safe to call repeatedly."""
        await collection.create_index(
            [("isProcessed", 1), ("retryCount", 1), ("createdAt", 1)],
            name="idx_outbox_pending",
        )

    # ------------------------------------------------------------------
    # OutboxStore interface
    # ------------------------------------------------------------------

    async def add(self, record: OutboxRecord, *, session: Any = None) -> None:
        try:
            await self._col.insert_one(self._to_doc(record), session=session)
        except PyMongoError as exc:
            raise StorageError("outbox.add", cause=exc) from exc

    async def add_many(self, records: list[OutboxRecord], *, session: Any = None) -> None:
        if not records:
            return
        try:
            await self._col.insert_many(
                [self._to_doc(r) for r in records], ordered=True, session=session
            )
        except PyMongoError as exc:
            raise StorageError("outbox.add_many", cause=exc) from exc

    async def get_pending(self, batch_size: int = 100) -> list[OutboxRecord]:
        # limit(0) means "no limit" to MongoDB.
        if batch_size <= 0:
            return []
        try:
            cursor = (
                self._col.find(
                    {"isProcessed": False, "retryCount": {"$lt": self._max_retries}}
                )
                .sort("createdAt", 1)
                .limit(batch_size)
            )
            return [self._from_doc(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("outbox.get_pending", cause=exc) from exc

    async def mark_processed(self, record_id: str) -> None:
        # Filtering on isProcessed keeps the first processedAt on repeat calls.
        try:
            await self._col.update_one(
                {"_id": record_id, "isProcessed": False},
                {"$set": {"isProcessed": True, "processedAt": self._clock.now()}},
            )
        except PyMongoError as exc:
            raise StorageError("outbox.mark_processed", cause=exc) from exc

    async def mark_failed(self, record_id: str, error: str) -> None:
        try:
            await self._col.update_one(
                {"_id": record_id, "isProcessed": False},
                {"$inc": {"retryCount": 1}, "$set": {"lastError": error}},
            )
        except PyMongoError as exc:
            raise StorageError("outbox.mark_failed", cause=exc) from exc

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    async def get(self, record_id: str) -> OutboxRecord | None:
        try:
            doc = await self._col.find_one({"_id": record_id})
        except PyMongoError as exc:
            raise StorageError("outbox.get", cause=exc) from exc
        return self._from_doc(doc) if doc is not None else None

    async def count_exhausted(self) -> int:
        """Unprocessed records that reached the retry ceiling."""
        try:
            return await self._col.count_documents(
                {"isProcessed": False, "retryCount": {"$gte": self._max_retries}}
            )
        except PyMongoError as exc:
            raise StorageError("outbox.count_exhausted", cause=exc) from exc

    # ------------------------------------------------------------------
    # (De)serialisation helpers
    # ------------------------------------------------------------------

    def _to_doc(self, record: OutboxRecord) -> dict[str, Any]:
        return {
            "_id": record.id,
            "eventType": record.event_type,
            "eventData": record.event_data,
            "createdAt": record.created_at,
            "processedAt": record.processed_at,
            "isProcessed": record.is_processed,
            "retryCount": record.retry_count,
            "lastError": record.last_error,
        }

    def _from_doc(self, doc: dict[str, Any]) -> OutboxRecord:
        return OutboxRecord(
            id=doc["_id"],
            event_type=doc.get("eventType", ""),
            event_data=doc.get("eventData", ""),
            created_at=doc.get("createdAt", datetime.now(UTC)),
            processed_at=doc.get("processedAt"),
            is_processed=doc.get("isProcessed", False),
            retry_count=doc.get("retryCount", 0),
            last_error=doc.get("lastError"),
        )


__all__ = ["MongoOutboxStore"]
