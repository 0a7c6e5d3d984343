"""MongoDB adapter – aggregate store, outbox store, unit of work.

Uses **motor** (asyncio MongoDB driver). Transactions require a replica set.
"""

from petadoption.adapters.mongodb.aggregate_store import MongoAggregateStore
from petadoption.adapters.mongodb.outbox import MongoOutboxStore
from petadoption.adapters.mongodb.uow import MongoUnitOfWork

__all__ = [
    "MongoAggregateStore",
    "MongoOutboxStore",
    "MongoUnitOfWork",
]
