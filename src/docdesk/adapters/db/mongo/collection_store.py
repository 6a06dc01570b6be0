"""
MongoDB implementation of CollectionStore.
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from docdesk.application.ports.collection_store import (
    CollectionStore,
    Increment,
    StoreDocument,
)
from docdesk.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _to_store_document(raw: Dict[str, Any]) -> StoreDocument:
    data = dict(raw)
    doc_id = data.pop("_id")
    return StoreDocument(id=str(doc_id), data=data)


def build_update(fields: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Translate a field mapping into a MongoDB update document.

    ``Increment`` markers become ``$inc``; everything else is ``$set``.
    """
    to_set: Dict[str, Any] = {}
    to_inc: Dict[str, int] = {}
    for key, value in fields.items():
        if isinstance(value, Increment):
            to_inc[key] = value.amount
        else:
            to_set[key] = value

    update: Dict[str, Dict[str, Any]] = {}
    if to_set:
        update["$set"] = to_set
    if to_inc:
        update["$inc"] = to_inc
    return update


class MongoCollectionStore(CollectionStore):
    """MongoDB implementation of CollectionStore.

    Documents are keyed by string ``_id``; generated ids are uuid4 hex.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self._db = database

    async def list_all(self, collection: str) -> List[StoreDocument]:
        try:
            docs = await self._db[collection].find({}).to_list(length=None)
        except PyMongoError as e:
            raise DatabaseError(f"Failed to list {collection}: {e}", {"collection": collection}) from e
        return [_to_store_document(doc) for doc in docs]

    async def get_one(self, collection: str, doc_id: str) -> Optional[StoreDocument]:
        try:
            doc = await self._db[collection].find_one({"_id": doc_id})
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to read {collection}/{doc_id}: {e}",
                {"collection": collection, "id": doc_id},
            ) from e
        return _to_store_document(doc) if doc else None

    async def create(
        self, collection: str, data: Mapping[str, Any], doc_id: Optional[str] = None
    ) -> str:
        doc_id = doc_id or uuid.uuid4().hex
        try:
            await self._db[collection].insert_one({**data, "_id": doc_id})
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to create {collection}/{doc_id}: {e}",
                {"collection": collection, "id": doc_id},
            ) from e
        return doc_id

    async def update_fields(
        self, collection: str, doc_id: str, fields: Mapping[str, Any]
    ) -> None:
        update = build_update(fields)
        if not update:
            return
        try:
            result = await self._db[collection].update_one({"_id": doc_id}, update)
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to update {collection}/{doc_id}: {e}",
                {"collection": collection, "id": doc_id},
            ) from e
        if result.matched_count == 0:
            raise DatabaseError(
                f"No document to update at {collection}/{doc_id}",
                {"collection": collection, "id": doc_id},
            )

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._db[collection].delete_one({"_id": doc_id})
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to delete {collection}/{doc_id}: {e}",
                {"collection": collection, "id": doc_id},
            ) from e
