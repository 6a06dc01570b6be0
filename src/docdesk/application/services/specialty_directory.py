"""
Specialty directory: name lookup and the denormalized doctor count.

Doctors reference specialties by *name*. This module is the only place that
knows how a name maps to a specialty document, and the only place that moves
``doctor_count``. Lookups scan the whole ``specialty`` collection and compare
names case-insensitively on the client; there is no indexed normalized-name
field.
"""

import logging
from datetime import datetime, timezone
from numbers import Number
from typing import Any, Dict, List, Mapping, Optional

from ...core.constants import DEFAULT_SPECIALTY_NAME, SPECIALTY_COLLECTION
from ...domain.entities.specialty import UNKNOWN_SPECIALTY_NAME, Specialty
from ...domain.errors import SpecialtyNotFoundError
from ..ports.collection_store import (
    CollectionStore,
    Increment,
    StoreDocument,
    StoreUnavailable,
)
from .base import StoreBackedService

logger = logging.getLogger(__name__)


def _specialty_from_document(doc: StoreDocument) -> Specialty:
    data = doc.data
    raw_name = data.get("name")
    name = raw_name.strip() if isinstance(raw_name, str) and raw_name.strip() else UNKNOWN_SPECIALTY_NAME
    raw_count = data.get("doctor_count")
    count = int(raw_count) if isinstance(raw_count, Number) and not isinstance(raw_count, bool) else 0
    return Specialty(
        id=doc.id,
        name=name,
        description=data.get("description") or "",
        doctor_count=count,
    )


def _name_matches(doc: StoreDocument, name: str) -> bool:
    stored = doc.data.get("name")
    return isinstance(stored, str) and stored.lower() == name.lower()


class SpecialtyDirectory(StoreBackedService):
    """Resolves specialty names to documents and keeps their doctor counts."""

    async def list_all(self, strict: bool = False) -> List[Specialty]:
        """Every specialty.

        Degrades to an empty list when the store cannot be read, unless
        ``strict`` asks for the failure to propagate.
        """
        if strict:
            store = self._require_store("fetch specialties")
            return [_specialty_from_document(doc) for doc in await store.list_all(SPECIALTY_COLLECTION)]
        if isinstance(self._store, StoreUnavailable):
            logger.error("Document store not initialized. Cannot fetch specialties.")
            return []
        try:
            docs = await self._store.list_all(SPECIALTY_COLLECTION)
        except Exception as e:
            logger.error(f"Error fetching specialties: {e}")
            return []
        return [_specialty_from_document(doc) for doc in docs]

    async def _find_document(self, store: CollectionStore, name: str) -> Optional[StoreDocument]:
        docs = await store.list_all(SPECIALTY_COLLECTION)
        return next((doc for doc in docs if _name_matches(doc, name)), None)

    async def find_by_name(self, name: str) -> Optional[Specialty]:
        """Case-insensitive exact match over the full collection."""
        if isinstance(self._store, StoreUnavailable):
            logger.error("Document store not initialized. Cannot look up specialty.")
            return None
        doc = await self._find_document(self._store, name)
        return _specialty_from_document(doc) if doc else None

    async def get_or_create(self, name: str) -> str:
        """Return the id of the named specialty, creating it with a count of 1.

        An existing specialty is returned untouched; incrementing it is the
        caller's separate step.
        """
        store = self._require_store("get or create specialty")
        existing = await self._find_document(store, name)
        if existing:
            logger.info(f"Found existing specialty: {existing.id}")
            return existing.id

        specialty_id = await store.create(
            SPECIALTY_COLLECTION,
            {
                "name": name,
                "doctor_count": 1,
                "description": "",
                "created_at": datetime.now(timezone.utc),
            },
        )
        logger.info(f"Created new specialty: {specialty_id}")
        return specialty_id

    async def increment(self, name: str) -> None:
        store = self._require_store("increment specialty count")
        existing = await self._find_document(store, name)
        if existing:
            await store.update_fields(
                SPECIALTY_COLLECTION, existing.id, {"doctor_count": Increment(1)}
            )
            logger.info(f"Incremented count for specialty: {name}")
            return

        # A fresh document already starts at 1
        logger.info(f"Specialty not found, creating and setting count to 1: {name}")
        await self.get_or_create(name)

    async def decrement(self, name: str) -> None:
        """Drop one doctor from the named specialty.

        A specialty whose count is 1 or less (or not a number at all) is
        deleted instead of being left at zero. An unknown name is logged and
        ignored.
        """
        store = self._require_store("decrement specialty count")
        existing = await self._find_document(store, name)
        if not existing:
            logger.warning(f"Attempted to decrement count for non-existent specialty: {name}")
            return

        current = await store.get_one(SPECIALTY_COLLECTION, existing.id)
        count = current.data.get("doctor_count") if current else None
        if isinstance(count, Number) and not isinstance(count, bool) and count > 1:
            await store.update_fields(
                SPECIALTY_COLLECTION, existing.id, {"doctor_count": Increment(-1)}
            )
            logger.info(f"Decremented count for specialty: {name}")
        else:
            await store.delete(SPECIALTY_COLLECTION, existing.id)
            logger.info(f"Deleted specialty (count <= 1 or invalid): {name}")

    async def get(self, specialty_id: str) -> Specialty:
        store = self._require_store("fetch specialty")
        doc = await store.get_one(SPECIALTY_COLLECTION, specialty_id)
        if doc is None:
            raise SpecialtyNotFoundError(specialty_id)
        return _specialty_from_document(doc)

    async def add(self, data: Mapping[str, Any]) -> str:
        """Administrative create. New specialties start with no doctors."""
        store = self._require_store("add specialty")
        doc_data: Dict[str, Any] = dict(data)
        doc_data.update(
            name=data.get("name") or DEFAULT_SPECIALTY_NAME,
            description=data.get("description") or "",
            doctor_count=0,
            created_at=datetime.now(timezone.utc),
        )
        doc_data.pop("id", None)
        specialty_id = await store.create(SPECIALTY_COLLECTION, doc_data)
        logger.info(f"Added new specialty with ID: {specialty_id}")
        return specialty_id

    async def update(self, specialty_id: str, fields: Mapping[str, Any]) -> None:
        """Administrative update.

        ``doctor_count`` may be passed here only as a manual correction.
        """
        store = self._require_store("update specialty")
        current = await store.get_one(SPECIALTY_COLLECTION, specialty_id)
        if current is None:
            logger.error(f"Specialty with ID {specialty_id} not found for update.")
            raise SpecialtyNotFoundError(specialty_id)

        to_update = {k: v for k, v in fields.items() if k != "id"}
        to_update["updated_at"] = datetime.now(timezone.utc)
        await store.update_fields(SPECIALTY_COLLECTION, specialty_id, to_update)
        logger.info(f"Updated specialty with ID: {specialty_id}")

    async def remove(self, specialty_id: str) -> None:
        """Administrative delete. Doctors still naming this specialty are left as-is."""
        store = self._require_store("delete specialty")
        current = await store.get_one(SPECIALTY_COLLECTION, specialty_id)
        if current is None:
            logger.warning(f"Attempted to delete non-existent specialty with ID: {specialty_id}")
            return

        await store.delete(SPECIALTY_COLLECTION, specialty_id)
        logger.info(f"Deleted specialty with ID: {specialty_id}")
