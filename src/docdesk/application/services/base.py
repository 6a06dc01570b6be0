"""
Shared plumbing for services that sit on top of the collection store.
"""

import logging

from ...core.exceptions import StoreUnavailableError
from ..ports.collection_store import CollectionStore, StoreHandle, StoreUnavailable

logger = logging.getLogger(__name__)


class StoreBackedService:
    """Holds the injected store handle and guards writes against an unavailable store."""

    def __init__(self, store: StoreHandle):
        self._store = store

    @property
    def is_available(self) -> bool:
        return not isinstance(self._store, StoreUnavailable)

    def _require_store(self, operation: str) -> CollectionStore:
        if isinstance(self._store, StoreUnavailable):
            logger.error(f"Document store not initialized. Cannot {operation}.")
            raise StoreUnavailableError(operation, self._store.reason)
        return self._store
