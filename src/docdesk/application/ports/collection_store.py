"""
Collection store interface for document data access abstraction.

A generic key-addressed store: every document lives in a named collection
under a string id. Writes become visible eventually; the only atomicity
offered is the per-document numeric ``Increment``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass(frozen=True)
class Increment:
    """Atomic "add N" marker for a numeric field inside ``update_fields``."""

    amount: int = 1


@dataclass
class StoreDocument:
    """A stored document: its id plus the raw field mapping."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)


class CollectionStore(ABC):
    """Abstract async document store."""

    @abstractmethod
    async def list_all(self, collection: str) -> List[StoreDocument]:
        """Return every document in the collection (empty collection -> [])."""
        pass

    @abstractmethod
    async def get_one(self, collection: str, doc_id: str) -> Optional[StoreDocument]:
        """Return the document, or None when it does not exist."""
        pass

    @abstractmethod
    async def create(
        self, collection: str, data: Mapping[str, Any], doc_id: Optional[str] = None
    ) -> str:
        """Write a new document, generating the id when omitted. Returns the id."""
        pass

    @abstractmethod
    async def update_fields(
        self, collection: str, doc_id: str, fields: Mapping[str, Any]
    ) -> None:
        """Merge top-level fields into an existing document.

        ``Increment`` values are applied atomically as numeric additions.
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove the document; no error when it is already absent."""
        pass


@dataclass(frozen=True)
class StoreUnavailable:
    """Stands in for a store that could not be initialized (e.g. missing config)."""

    reason: str = "document store not configured"


StoreHandle = Union[CollectionStore, StoreUnavailable]
