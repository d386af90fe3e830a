"""
In-memory storage adapter.

Keeps collections in plain dictionaries for development and tests. Data is
lost when the process exits. Records are copied on the way in and out so
callers mutating a returned record (e.g. injecting associations) never
change what is stored.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional

from dynamodel.adapters.abstract import AbstractStorageAdapter, Record
from dynamodel.utils.ids import new_record_id
from dynamodel.utils.logging import get_logger

log = get_logger(__name__)


class InMemoryAdapter(AbstractStorageAdapter):
    """Dictionary-backed adapter honouring the StorageAdapter contract."""

    name: str = "memory"

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Record]] = {}

    def _collection(self, collection: str) -> Dict[str, Record]:
        return self._collections.setdefault(collection, {})

    async def create(self, collection: str, attributes: Mapping[str, Any]) -> Record:
        item = {**copy.deepcopy(dict(attributes)), "id": new_record_id(collection)}
        self._collection(collection)[item["id"]] = item
        log.debug("Item stored", extra={"collection": collection, "id": item["id"]})
        return copy.deepcopy(item)

    async def find_all(
        self, collection: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        conditions = dict(filters or {})
        return [
            copy.deepcopy(item)
            for item in self._collection(collection).values()
            if all(key in item and item[key] == value for key, value in conditions.items())
        ]

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        item = self._collection(collection).get(record_id)
        return copy.deepcopy(item) if item is not None else None

    async def update(
        self, collection: str, record_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Record]:
        item = self._collection(collection).get(record_id)
        if item is None:
            return None
        changes = {key: value for key, value in attributes.items() if key != "id"}
        item.update(copy.deepcopy(changes))
        log.debug("Item updated", extra={"collection": collection, "id": record_id})
        return copy.deepcopy(item)

    async def destroy(self, collection: str, record_id: str) -> bool:
        existed = self._collection(collection).pop(record_id, None) is not None
        log.debug(
            "Item deleted", extra={"collection": collection, "id": record_id, "existed": existed}
        )
        return existed

    def clear(self) -> None:
        """Drop every collection."""
        self._collections.clear()


__all__ = ["InMemoryAdapter"]
