"""
Storage adapter interfaces for dynamodel.

Concrete adapters (in-memory, DynamoDB) implement the StorageAdapter protocol
so the runtime model can stay ignorant of the backing key-value store. All
operations address a collection (table) by name and are coroutines.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

Record = Dict[str, Any]


@runtime_checkable
class StorageAdapter(Protocol):
    """
    Capability interface over a key-value store.

    Contract
    --------
    create
        Assign a unique ``id``, store the attributes and return them with the id.
        Must not drop fields.
    find_all
        Exact-match scan. ``None`` (or an empty filter) means unrestricted.
    find_by_id
        Return the record or ``None``; a missing key is not an error.
    update
        Merge ``attributes`` into the existing record and return the full
        updated record, or ``None`` when it does not exist.
    destroy
        ``True`` iff a record existed and was removed.
    """

    async def create(self, collection: str, attributes: Mapping[str, Any]) -> Record:
        ...

    async def find_all(
        self, collection: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        ...

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        ...

    async def update(
        self, collection: str, record_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Record]:
        ...

    async def destroy(self, collection: str, record_id: str) -> bool:
        ...


class AbstractStorageAdapter(abc.ABC):
    """
    Optional ABC helper for class-based adapters.

    Subclasses set ``name`` and implement the five storage coroutines.
    """

    name: str

    @abc.abstractmethod
    async def create(self, collection: str, attributes: Mapping[str, Any]) -> Record:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def find_all(
        self, collection: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def update(
        self, collection: str, record_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def destroy(self, collection: str, record_id: str) -> bool:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = [
    "Record",
    "StorageAdapter",
    "AbstractStorageAdapter",
]
