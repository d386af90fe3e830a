"""
Pytest configuration for dynamodel.

Provides fixtures for:
- In-memory storage (plain and call-recording)
- Settings built without reading the process environment or a .env file
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import pytest

from dynamodel.adapters.memory import InMemoryAdapter
from dynamodel.config import Settings, get_settings

_SETTINGS_ENV_VARS = (
    "AWS_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "DYNAMODB_ENDPOINT_URL",
    "STORAGE_BACKEND",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
)


class RecordingAdapter(InMemoryAdapter):
    """
    In-memory adapter that records every call with a snapshot of its arguments.

    ``calls`` holds ``(method, collection, *args)`` tuples in call order.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Tuple[Any, ...]] = []

    def seed(self, collection: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Store ``record`` (which must carry an ``id``) without recording a call."""
        item = copy.deepcopy(dict(record))
        self._collection(collection)[item["id"]] = item
        return item

    def calls_to(self, method: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == method]

    async def create(self, collection: str, attributes: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create", collection, copy.deepcopy(dict(attributes))))
        return await super().create(collection, attributes)

    async def find_all(
        self, collection: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        self.calls.append(("find_all", collection, copy.deepcopy(filters)))
        return await super().find_all(collection, filters)

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("find_by_id", collection, record_id))
        return await super().find_by_id(collection, record_id)

    async def update(
        self, collection: str, record_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        self.calls.append(("update", collection, record_id, copy.deepcopy(dict(attributes))))
        return await super().update(collection, record_id, attributes)

    async def destroy(self, collection: str, record_id: str) -> bool:
        self.calls.append(("destroy", collection, record_id))
        return await super().destroy(collection, record_id)


@pytest.fixture
def memory_adapter() -> InMemoryAdapter:
    return InMemoryAdapter()


@pytest.fixture
def recording_adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove dynamodel env vars and clear the cached settings."""
    for var in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(clean_env: None) -> Settings:
    """
    Settings fixture with test-specific values.

    Never reads a developer's .env file.
    """
    return Settings(
        _env_file=None,
        AWS_REGION="eu-west-1",
        AWS_ACCESS_KEY_ID="test",
        AWS_SECRET_ACCESS_KEY="test",
        DYNAMODB_ENDPOINT_URL="http://localhost:4566",
        STORAGE_BACKEND="memory",
        LOG_LEVEL="DEBUG",
    )
