"""
Storage adapters for dynamodel.

Re-exports the adapter interfaces and concrete adapters so downstream code
can import from ``dynamodel.adapters`` directly, plus ``get_adapter`` which
picks the backend named in settings.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from dynamodel.adapters.abstract import AbstractStorageAdapter, Record, StorageAdapter
from dynamodel.adapters.dynamodb import DynamoDBAdapter
from dynamodel.adapters.memory import InMemoryAdapter
from dynamodel.config import Settings, get_settings
from dynamodel.infrastructure.aws_factory import build_client_kwargs


def _adapter_factories(settings: Settings) -> Dict[str, Callable[[], StorageAdapter]]:
    """Registry of available storage backends."""
    return {
        "dynamodb": lambda: DynamoDBAdapter(client_kwargs=build_client_kwargs(settings)),
        "memory": lambda: InMemoryAdapter(),
    }


def get_adapter(settings: Optional[Settings] = None) -> StorageAdapter:
    """Build the storage adapter selected by ``settings.storage_backend``."""
    settings = settings or get_settings()
    factories = _adapter_factories(settings)
    if settings.storage_backend not in factories:
        raise ValueError(
            f"Unknown storage backend '{settings.storage_backend}'. Available: {', '.join(factories)}"
        )
    return factories[settings.storage_backend]()


__all__ = [
    # Abstracts
    "AbstractStorageAdapter",
    "Record",
    "StorageAdapter",
    # Concrete adapters
    "DynamoDBAdapter",
    "InMemoryAdapter",
    "get_adapter",
]
