"""
dynamodel - a small DynamoDB object mapper.

Models are declared through a fluent builder and sealed into an immutable
runtime object that maps records onto a key-value store:

- Field declarations, secondary-index metadata and per-field validation rules
- Ordered lifecycle callbacks (before/after x save/create/update/destroy) that
  may mutate the record or halt the operation
- has_many / belongs_to / has_one associations resolved on read
- Pluggable storage adapters (DynamoDB via aioboto3, in-memory)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from dynamodel.adapters import (
    AbstractStorageAdapter,
    DynamoDBAdapter,
    InMemoryAdapter,
    StorageAdapter,
    get_adapter,
)
from dynamodel.config import Settings, get_settings
from dynamodel.errors import (
    CallbackHaltedError,
    ConfigurationError,
    ErrorKind,
    ModelError,
    NotFoundError,
    ValidationError,
)
from dynamodel.models import (
    Association,
    AssociationType,
    CallbackEvent,
    IndexDefinition,
    Model,
    ModelBuilder,
    define_dynamo_model,
    format,
    in_range,
    max_length,
    min_length,
    required,
)
from dynamodel.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Models
    "define_dynamo_model",
    "ModelBuilder",
    "Model",
    "Association",
    "AssociationType",
    "CallbackEvent",
    "IndexDefinition",
    # Validation rules
    "required",
    "min_length",
    "max_length",
    "format",
    "in_range",
    # Storage
    "StorageAdapter",
    "AbstractStorageAdapter",
    "DynamoDBAdapter",
    "InMemoryAdapter",
    "get_adapter",
    # Errors
    "ErrorKind",
    "ModelError",
    "ConfigurationError",
    "ValidationError",
    "CallbackHaltedError",
    "NotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
]
