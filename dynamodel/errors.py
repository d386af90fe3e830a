"""
Error taxonomy raised by the model builder and the runtime model.

Every error carries an ``ErrorKind`` so an embedding layer (CLI, HTTP handler)
can map it to its own status vocabulary without importing transport concerns
into the core. See ``dynamodel.http_status`` for the HTTP-flavoured mapping.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Optional


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    CALLBACK_HALTED = "callback_halted"
    NOT_FOUND = "not_found"


class ModelError(Exception):
    """Base class for every error the model layer raises on purpose."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ModelError):
    """Schema could not be sealed (e.g. no table name) or a builder call was malformed."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(ModelError):
    """
    One or more field rules failed.

    ``messages`` keeps the failing rules' messages in field declaration order,
    then rule declaration order.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, messages: Iterable[str], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.messages: List[str] = list(messages)

    def __str__(self) -> str:
        if not self.messages:
            return self.message
        return f"{self.message}: {'; '.join(self.messages)}"


class CallbackHaltedError(ValidationError):
    """
    A lifecycle callback returned ``False`` or raised.

    Subclasses ``ValidationError`` so a halted callback surfaces to callers as
    an unprocessable-entity failure, while ``event`` and ``kind`` keep the
    origin available to anyone who needs to tell the two apart.
    """

    kind = ErrorKind.CALLBACK_HALTED

    def __init__(self, event: Any, message: str) -> None:
        super().__init__([message], message=message)
        self.event = event

    def __str__(self) -> str:
        return self.message


class NotFoundError(ModelError):
    """The addressed record does not exist in the collection."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, collection: str, record_id: Optional[str], message: str = "Not found") -> None:
        super().__init__(message)
        self.collection = collection
        self.record_id = record_id

    def __str__(self) -> str:
        return f"{self.message}: {self.collection}/{self.record_id}"


__all__ = [
    "ErrorKind",
    "ModelError",
    "ConfigurationError",
    "ValidationError",
    "CallbackHaltedError",
    "NotFoundError",
]
