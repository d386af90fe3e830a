"""
Map model errors to HTTP status codes for embedding layers.

Kept apart from ``dynamodel.errors`` so the model core never depends on a
transport's vocabulary.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Dict

from dynamodel.errors import ErrorKind, ModelError

STATUS_BY_KIND: Dict[ErrorKind, HTTPStatus] = {
    ErrorKind.CONFIGURATION: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.VALIDATION: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.CALLBACK_HALTED: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
}


def status_code_for(error: ModelError) -> int:
    """Return the HTTP status code for a model error."""
    return int(STATUS_BY_KIND[error.kind])


def reason_for(error: ModelError) -> str:
    """Return the status reason phrase (``"Unprocessable Entity"``, ``"Not Found"``...)."""
    return STATUS_BY_KIND[error.kind].phrase


__all__ = ["STATUS_BY_KIND", "status_code_for", "reason_for"]
