"""
Infrastructure package for dynamodel.

Centralizes AWS connectivity concerns (session, client kwargs, retry policy)
and table provisioning. Keep this layer focused on I/O and resource
management, decoupled from the model runtime.
"""

from dynamodel.infrastructure.aws_factory import (
    build_client_kwargs,
    dynamodb_retry,
    get_session,
    is_transient_error,
)
from dynamodel.infrastructure.provisioning import table_definition

__all__ = [
    "build_client_kwargs",
    "dynamodb_retry",
    "get_session",
    "is_transient_error",
    "table_definition",
]
