"""
AWS connection factory utilities for dynamodel.

Centralizes the aioboto3 session, the client/resource keyword arguments
derived from settings (region, optional static credentials, optional
LocalStack endpoint) and the retry policy applied to every DynamoDB call.

Transient failures (throttling, dropped connections) are retried with
exponential backoff using tenacity; everything else surfaces immediately.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional

import aioboto3
from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from tenacity import AsyncRetrying, retry, retry_if_exception, stop_after_attempt, wait_exponential

from dynamodel.config import Settings, get_settings

TRANSIENT_ERROR_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
        "InternalServerError",
        "ServiceUnavailable",
    }
)


def build_client_kwargs(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Build kwargs suitable for ``session.resource("dynamodb", ...)``.

    Parameters
    ----------
    settings : Settings | None
        Settings to read from. Defaults to the cached application settings.

    Returns
    -------
    Dict[str, Any]
        ``region_name`` plus credentials and ``endpoint_url`` when configured.
    """
    settings = settings or get_settings()
    kwargs: Dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_access_key_id:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.dynamodb_endpoint_url:
        kwargs["endpoint_url"] = settings.dynamodb_endpoint_url
    return kwargs


class SessionManager:
    """
    Thread-safe singleton holding the shared aioboto3 session.

    Sessions are cheap but not free (credential resolution); resources and
    clients are opened per call from the shared session.
    """

    _instance: Optional["SessionManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "SessionManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._session = None
            return cls._instance

    def get_session(self) -> aioboto3.Session:
        """Get or create the shared session."""
        with self._lock:
            if self._session is None:
                self._session = aioboto3.Session()
            return self._session

    def reset(self) -> None:
        """Forget the shared session (tests, credential rotation)."""
        with self._lock:
            self._session = None


def get_session() -> aioboto3.Session:
    """Return the process-wide aioboto3 session via SessionManager."""
    return SessionManager().get_session()


def is_transient_error(exc: BaseException) -> bool:
    """Whether ``exc`` is worth retrying (throttling or a dropped connection)."""
    if isinstance(exc, (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError)):
        return True
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") in TRANSIENT_ERROR_CODES
    return False


# Up to 3 attempts with exponential backoff for transient DynamoDB errors.
DYNAMODB_RETRY_POLICY: Dict[str, Any] = {
    "stop": stop_after_attempt(3),
    "wait": wait_exponential(multiplier=1, min=1, max=10),
    "retry": retry_if_exception(is_transient_error),
    "reraise": True,
}

dynamodb_retry = retry(**DYNAMODB_RETRY_POLICY)


def dynamodb_attempts() -> AsyncRetrying:
    """
    Attempt iterator for writes that must know whether they were retried.

    Usage:
        async for attempt in dynamodb_attempts():
            with attempt:
                ...
    """
    return AsyncRetrying(**DYNAMODB_RETRY_POLICY)


__all__ = [
    "DYNAMODB_RETRY_POLICY",
    "TRANSIENT_ERROR_CODES",
    "SessionManager",
    "build_client_kwargs",
    "dynamodb_attempts",
    "dynamodb_retry",
    "get_session",
    "is_transient_error",
]
