"""Record identifier and timestamp helpers shared by the storage adapters and models."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_record_id(collection: str) -> str:
    """
    Build a unique record id prefixed with the collection's first three letters.

    ``new_record_id("products")`` -> ``"pro_3f0c..."``
    """
    prefix = collection[:3].lower()
    return f"{prefix}_{uuid4().hex}"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["new_record_id", "utc_timestamp"]
