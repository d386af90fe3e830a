"""
Schema definitions accumulated by ``ModelBuilder`` and frozen at seal time.

``IndexDefinition`` and ``Association`` are small immutable pydantic models;
``ModelSchema`` is the sealed, read-only view the runtime ``Model`` closes over.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field

Record = Dict[str, Any]
ValidationRule = Callable[[Any], Union[bool, str]]
Callback = Callable[[Record], Union[bool, None, Awaitable[Optional[bool]]]]


class CallbackEvent(str, Enum):
    """The eight lifecycle points where callbacks run."""

    BEFORE_SAVE = "before_save"
    AFTER_SAVE = "after_save"
    BEFORE_CREATE = "before_create"
    AFTER_CREATE = "after_create"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DESTROY = "before_destroy"
    AFTER_DESTROY = "after_destroy"

    @classmethod
    def _missing_(cls, value: object) -> Optional["CallbackEvent"]:
        # Accept camelCase spellings such as "beforeSave".
        if isinstance(value, str):
            snake = re.sub(r"(?<!^)(?=[A-Z])", "_", value).lower()
            for member in cls:
                if member.value == snake:
                    return member
        return None


class AssociationType(str, Enum):
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"


class IndexDefinition(BaseModel):
    """Secondary index descriptor; descriptive metadata used for provisioning."""

    name: str
    hash_key: str = Field(..., alias="hashKey")
    range_key: Optional[str] = Field(None, alias="rangeKey")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class Association(BaseModel):
    """A declared relationship resolved by secondary queries."""

    type: AssociationType
    target_collection: str
    foreign_key: Optional[str] = None

    model_config = {
        "frozen": True,
    }


def naive_singularize(table_name: str) -> str:
    """Strip the trailing character: ``"users"`` -> ``"user"``. Wrong for irregular plurals."""
    return table_name[:-1]


@dataclass(frozen=True)
class ModelSchema:
    """Sealed schema. Mappings are read-only proxies over private copies."""

    table_name: str
    fields: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    indexes: Tuple[IndexDefinition, ...] = ()
    validations: Mapping[str, Tuple[ValidationRule, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    callbacks: Mapping[CallbackEvent, Tuple[Callback, ...]] = field(
        default_factory=lambda: MappingProxyType({event: () for event in CallbackEvent})
    )
    associations: Mapping[str, Association] = field(default_factory=lambda: MappingProxyType({}))
    singular_name: Optional[str] = None

    @property
    def owner_foreign_key(self) -> str:
        """Default foreign key other collections use to point at this one (``user_id``)."""
        singular = self.singular_name or naive_singularize(self.table_name)
        return f"{singular}_id"

    def foreign_key_for(self, name: str, association: Association) -> str:
        """Resolve the foreign key of a declared association, applying the defaults."""
        if association.foreign_key:
            return association.foreign_key
        if association.type is AssociationType.BELONGS_TO:
            return f"{name}_id"
        return self.owner_foreign_key


__all__ = [
    "Record",
    "ValidationRule",
    "Callback",
    "CallbackEvent",
    "AssociationType",
    "IndexDefinition",
    "Association",
    "ModelSchema",
    "naive_singularize",
]
