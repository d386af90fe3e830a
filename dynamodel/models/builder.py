"""
Fluent model builder.

``define_dynamo_model(adapter)`` returns a ``ModelBuilder`` whose methods
accumulate a schema and return the builder for chaining. ``seal()`` checks the
table name, freezes a private copy of the accumulated schema and returns the
runtime ``Model``. Nothing here touches the network.

Usage:
    from dynamodel import define_dynamo_model, required

    User = (
        define_dynamo_model(adapter)
        .set_table_name("users")
        .add_field("name", "string")
        .add_validation("name", required)
        .add_callback("before_save", lambda user: user.update(name=user["name"].strip()))
        .add_has_many("posts", "posts")
        .seal()
    )
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from dynamodel.adapters.abstract import StorageAdapter
from dynamodel.errors import ConfigurationError
from dynamodel.models.model import Model
from dynamodel.models.schema import (
    Association,
    AssociationType,
    Callback,
    CallbackEvent,
    IndexDefinition,
    ModelSchema,
    ValidationRule,
)


class ModelBuilder:
    """Accumulates fields, indexes, validations, callbacks and associations."""

    def __init__(self, adapter: StorageAdapter) -> None:
        self._adapter = adapter
        self._table_name: Optional[str] = None
        self._singular_name: Optional[str] = None
        self._fields: Dict[str, str] = {}
        self._indexes: List[IndexDefinition] = []
        self._validations: Dict[str, List[ValidationRule]] = {}
        self._callbacks: Dict[CallbackEvent, List[Callback]] = {event: [] for event in CallbackEvent}
        self._associations: Dict[str, Association] = {}

    def set_table_name(self, name: str) -> "ModelBuilder":
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Table name must be a non-empty string")
        self._table_name = name
        return self

    def set_singular_name(self, name: str) -> "ModelBuilder":
        """Override the naive singular form used for default foreign keys (``people`` -> ``person``)."""
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Singular name must be a non-empty string")
        self._singular_name = name
        return self

    def add_field(self, name: str, field_type: str) -> "ModelBuilder":
        self._fields[name] = field_type
        return self

    def add_index(self, descriptor: Union[IndexDefinition, Mapping[str, Any]]) -> "ModelBuilder":
        if not isinstance(descriptor, IndexDefinition):
            try:
                descriptor = IndexDefinition.model_validate(dict(descriptor))
            except PydanticValidationError as exc:
                raise ConfigurationError(f"Invalid index descriptor: {exc}") from exc
        self._indexes.append(descriptor)
        return self

    def add_validation(self, field_name: str, *rules: ValidationRule) -> "ModelBuilder":
        self._validations.setdefault(field_name, []).extend(rules)
        return self

    def add_callback(self, event: Union[CallbackEvent, str], callback: Callback) -> "ModelBuilder":
        try:
            lifecycle_event = CallbackEvent(event)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown lifecycle event '{event}'. "
                f"Available: {', '.join(member.value for member in CallbackEvent)}"
            ) from exc
        self._callbacks[lifecycle_event].append(callback)
        return self

    def _add_association(
        self,
        name: str,
        association_type: AssociationType,
        target_collection: str,
        foreign_key: Optional[str],
    ) -> None:
        self._associations[name] = Association(
            type=association_type,
            target_collection=target_collection,
            foreign_key=foreign_key,
        )

    def add_has_many(
        self, name: str, target_collection: str, foreign_key: Optional[str] = None
    ) -> "ModelBuilder":
        self._add_association(name, AssociationType.HAS_MANY, target_collection, foreign_key)
        return self

    def add_belongs_to(
        self, name: str, target_collection: str, foreign_key: Optional[str] = None
    ) -> "ModelBuilder":
        """Register a belongs-to association and declare its foreign key as a string field."""
        self._add_association(name, AssociationType.BELONGS_TO, target_collection, foreign_key)
        self._fields.setdefault(foreign_key or f"{name}_id", "string")
        return self

    def add_has_one(
        self, name: str, target_collection: str, foreign_key: Optional[str] = None
    ) -> "ModelBuilder":
        self._add_association(name, AssociationType.HAS_ONE, target_collection, foreign_key)
        return self

    def seal(self) -> Model:
        """
        Freeze the accumulated schema and return the runtime model.

        Raises
        ------
        ConfigurationError
            When no table name was set.
        """
        if not self._table_name:
            raise ConfigurationError("Table name must be set")

        schema = ModelSchema(
            table_name=self._table_name,
            fields=MappingProxyType(dict(self._fields)),
            indexes=tuple(self._indexes),
            validations=MappingProxyType(
                {name: tuple(rules) for name, rules in self._validations.items()}
            ),
            callbacks=MappingProxyType(
                {event: tuple(callbacks) for event, callbacks in self._callbacks.items()}
            ),
            associations=MappingProxyType(dict(self._associations)),
            singular_name=self._singular_name,
        )
        return Model(schema, self._adapter)


def define_dynamo_model(adapter: StorageAdapter) -> ModelBuilder:
    """Start defining a model persisted through ``adapter``."""
    return ModelBuilder(adapter)


__all__ = ["ModelBuilder", "define_dynamo_model"]
