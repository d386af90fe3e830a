"""
Runtime model produced by ``ModelBuilder.seal()``.

Orchestrates create/update/destroy through the callback and validation
pipelines before delegating to the storage adapter, and resolves declared
associations on retrieval. Every step of one operation completes before the
next begins; the sealed schema is the only state shared between calls.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional

from dynamodel.adapters.abstract import StorageAdapter
from dynamodel.errors import NotFoundError, ValidationError
from dynamodel.models.callbacks import run_callbacks
from dynamodel.models.schema import (
    Association,
    AssociationType,
    Callback,
    CallbackEvent,
    IndexDefinition,
    ModelSchema,
    Record,
    ValidationRule,
)
from dynamodel.models.validation import validate_record
from dynamodel.utils.ids import utc_timestamp
from dynamodel.utils.logging import get_logger

log = get_logger(__name__)


class Model:
    """
    CRUD and association operations over one collection.

    Instances are created by ``ModelBuilder.seal()``; the schema cannot be
    changed afterwards and the ``get_*`` accessors hand out copies.
    """

    def __init__(self, schema: ModelSchema, adapter: StorageAdapter) -> None:
        self._schema = schema
        self._adapter = adapter

    def __repr__(self) -> str:
        return f"Model(table_name={self._schema.table_name!r})"

    @property
    def table_name(self) -> str:
        return self._schema.table_name

    @property
    def schema(self) -> ModelSchema:
        return self._schema

    async def _run(self, event: CallbackEvent, record: Record) -> None:
        await run_callbacks(event, self._schema.callbacks.get(event, ()), record)

    def _validate(self, record: Mapping[str, Any], only_present: bool = False) -> None:
        errors = validate_record(self._schema.validations, record, only_present=only_present)
        if errors:
            raise ValidationError(errors)

    async def create(self, record: Record) -> Record:
        """
        Validate and persist a new record.

        Runs before_create and before_save on ``record`` (which callbacks may
        mutate), validates it, stamps ``created_at``/``updated_at``, stores it
        and runs after_create and after_save on the stored result.

        Raises
        ------
        ValidationError
            A rule failed, or a callback halted (``CallbackHaltedError``).
        """
        await self._run(CallbackEvent.BEFORE_CREATE, record)
        await self._run(CallbackEvent.BEFORE_SAVE, record)
        self._validate(record)

        now = utc_timestamp()
        record["created_at"] = now
        record["updated_at"] = now
        result = await self._adapter.create(self.table_name, record)
        log.debug("Record created", extra={"collection": self.table_name, "id": result.get("id")})

        await self._run(CallbackEvent.AFTER_CREATE, result)
        await self._run(CallbackEvent.AFTER_SAVE, result)
        return result

    async def update(self, record_id: str, attributes: Record) -> Record:
        """
        Validate and merge ``attributes`` into an existing record.

        Only the submitted attributes are validated, so a partial update is
        checked against the rules of the fields it carries.

        Raises
        ------
        ValidationError
            A rule failed, or a callback halted.
        NotFoundError
            The adapter has no record with ``record_id``.
        """
        await self._run(CallbackEvent.BEFORE_UPDATE, attributes)
        await self._run(CallbackEvent.BEFORE_SAVE, attributes)
        self._validate(attributes, only_present=True)

        attributes["updated_at"] = utc_timestamp()
        result = await self._adapter.update(self.table_name, record_id, attributes)
        if result is None:
            raise NotFoundError(self.table_name, record_id)
        log.debug("Record updated", extra={"collection": self.table_name, "id": record_id})

        await self._run(CallbackEvent.AFTER_UPDATE, result)
        await self._run(CallbackEvent.AFTER_SAVE, result)
        return result

    async def destroy(self, record_id: str) -> bool:
        """
        Delete a record, running before_destroy/after_destroy on the fetched copy.

        A halt raised by an after_destroy callback does not restore the record.
        """
        record = await self.find_by_id(record_id)
        await self._run(CallbackEvent.BEFORE_DESTROY, record)

        deleted = await self._adapter.destroy(self.table_name, record_id)
        log.debug(
            "Record destroyed",
            extra={"collection": self.table_name, "id": record_id, "deleted": deleted},
        )

        await self._run(CallbackEvent.AFTER_DESTROY, record)
        return deleted

    async def find_by_id(self, record_id: str) -> Record:
        """Fetch one record with its associations loaded; NotFoundError when absent."""
        record = await self._adapter.find_by_id(self.table_name, record_id)
        if record is None:
            raise NotFoundError(self.table_name, record_id)
        return await self.load_associations(record)

    async def find_all(self, params: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """Scan the collection. Associations are not loaded."""
        return await self._adapter.find_all(self.table_name, params)

    async def where(self, conditions: Mapping[str, Any]) -> List[Record]:
        """Exact-match query with associations loaded on every result, in adapter order."""
        records = await self._adapter.find_all(self.table_name, conditions)
        tasks = [asyncio.ensure_future(self.load_associations(record)) for record in records]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # gather leaves the siblings of a failed load running.
            for task in tasks:
                task.cancel()
            raise

    async def load_associations(self, record: Record) -> Record:
        """Populate ``record[name]`` for every declared association, one at a time."""
        for name, association in self._schema.associations.items():
            foreign_key = self._schema.foreign_key_for(name, association)
            if association.type is AssociationType.HAS_MANY:
                record[name] = await self._load_has_many(record, association, foreign_key)
            elif association.type is AssociationType.BELONGS_TO:
                record[name] = await self._load_belongs_to(record, association, foreign_key)
            elif association.type is AssociationType.HAS_ONE:
                record[name] = await self._load_has_one(record, association, foreign_key)
        return record

    async def _load_has_many(
        self, record: Record, association: Association, foreign_key: str
    ) -> List[Record]:
        return await self._adapter.find_all(
            association.target_collection, {foreign_key: record.get("id")}
        )

    async def _load_belongs_to(
        self, record: Record, association: Association, foreign_key: str
    ) -> Optional[Record]:
        owner_id = record.get(foreign_key)
        if owner_id is None:
            return None
        return await self._adapter.find_by_id(association.target_collection, owner_id)

    async def _load_has_one(
        self, record: Record, association: Association, foreign_key: str
    ) -> Optional[Record]:
        results = await self._adapter.find_all(
            association.target_collection, {foreign_key: record.get("id")}
        )
        return results[0] if results else None

    def get_fields(self) -> Dict[str, str]:
        return dict(self._schema.fields)

    def get_indexes(self) -> List[IndexDefinition]:
        return list(self._schema.indexes)

    def get_validations(self) -> Dict[str, List[ValidationRule]]:
        return {name: list(rules) for name, rules in self._schema.validations.items()}

    def get_callbacks(self) -> Dict[CallbackEvent, List[Callback]]:
        return {event: list(self._schema.callbacks.get(event, ())) for event in CallbackEvent}

    def get_associations(self) -> Dict[str, Association]:
        return dict(self._schema.associations)


__all__ = ["Model"]
