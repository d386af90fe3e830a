"""
DynamoDB storage adapter built on aioboto3.

Every record lives in a table named after its collection, keyed on ``id``.
Reads use ``scan``/``get_item``, writes ``put_item``/``update_item``/
``delete_item``. DynamoDB numbers come back as ``Decimal`` and refuse Python
floats, so values are converted at this boundary in both directions.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import ClientError

from dynamodel.adapters.abstract import AbstractStorageAdapter, Record
from dynamodel.infrastructure.aws_factory import (
    build_client_kwargs,
    dynamodb_attempts,
    dynamodb_retry,
    get_session,
)
from dynamodel.utils.ids import new_record_id
from dynamodel.utils.logging import get_logger

log = get_logger(__name__)


def to_dynamo(value: Any) -> Any:
    """Convert a Python value into something the DynamoDB resource API accepts."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {key: to_dynamo(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(item) for item in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert DynamoDB values back to plain Python (``Decimal`` -> ``int``/``float``)."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, Mapping):
        return {key: from_dynamo(item) for key, item in value.items()}
    if isinstance(value, (list, set)):
        return [from_dynamo(item) for item in value]
    return value


def build_filter_expression(filters: Optional[Mapping[str, Any]]) -> Optional[ConditionBase]:
    """AND together one equality condition per filter entry; ``None`` when unfiltered."""
    expression: Optional[ConditionBase] = None
    for key, value in (filters or {}).items():
        condition = Attr(key).eq(to_dynamo(value))
        expression = condition if expression is None else expression & condition
    return expression


def build_update_arguments(record_id: str, attributes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build ``update_item`` arguments setting every attribute except the key.

    Placeholders are positional (``#a0``/``:v0``) so attribute names never
    clash with DynamoDB reserved words. The update is guarded so a missing
    item is reported instead of silently created.
    """
    names: Dict[str, str] = {"#pk": "id"}
    values: Dict[str, Any] = {}
    assignments: List[str] = []
    changes = [(key, value) for key, value in attributes.items() if key != "id"]
    for position, (key, value) in enumerate(changes):
        names[f"#a{position}"] = key
        values[f":v{position}"] = to_dynamo(value)
        assignments.append(f"#a{position} = :v{position}")

    arguments: Dict[str, Any] = {
        "Key": {"id": record_id},
        "ConditionExpression": "attribute_exists(#pk)",
        "ExpressionAttributeNames": names,
        "ReturnValues": "ALL_NEW",
    }
    if assignments:
        arguments["UpdateExpression"] = "SET " + ", ".join(assignments)
        arguments["ExpressionAttributeValues"] = values
    return arguments


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class DynamoDBAdapter(AbstractStorageAdapter):
    """
    StorageAdapter backed by DynamoDB tables.

    Parameters
    ----------
    session : aioboto3.Session | None
        Session used to open resources. Defaults to the shared session.
    client_kwargs : dict | None
        Region/credentials/endpoint passed to ``session.resource``. Defaults to
        values derived from settings.
    """

    name: str = "dynamodb"

    def __init__(
        self,
        session: Optional[Any] = None,
        client_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._session = session or get_session()
        self._client_kwargs = client_kwargs if client_kwargs is not None else build_client_kwargs()

    @asynccontextmanager
    async def _resource(self) -> AsyncIterator[Any]:
        async with self._session.resource("dynamodb", **self._client_kwargs) as dynamodb:
            yield dynamodb

    @asynccontextmanager
    async def _table(self, collection: str) -> AsyncIterator[Any]:
        async with self._resource() as dynamodb:
            yield await dynamodb.Table(collection)

    async def create(self, collection: str, attributes: Mapping[str, Any]) -> Record:
        """
        Store ``attributes`` under a fresh id.

        The id is minted once and the put only succeeds for a new key, so a
        retry after a put that reached the table does not store a second copy.
        """
        item = {**dict(attributes), "id": new_record_id(collection)}
        async with self._table(collection) as table:
            async for attempt in dynamodb_attempts():
                with attempt:
                    try:
                        await table.put_item(
                            Item=to_dynamo(item),
                            ConditionExpression="attribute_not_exists(#pk)",
                            ExpressionAttributeNames={"#pk": "id"},
                        )
                    except ClientError as exc:
                        # The key exists only if an earlier attempt stored it.
                        retried = attempt.retry_state.attempt_number > 1
                        if not (retried and _error_code(exc) == "ConditionalCheckFailedException"):
                            raise
        log.debug("Item stored", extra={"collection": collection, "id": item["id"]})
        return item

    @dynamodb_retry
    async def find_all(
        self, collection: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        scan_kwargs: Dict[str, Any] = {}
        expression = build_filter_expression(filters)
        if expression is not None:
            scan_kwargs["FilterExpression"] = expression

        items: List[Record] = []
        pages = 0
        async with self._table(collection) as table:
            while True:
                response = await table.scan(**scan_kwargs)
                pages += 1
                items.extend(from_dynamo(item) for item in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key

        log.debug(
            "Scan complete",
            extra={"collection": collection, "items": len(items), "pages": pages},
        )
        return items

    @dynamodb_retry
    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        async with self._table(collection) as table:
            response = await table.get_item(Key={"id": record_id})
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    @dynamodb_retry
    async def update(
        self, collection: str, record_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Record]:
        arguments = build_update_arguments(record_id, attributes)
        async with self._table(collection) as table:
            try:
                response = await table.update_item(**arguments)
            except ClientError as exc:
                if _error_code(exc) == "ConditionalCheckFailedException":
                    return None
                raise
        log.debug("Item updated", extra={"collection": collection, "id": record_id})
        return from_dynamo(response.get("Attributes"))

    async def destroy(self, collection: str, record_id: str) -> bool:
        """
        Delete one item; True iff it existed and is now gone.

        Existence is read first. A retried delete that finds nothing removed
        the item on an earlier attempt whose response was lost.
        """
        if await self.find_by_id(collection, record_id) is None:
            return False

        async with self._table(collection) as table:
            async for attempt in dynamodb_attempts():
                with attempt:
                    response = await table.delete_item(
                        Key={"id": record_id}, ReturnValues="ALL_OLD"
                    )
        retried = attempt.retry_state.attempt_number > 1
        existed = bool(response.get("Attributes")) or retried
        log.debug(
            "Item deleted",
            extra={"collection": collection, "id": record_id, "existed": existed, "retried": retried},
        )
        return existed

    @dynamodb_retry
    async def create_table(self, definition: Mapping[str, Any]) -> bool:
        """
        Create a table from ``create_table`` arguments and wait until it exists.

        Returns False when the table is already there.
        """
        async with self._resource() as dynamodb:
            try:
                table = await dynamodb.create_table(**definition)
            except ClientError as exc:
                if _error_code(exc) == "ResourceInUseException":
                    log.info("Table already exists", extra={"table": definition["TableName"]})
                    return False
                raise
            await table.wait_until_exists()
        log.info("Table created", extra={"table": definition["TableName"]})
        return True


__all__ = [
    "DynamoDBAdapter",
    "build_filter_expression",
    "build_update_arguments",
    "from_dynamo",
    "to_dynamo",
]
