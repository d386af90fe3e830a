"""
Derive DynamoDB ``create_table`` arguments from a sealed model.

The model's declared indexes become global secondary indexes; declared field
types decide the attribute types of every key attribute.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from dynamodel.models.model import Model

_ATTRIBUTE_TYPES = {"number": "N", "binary": "B"}


def _attribute_type(field_type: str) -> str:
    return _ATTRIBUTE_TYPES.get(field_type.lower(), "S")


def _key_schema(hash_key: str, range_key: str | None = None) -> List[Dict[str, str]]:
    schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    if range_key:
        schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
    return schema


def table_definition(model: "Model") -> Dict[str, Any]:
    """
    Build keyword arguments for ``dynamodb.create_table`` describing ``model``'s table.

    The table is keyed on ``id`` and billed per request. Each index is projected
    with ALL attributes.
    """
    fields = model.get_fields()
    key_attributes = ["id"]
    indexes: List[Dict[str, Any]] = []
    for index in model.get_indexes():
        indexes.append(
            {
                "IndexName": index.name,
                "KeySchema": _key_schema(index.hash_key, index.range_key),
                "Projection": {"ProjectionType": "ALL"},
            }
        )
        for attribute in (index.hash_key, index.range_key):
            if attribute and attribute not in key_attributes:
                key_attributes.append(attribute)

    definition: Dict[str, Any] = {
        "TableName": model.table_name,
        "KeySchema": _key_schema("id"),
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": _attribute_type(fields.get(name, "string"))}
            for name in key_attributes
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }
    if indexes:
        definition["GlobalSecondaryIndexes"] = indexes
    return definition


__all__ = ["table_definition"]
