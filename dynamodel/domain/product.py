"""
Product catalogue model.

Defines the ``products`` table: fields, the category index used for
catalogue browsing, field rules and whitespace normalisation on save.
"""
from __future__ import annotations

from typing import Any, Union

from dynamodel.adapters.abstract import Record, StorageAdapter
from dynamodel.models import Model, define_dynamo_model, max_length, min_length, required

PRODUCTS_TABLE = "products"


def non_negative_price(value: Any) -> Union[bool, str]:
    return (
        isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    ) or "Price must be non-negative"


def non_negative_stock(value: Any) -> Union[bool, str]:
    return (
        isinstance(value, int) and not isinstance(value, bool) and value >= 0
    ) or "Stock must be a non-negative integer"


def strip_text_fields(record: Record) -> None:
    for field_name in ("name", "description"):
        if isinstance(record.get(field_name), str):
            record[field_name] = record[field_name].strip()


def define_product_model(adapter: StorageAdapter) -> Model:
    """Seal the product model over ``adapter``."""
    return (
        define_dynamo_model(adapter)
        .set_table_name(PRODUCTS_TABLE)
        .add_field("id", "string")
        .add_field("name", "string")
        .add_field("description", "string")
        .add_field("price", "number")
        .add_field("category", "string")
        .add_field("stock", "number")
        .add_field("created_at", "string")
        .add_field("updated_at", "string")
        .add_index({"name": "CategoryIndex", "hashKey": "category", "rangeKey": "name"})
        .add_validation("name", required, min_length(3), max_length(100))
        .add_validation("description", max_length(1000))
        .add_validation("price", required, non_negative_price)
        .add_validation("category", required)
        .add_validation("stock", non_negative_stock)
        .add_callback("before_save", strip_text_fields)
        .seal()
    )


__all__ = [
    "PRODUCTS_TABLE",
    "define_product_model",
    "non_negative_price",
    "non_negative_stock",
    "strip_text_fields",
]
