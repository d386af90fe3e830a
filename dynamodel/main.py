from __future__ import annotations

import asyncio
import sys
from typing import Any, Awaitable, Dict, List, Mapping, Optional, TypeVar

import typer

from dynamodel.adapters import DynamoDBAdapter, get_adapter
from dynamodel.config import get_settings
from dynamodel.domain.product import define_product_model
from dynamodel.errors import ModelError
from dynamodel.infrastructure.provisioning import table_definition
from dynamodel.models import Model
from dynamodel.reporter import print_error, print_record, print_records
from dynamodel.utils.logging import configure_logging

T = TypeVar("T")

app = typer.Typer(help="dynamodel CLI.")
products_app = typer.Typer(help="Create, inspect and delete products.")
app.add_typer(products_app, name="products")


@app.callback()
def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _product_model() -> Model:
    return define_product_model(get_adapter())


def _run(operation: Awaitable[T]) -> T:
    """Drive one model coroutine; model errors become exit code 1."""
    try:
        return asyncio.run(operation)
    except ModelError as exc:
        print_error(exc)
        raise typer.Exit(code=1) from exc


def _coerce(field_type: str, raw: str) -> Any:
    if field_type == "number":
        try:
            return int(raw)
        except ValueError:
            try:
                return float(raw)
            except ValueError as exc:
                raise typer.BadParameter(f"'{raw}' is not a number") from exc
    if field_type == "boolean":
        return raw.lower() in {"1", "true", "yes", "y"}
    return raw


def _parse_assignments(assignments: Optional[List[str]], fields: Mapping[str, str]) -> Dict[str, Any]:
    """Turn ``key=value`` options into a dict, typed by the model's declared fields."""
    parsed: Dict[str, Any] = {}
    for assignment in assignments or []:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{assignment}'")
        parsed[key] = _coerce(fields.get(key, "string"), raw)
    return parsed


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"backend={settings.storage_backend} region={settings.aws_region} "
        f"endpoint={settings.dynamodb_endpoint_url or 'aws'} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


@app.command("init-tables")
def init_tables() -> None:
    """
    Create the DynamoDB tables declared by the application models.
    """
    adapter = get_adapter()
    if not isinstance(adapter, DynamoDBAdapter):
        typer.echo("Nothing to provision for the memory backend.")
        return

    model = define_product_model(adapter)
    created = _run(adapter.create_table(table_definition(model)))
    status = "created" if created else "already exists"
    typer.echo(f"Table '{model.table_name}' {status}.")


@products_app.command("list")
def list_products(
    where: Optional[List[str]] = typer.Option(
        None,
        "--where",
        "-w",
        help="Exact-match filter as key=value (repeatable). Loads associations.",
    ),
) -> None:
    """
    List products, optionally filtered.
    """
    model = _product_model()
    conditions = _parse_assignments(where, model.get_fields())
    if conditions:
        records = _run(model.where(conditions))
    else:
        records = _run(model.find_all())
    print_records(records, title="Products", columns=list(model.get_fields()))


@products_app.command("show")
def show_product(product_id: str = typer.Argument(..., help="Product id.")) -> None:
    """
    Show one product.
    """
    model = _product_model()
    record = _run(model.find_by_id(product_id))
    print_record(record, title=f"Product {product_id}")


@products_app.command("create")
def create_product(
    name: str = typer.Option(..., "--name", "-n", help="Product name (3-100 chars)."),
    price: float = typer.Option(..., "--price", "-p", help="Unit price (non-negative)."),
    category: str = typer.Option(..., "--category", "-c", help="Catalogue category."),
    stock: int = typer.Option(0, "--stock", "-s", help="Units in stock."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Free text."),
) -> None:
    """
    Create a product.
    """
    model = _product_model()
    record: Dict[str, Any] = {"name": name, "price": price, "category": category, "stock": stock}
    if description is not None:
        record["description"] = description
    created = _run(model.create(record))
    print_record(created, title="Product created")


@products_app.command("update")
def update_product(
    product_id: str = typer.Argument(..., help="Product id."),
    assignments: List[str] = typer.Option(
        ...,
        "--set",
        "-s",
        help="Attribute to change as key=value (repeatable).",
    ),
) -> None:
    """
    Update attributes of a product.
    """
    model = _product_model()
    attributes = _parse_assignments(assignments, model.get_fields())
    updated = _run(model.update(product_id, attributes))
    print_record(updated, title=f"Product {product_id} updated")


@products_app.command("delete")
def delete_product(product_id: str = typer.Argument(..., help="Product id.")) -> None:
    """
    Delete a product.
    """
    model = _product_model()
    deleted = _run(model.destroy(product_id))
    typer.echo(f"Product {product_id} {'deleted' if deleted else 'was already gone'}.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
