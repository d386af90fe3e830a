from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dynamodel.errors import ModelError
from dynamodel.http_status import reason_for, status_code_for


def _format_value(value: Any) -> str:
    if value is None:
        return "[dim]-[/dim]"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, list):
        return f"{len(value)} item(s)"
    if isinstance(value, dict):
        return str(value.get("id", value))
    return str(value)


def _columns_for(records: Sequence[Dict[str, Any]], preferred: Sequence[str]) -> List[str]:
    """Preferred columns first (when any record has them), then the rest in first-seen order."""
    seen: List[str] = []
    for record in records:
        for key in record:
            if key not in seen:
                seen.append(key)
    ordered = [column for column in preferred if column in seen]
    return ordered + [column for column in seen if column not in ordered]


def print_records(
    records: List[Dict[str, Any]],
    title: str,
    columns: Optional[Sequence[str]] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render records as a rich table, one row per record.

    ``columns`` puts the declared fields first; undeclared keys follow.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]No {title.lower()} found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"{len(records)} record(s)",
    )
    keys = _columns_for(records, ["id", *(columns or [])])
    for key in keys:
        if key == "id":
            table.add_column(key, style="cyan", no_wrap=True)
        else:
            table.add_column(key, justify="left")

    for record in records:
        table.add_row(*(_format_value(record.get(key)) for key in keys))

    console.print(table)


def print_record(record: Dict[str, Any], title: str, console: Optional[Console] = None) -> None:
    """Render a single record as a two-column field/value table."""
    console = console or Console()
    table = Table(title=title, box=box.ROUNDED, show_header=True)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in record.items():
        table.add_row(key, _format_value(value))
    console.print(table)


def print_error(error: ModelError, console: Optional[Console] = None) -> None:
    """Report a model error as ``<status> <reason>: <details>``."""
    console = console or Console(stderr=True)
    details = getattr(error, "messages", None) or [str(error)]
    console.print(
        f"[red]{status_code_for(error)} {reason_for(error)}[/red]: " + escape("; ".join(details)),
        highlight=False,
    )


__all__ = ["print_error", "print_record", "print_records"]
