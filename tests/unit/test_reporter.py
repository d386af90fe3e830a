from __future__ import annotations

import io

from rich.console import Console

from dynamodel.errors import CallbackHaltedError, NotFoundError
from dynamodel.reporter import print_error, print_records


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def test_print_error_keeps_bracketed_text_literal() -> None:
    console, buffer = _console()
    error = CallbackHaltedError("before_save", "Error in before_save callback: bad key [bold] in [tags]")

    print_error(error, console=console)

    assert buffer.getvalue().strip() == (
        "422 Unprocessable Entity: Error in before_save callback: bad key [bold] in [tags]"
    )


def test_print_error_falls_back_to_error_text() -> None:
    console, buffer = _console()

    print_error(NotFoundError("products", "pro_1"), console=console)

    assert buffer.getvalue().strip() == "404 Not Found: Not found: products/pro_1"


def test_print_records_empty_and_filled() -> None:
    console, buffer = _console()

    print_records([], title="Products", console=console)
    print_records([{"id": "pro_1", "price": 2.5}], title="Products", columns=["price"], console=console)

    output = buffer.getvalue()
    assert "No products found." in output
    assert "pro_1" in output
    assert "2.50" in output
    assert "1 record(s)" in output
