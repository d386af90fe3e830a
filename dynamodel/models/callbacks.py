"""Sequential lifecycle callback pipeline with abort semantics."""

from __future__ import annotations

import inspect
from typing import Sequence

from dynamodel.errors import CallbackHaltedError
from dynamodel.models.schema import Callback, CallbackEvent, Record


async def run_callbacks(event: CallbackEvent, callbacks: Sequence[Callback], record: Record) -> None:
    """
    Run ``callbacks`` for ``event`` against the same mutable ``record``, one at a time.

    A callback halts the pipeline by returning ``False`` (``None`` continues) or by
    raising; either way the remaining callbacks are skipped and a
    ``CallbackHaltedError`` tagged with ``event`` is raised.
    """
    for callback in callbacks:
        try:
            result = callback(record)
            if inspect.isawaitable(result):
                result = await result
        except CallbackHaltedError:
            raise
        except Exception as exc:
            raise CallbackHaltedError(event, f"Error in {event.value} callback: {exc}") from exc
        if result is False:
            raise CallbackHaltedError(event, f"{event.value} callback halted the operation")


__all__ = ["run_callbacks"]
