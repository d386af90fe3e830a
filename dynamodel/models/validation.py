"""
Field validation pipeline and the stock validation rules.

A rule is a plain function of the candidate value returning ``True`` when the
value passes or a human-readable message when it fails. Rules run for every
field that has any; all failing messages are collected, nothing is raised.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Pattern, Sequence, Union

from dynamodel.models.schema import ValidationRule


def validate_record(
    validations: Mapping[str, Sequence[ValidationRule]],
    record: Mapping[str, Any],
    only_present: bool = False,
) -> List[str]:
    """
    Evaluate every rule against ``record`` and return the failure messages.

    Parameters
    ----------
    validations : Mapping[str, Sequence[ValidationRule]]
        Field name -> ordered rules.
    record : Mapping[str, Any]
        Candidate record. Missing fields are passed to their rules as ``None``.
    only_present : bool
        Skip fields absent from ``record`` (partial updates).

    Returns
    -------
    List[str]
        Messages in field declaration order, then rule order. Empty means valid.
    """
    errors: List[str] = []
    for field_name, rules in validations.items():
        if only_present and field_name not in record:
            continue
        value = record.get(field_name)
        for rule in rules:
            try:
                result = rule(value)
            except Exception as exc:  # noqa: BLE001 - a broken rule is a failed rule
                errors.append(f"Validation failed for {field_name}: {exc}")
                continue
            if result is True:
                continue
            errors.append(result if isinstance(result, str) else f"Validation failed for {field_name}")
    return errors


def required(value: Any) -> Union[bool, str]:
    """Fail on absent or falsy values (``None``, ``""``, ``0``, ``False``)."""
    return bool(value) or "This field is required"


def min_length(minimum: int) -> ValidationRule:
    def rule(value: Any) -> Union[bool, str]:
        if value is None:
            return True
        return len(value) >= minimum or f"Minimum length is {minimum}"

    return rule


def max_length(maximum: int) -> ValidationRule:
    def rule(value: Any) -> Union[bool, str]:
        if value is None:
            return True
        return len(value) <= maximum or f"Maximum length is {maximum}"

    return rule


def format(pattern: Union[str, Pattern[str]], message: str) -> ValidationRule:  # noqa: A001
    """Require ``value`` to contain a match for ``pattern`` (``re.search`` semantics)."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def rule(value: Any) -> Union[bool, str]:
        if value is None:
            return True
        return compiled.search(str(value)) is not None or message

    return rule


def in_range(
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    message: Optional[str] = None,
) -> ValidationRule:
    """
    Require a numeric value within ``[minimum, maximum]`` (either bound optional).

    Non-numeric values fail; ``None`` passes and is left to ``required``.
    """
    if minimum is None and maximum is None:
        raise ValueError("in_range requires at least one of: minimum, maximum")

    def rule(value: Any) -> Union[bool, str]:
        if value is None:
            return True
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return message or f"Value must be numeric, got {type(value).__name__}"
        if minimum is not None and value < minimum:
            return message or f"Value {value} is less than minimum {minimum}"
        if maximum is not None and value > maximum:
            return message or f"Value {value} exceeds maximum {maximum}"
        return True

    return rule


__all__ = [
    "validate_record",
    "required",
    "min_length",
    "max_length",
    "format",
    "in_range",
]
