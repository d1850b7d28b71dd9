"""Mapping-style filter documents shared by every store backend.

A filter maps field names to either a plain value (equality) or to an
operator document such as ``{"$in": [...]}`` or ``{"$gte": value}``.
The special ``"$or"`` key holds a list of nested filters.
"""
import operator
from typing import Any, Callable

COMPARISON_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
    "$ne": operator.ne,
}

SUPPORTED_OPERATORS = {*COMPARISON_OPERATORS, "$in", "$icontains"}


def _compare(operator_name: str, value: Any, expected: Any) -> bool:
    if operator_name == "$in":
        return value in expected

    if operator_name == "$icontains":
        return value is not None and str(expected).lower() in str(value).lower()

    if operator_name not in COMPARISON_OPERATORS:
        raise ValueError(f"Unsupported filter operator {operator_name}")

    if value is None:
        return operator_name == "$ne" and expected is not None

    return COMPARISON_OPERATORS[operator_name](value, expected)


def matches(record: Any, filter_: dict | None) -> bool:
    for field, condition in (filter_ or {}).items():
        if field == "$or":
            if not any(matches(record, nested) for nested in condition):
                return False
            continue

        value = getattr(record, field, None)

        if isinstance(condition, dict):
            for operator_name, expected in condition.items():
                if not _compare(operator_name, value, expected):
                    return False
        elif value != condition:
            return False

    return True
