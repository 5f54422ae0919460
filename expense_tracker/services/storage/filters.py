"""Record filter matching shared by the store implementations."""

import operator
from typing import Any, Callable, Optional


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$gte": operator.ge,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$lt": operator.lt,
    "$ne": operator.ne,
    "$in": lambda value, options: value in options,
}


def _is_operator_dict(condition: Any) -> bool:
    return (
        isinstance(condition, dict)
        and bool(condition)
        and all(key.startswith("$") for key in condition)
    )


def _matches_condition(value: Any, condition: Any) -> bool:
    if not _is_operator_dict(condition):
        return value == condition

    for op, operand in condition.items():
        try:
            compare = OPERATORS[op]
        except KeyError:
            raise ValueError(f"Unsupported filter operator: {op}")
        # A missing field only satisfies $ne
        if value is None and op != "$ne":
            return False
        if not compare(value, operand):
            return False
    return True


def matches(record: dict, filter: Optional[dict[str, Any]]) -> bool:
    """Check whether a record satisfies every condition of a filter."""
    if not filter:
        return True
    return all(
        _matches_condition(record.get(field), condition)
        for field, condition in filter.items()
    )
