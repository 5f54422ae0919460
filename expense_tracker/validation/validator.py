"""
Input Validation

Pure checks on inbound user and expense fields. Every function returns an
error message for the first rule that fails, or None when the input is
acceptable. Nothing here touches storage or raises.

Rules are checked in a fixed order and the first failure wins, so callers
always get a single, specific message.
"""

from numbers import Real
from typing import Any, Optional

from pydantic import ValidationError

from expense_tracker.models.expense import ExpenseCategory


DESCRIPTION_REQUIRED = "Description is required and must be a string."
CATEGORY_INVALID = (
    f"Category must be one of: {', '.join(ExpenseCategory.values())}."
)
USER_ID_NOT_POSITIVE = "User ID must be a positive number."
SUM_NOT_POSITIVE = "Sum must be a positive number."

ALL_USER_FIELDS_REQUIRED = "All fields are required."

USER_ID_PARAM_INVALID = "Valid user ID is required."
YEAR_INVALID = "Valid year is required."
MONTH_INVALID = "Month must be between 1 and 12."


def _is_positive_number(value: Any) -> bool:
    """True for real numbers above zero. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return value > 0


def parse_int(value: Any) -> Optional[int]:
    """
    Coerce a numeric-looking value to int.

    Accepts ints, integral floats and strings holding an integer
    (e.g. "2025", " 7 ", "12.0"). Returns None for anything else.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def describe_validation_error(exc: ValidationError) -> str:
    """Turn the first error of a pydantic ValidationError into one message."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def validate_expense_input(
    description: Any,
    category: Any,
    userid: Any,
    sum: Any,
) -> Optional[str]:
    """
    Check the fields of a new expense.

    Order: description, category, userid, sum.
    """
    if not isinstance(description, str) or not description.strip():
        return DESCRIPTION_REQUIRED
    if category not in ExpenseCategory.values():
        return CATEGORY_INVALID
    if not _is_positive_number(userid):
        return USER_ID_NOT_POSITIVE
    if not _is_positive_number(sum):
        return SUM_NOT_POSITIVE
    return None


def validate_user_input(
    id: Any,
    first_name: Any,
    last_name: Any,
    birthday: Any,
    marital_status: Any,
) -> Optional[str]:
    """Check the fields of a new user: all present, id a positive integer."""
    if not all([id, first_name, last_name, birthday, marital_status]):
        return ALL_USER_FIELDS_REQUIRED
    user_id = parse_int(id)
    if user_id is None or user_id <= 0:
        return USER_ID_NOT_POSITIVE
    return None


def validate_user_id_param(value: Any) -> Optional[str]:
    """Check a user id taken from a path or query parameter."""
    if parse_int(value) is None:
        return USER_ID_PARAM_INVALID
    return None


def validate_report_query(
    id: Any,
    year: Any,
    month: Any,
    current_year: int,
    min_year: int = 2000,
) -> Optional[str]:
    """
    Check the parameters of a monthly report request.

    ``year`` must fall in [min_year, current_year] and ``month`` in [1, 12].
    """
    if validate_user_id_param(id):
        return USER_ID_PARAM_INVALID

    parsed_year = parse_int(year)
    if parsed_year is None or not min_year <= parsed_year <= current_year:
        return YEAR_INVALID

    parsed_month = parse_int(month)
    if parsed_month is None or not 1 <= parsed_month <= 12:
        return MONTH_INVALID

    return None
