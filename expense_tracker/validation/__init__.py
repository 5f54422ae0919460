"""Input validation package."""

from expense_tracker.validation.validator import (
    describe_validation_error,
    parse_int,
    validate_expense_input,
    validate_report_query,
    validate_user_id_param,
    validate_user_input,
)

__all__ = [
    "describe_validation_error",
    "parse_int",
    "validate_expense_input",
    "validate_report_query",
    "validate_user_id_param",
    "validate_user_input",
]
