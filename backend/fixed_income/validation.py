"""
Bond request validation messages

Pydantic enforces the constraints declared on BondParameters. This module
turns pydantic's error list into field-level, human readable messages based
on BOND_FIELD_RULES, grouping every violation found per field.
"""

import math
from typing import Any, Dict, List, Sequence

from config import BOND_FIELD_RULES, frequency_description

NUMBER_ERROR_TYPES = {
    "float_parsing",
    "float_type",
    "int_parsing",
    "int_type",
    "int_from_float",
    "finite_number",
    "bool_type",
}

MINIMUM_ERROR_TYPES = {"greater_than_equal", "greater_than"}
MAXIMUM_ERROR_TYPES = {"less_than_equal", "less_than"}
ALLOWED_ERROR_TYPES = {"enum", "literal_error"}


def _format_bound(value: Any) -> str:
    return f"{value:g}" if isinstance(value, (int, float)) else str(value)


def field_name_from_location(loc: Sequence[Any]) -> str:
    """
    Resolve the request field a pydantic error location points at.

    ('body', 'faceValue') -> 'faceValue'
    ('body', 'face_value') -> 'face_value' (wire names are never translated)
    ('body',) or ('body', 12) -> 'body' (whole payload / JSON decode position)
    """
    parts = [p for p in loc if p != "body"]
    if not parts or not isinstance(parts[0], str):
        return "body"
    return parts[0]


def message_for(field: str, error: Dict[str, Any]) -> str:
    """Human readable message for one pydantic error on a field"""
    error_type = error.get("type", "")
    rule = BOND_FIELD_RULES.get(field)

    if rule is None:
        if error_type == "extra_forbidden":
            return f"property {field} should not exist"
        if field == "body":
            if error_type == "json_invalid":
                return "Request body must be valid JSON"
            return "Request body must be a JSON object"
        return error.get("msg", "Invalid value")

    label = rule["label"]

    if error_type == "missing":
        return f"{label} is required"

    if error_type in ALLOWED_ERROR_TYPES and rule.get("allowed"):
        return f"{label} must be {frequency_description()}"

    if error_type in NUMBER_ERROR_TYPES:
        return f"{label} must be a number"

    if error_type in MINIMUM_ERROR_TYPES:
        unit = rule.get("unit", "")
        return f"{label} must be at least {_format_bound(rule['minimum'])}{unit}"

    if error_type in MAXIMUM_ERROR_TYPES:
        unit = rule.get("maximum_unit", rule.get("unit", ""))
        return f"{label} cannot exceed {_format_bound(rule['maximum'])}{unit}"

    return error.get("msg", f"{label} is invalid")


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, str)):
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def messages_for(field: str, error: Dict[str, Any]) -> List[str]:
    """
    All messages for one pydantic error on a field.

    An allowed-set violation whose input is not a number also reports the
    number message first ("monthly" -> must be a number, must be 1, 2, ...).
    """
    messages = []
    rule = BOND_FIELD_RULES.get(field)
    if (
        rule is not None
        and error.get("type") in ALLOWED_ERROR_TYPES
        and "input" in error
        and not _is_numeric(error["input"])
    ):
        messages.append(f"{rule['label']} must be a number")
    messages.append(message_for(field, error))
    return messages


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group pydantic errors into [{"field": ..., "constraints": [...]}, ...].

    Fields keep the order in which their first error appeared; duplicate
    messages for the same field are collapsed.
    """
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        field = field_name_from_location(error.get("loc", ()))
        messages = grouped.setdefault(field, [])
        for message in messages_for(field, error):
            if message not in messages:
                messages.append(message)

    return [{"field": field, "constraints": messages} for field, messages in grouped.items()]
