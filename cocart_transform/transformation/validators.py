"""
Field Validators - Classification Predicates

Pure functions deciding which response fields the currency and timezone
passes should touch. Matching is heuristic (field names and string shape);
values that pass a predicate can still fail conversion later, in which
case the original value is kept.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Pattern, Union

from dateutil import parser as date_parser

from .schemas import DEFAULT_DATE_PATTERN, FORMATTED_MARKER, ORIGINAL_PREFIX

logger = logging.getLogger(__name__)


def is_preserved_field(field_name: Any) -> bool:
    """True for `_original_*` snapshots and already formatted fields"""
    name = str(field_name)
    return name.startswith(ORIGINAL_PREFIX) or FORMATTED_MARKER in name


def is_currency_field(field_name: Any, currency_fields: Iterable[str]) -> bool:
    """
    Determine if a field potentially contains a currency value

    Exact membership, a `_<known>` suffix ('shipping_total' for 'total'),
    or a `<known>_` substring ('line_subtotal_tax' for 'subtotal').

    Args:
        field_name: Field name to check
        currency_fields: Known currency field names

    Returns:
        bool: True if the field likely contains a currency value
    """
    name = str(field_name)
    known_fields = [known for known in currency_fields if known]

    if name in known_fields:
        return True

    return any(
        name.endswith(f"_{known}") or f"{known}_" in name for known in known_fields
    )


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a numeric value or numeric string, None if not a finite number"""
    if isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    return number if number.is_finite() else None


def is_numeric_value(value: Any) -> bool:
    """True for numbers and strings that parse as a finite number"""
    return to_decimal(value) is not None


def compile_date_pattern(pattern: Union[str, Pattern[str], None]) -> Pattern[str]:
    """Compile a caller-supplied date pattern, default pattern on failure"""
    if pattern is None:
        return DEFAULT_DATE_PATTERN
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        try:
            return re.compile(pattern)
        except re.error as e:
            logger.warning(f"Invalid date pattern {pattern!r}, using default: {e}")
    return DEFAULT_DATE_PATTERN


def parse_date_string(value: str) -> Optional[datetime]:
    """
    Parse a date string into a datetime

    ISO 8601 first, then a lenient parse for shapes a custom pattern may
    admit. Impossible calendar dates are rejected.

    Returns:
        datetime (naive if the string has no offset) or None
    """
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass

    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def is_date_string(value: Any, pattern: Union[str, Pattern[str], None] = None) -> bool:
    """
    Check if a string is a date string

    The string must match the pattern AND parse to a valid date.

    Args:
        value: Candidate value
        pattern: Pattern to match (defaults to DEFAULT_DATE_PATTERN)

    Returns:
        bool: True if the value is a date string
    """
    if not isinstance(value, str):
        return False

    if not compile_date_pattern(pattern).search(value):
        return False

    return parse_date_string(value) is not None


def detect_date_strings(
    obj: Any, pattern: Union[str, Pattern[str], None] = None
) -> List[str]:
    """
    Detect fields of an object that hold date strings

    Only the object's own keys are scanned; nested values are not.

    Args:
        obj: Object to scan
        pattern: Pattern to match (defaults to DEFAULT_DATE_PATTERN)

    Returns:
        List[str]: Names of the fields containing dates
    """
    if not isinstance(obj, dict):
        return []

    compiled = compile_date_pattern(pattern)
    return [
        key
        for key, value in obj.items()
        if isinstance(value, str) and is_date_string(value, compiled)
    ]
