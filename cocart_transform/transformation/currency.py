"""
Currency Formatting - Response Currency Pass

Pure functions that format monetary fields of a decoded API response
using the currency settings the store sends with it. Amounts arrive in
the smallest currency unit (e.g. cents) and are rendered in major units
with the store's separators and symbol placement.

Nothing here raises for bad data: a value that cannot be formatted is
returned as it came in.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional, Union

from .config import CurrencyOptions, normalize_currency_config
from .schemas import (
    ORIGINAL_PREFIX,
    CurrencyFormatterConfig,
    CurrencyInfo,
    FieldResult,
)
from .validators import is_currency_field, is_preserved_field, to_decimal

logger = logging.getLogger(__name__)

# Response locations probed for a currency object, in priority order
CURRENCY_INFO_PATHS = [
    ("currency",),
    ("cart", "currency"),
    ("data", "currency"),
    ("store_info", "currency"),
]

REQUIRED_CURRENCY_FIELDS = [
    "currency_code",
    "currency_symbol",
    "currency_minor_unit",
    "currency_decimal_separator",
    "currency_thousand_separator",
]

CurrencyInfoLike = Union[CurrencyInfo, Mapping[str, Any]]


def _group_number(amount: Decimal, info: CurrencyInfo) -> str:
    """Render a major-unit amount with the store's separators"""
    minor_unit = info.currency_minor_unit
    quantum = Decimal(1).scaleb(-minor_unit)
    rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)

    # Python renders ',' for groups and '.' for decimals; swap in the store's
    plain = f"{rounded:,.{minor_unit}f}"
    integer_part, _, fraction_part = plain.partition(".")
    grouped = integer_part.replace(",", info.currency_thousand_separator)

    if not fraction_part:
        return grouped
    return f"{grouped}{info.currency_decimal_separator}{fraction_part}"


def _apply_symbol(number: str, info: CurrencyInfo) -> str:
    prefix = info.currency_prefix
    suffix = info.currency_suffix

    if prefix and suffix:
        return f"{prefix}{number}{suffix}"
    if prefix:
        return f"{prefix}{number}"
    if suffix:
        return f"{number}{suffix}"

    # Default to symbol on left if position not specified
    return f"{info.currency_symbol}{number}"


def _simple_format(amount: Decimal, info: CurrencyInfo) -> str:
    """Last-resort rendering: symbol plus fixed decimals"""
    try:
        return f"{info.currency_symbol}{float(amount):.{info.currency_minor_unit}f}"
    except (ArithmeticError, ValueError, OverflowError):
        return f"{info.currency_symbol}{amount}"


def format_currency_value(value: Any, info: CurrencyInfo) -> FieldResult:
    """Format one amount, reporting whether formatting happened"""
    amount = to_decimal(value)
    if amount is None:
        return FieldResult.fallback(value)

    # 4599 with minor unit 2 -> 45.99; minor unit 0 leaves it unchanged
    major = amount.scaleb(-info.currency_minor_unit)

    try:
        return FieldResult(_apply_symbol(_group_number(major, info), info), True)
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.warning(f"Currency formatting failed for {value!r}, using fallback: {e}")
        return FieldResult(_simple_format(major, info), True)


def default_currency_formatter(value: Any, currency: CurrencyInfoLike) -> str:
    """
    Default currency formatter for values in the smallest currency unit

    Args:
        value: Amount as number or numeric string
        currency: Currency settings (CurrencyInfo or the response mapping)

    Returns:
        str: Formatted amount, or the value unchanged (as a string) if it
        is not a number
    """
    info = CurrencyInfo.coerce(currency)
    if info is None:
        return str(value)

    return str(format_currency_value(value, info).value)


def format_decimal_value(value: Any, currency: CurrencyInfoLike) -> str:
    """Major-unit amount with separators but without any symbol"""
    info = CurrencyInfo.coerce(currency)
    amount = to_decimal(value)
    if info is None or amount is None:
        return str(value)

    major = amount.scaleb(-info.currency_minor_unit)
    try:
        return _group_number(major, info)
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.warning(f"Decimal formatting failed for {value!r}: {e}")
        return str(major)


class CurrencyFormatter:
    """Formats amounts for display outside of the response pass"""

    def format(self, amount: Any, currency_info: CurrencyInfoLike) -> str:
        return default_currency_formatter(amount, currency_info)

    def format_decimal(self, amount: Any, currency_info: CurrencyInfoLike) -> str:
        return format_decimal_value(amount, currency_info)


def create_currency_formatter() -> CurrencyFormatter:
    return CurrencyFormatter()


def extract_currency_info(response: Any) -> Optional[CurrencyInfo]:
    """
    Extract currency info from a response object

    The first location that yields a currency object wins:
    response.currency, response.cart.currency, response.data.currency,
    response.store_info.currency, then the individual top-level
    currency_* fields (all five required ones must be present).

    Args:
        response: Decoded API response

    Returns:
        CurrencyInfo or None if the response carries no currency info
    """
    if not response or not isinstance(response, Mapping):
        return None

    for path in CURRENCY_INFO_PATHS:
        node: Any = response
        for key in path:
            node = node.get(key) if isinstance(node, Mapping) else None
        if node and isinstance(node, Mapping):
            logger.debug(f"Currency info found at {'.'.join(path)}")
            return CurrencyInfo.from_mapping(node)

    if all(field in response for field in REQUIRED_CURRENCY_FIELDS):
        logger.debug("Currency info rebuilt from top-level currency_* fields")
        return CurrencyInfo.from_mapping(response)

    return None


def _format_field(value: Any, config: CurrencyFormatterConfig, info: CurrencyInfo) -> str:
    if config.format_function is not None:
        try:
            formatted = config.format_function(value, info)
        except Exception as e:
            logger.warning(f"Custom currency formatter failed for {value!r}: {e}")
            formatted = None
        if formatted is not None:
            return str(formatted)

    return str(format_currency_value(value, info).value)


def process_object_currency(
    obj: Any,
    config: Union[CurrencyFormatterConfig, CurrencyOptions],
    currency_info: Optional[CurrencyInfoLike] = None,
) -> Any:
    """
    Format all currency fields of an object, recursively

    The input is not modified; objects and lists along the way are copied.

    Args:
        obj: Object or list to process
        config: Currency formatter configuration (raw options are normalized;
            a disabled config leaves obj untouched)
        currency_info: Currency settings used for formatting

    Returns:
        Processed copy, or obj itself when there is nothing to do
    """
    if not isinstance(config, CurrencyFormatterConfig):
        config = normalize_currency_config(config)

    info = CurrencyInfo.coerce(currency_info)
    if not obj or not isinstance(obj, (dict, list)) or info is None:
        return obj

    if not config.enabled:
        return obj

    return _walk(obj, config, info, config.currency_fields)


def _walk(obj: Any, config: CurrencyFormatterConfig, info: CurrencyInfo, fields) -> Any:
    if isinstance(obj, list):
        return [
            _walk(item, config, info, fields) if isinstance(item, (dict, list)) else item
            for item in obj
        ]

    result = dict(obj)

    for key, value in obj.items():
        # Never touch snapshots or fields that already hold display values
        if is_preserved_field(key):
            continue

        if is_currency_field(key, fields) and to_decimal(value) is not None:
            if config.preserve_original:
                result[f"{ORIGINAL_PREFIX}{key}"] = value
            result[key] = _format_field(value, config, info)
        elif isinstance(value, (dict, list)):
            result[key] = _walk(value, config, info, fields)

    return result
