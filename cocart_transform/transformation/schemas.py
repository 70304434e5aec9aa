"""
Transformation Layer Schemas

Data types and defaults shared by the currency and timezone passes.
CurrencyInfo is read from the response; the two config records are built
from caller input by the normalizers in config.py.
"""

import re
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Pattern

from cocart_transform.coreutils.time import resolve_host_timezone

# Prefix of the sibling key holding an untransformed value
ORIGINAL_PREFIX = "_original_"

# Fields whose name contains this are already display values
FORMATTED_MARKER = "formatted_"

# Common currency fields found in WooCommerce/CoCart responses
COMMON_CURRENCY_FIELDS = [
    "price",
    "regular_price",
    "sale_price",
    "subtotal",
    "total",
    "tax",
    "fee_total",
    "discount_total",
    "shipping_total",
    "total_tax",
    "fee_tax",
    "discount_tax",
    "shipping_tax",
    "line_subtotal",
    "line_total",
    "line_tax",
    "line_subtotal_tax",
    "amount",
    "cost",
]

# Common date fields in WooCommerce/CoCart responses (opt-in, see date_fields)
COMMON_DATE_FIELDS = [
    "date_created",
    "date_modified",
    "date_completed",
    "date_paid",
    "date_added",
    "created_at",
    "updated_at",
    "timestamp",
    "next_payment_date",
    "trial_end_date",
    "end_date",
    "expiry_date",
]

# YYYY-MM-DD, 'T' or space, HH:MM:SS, optional Z or +HH:MM / +HHMM offset
DEFAULT_DATE_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}(T|\s)\d{2}:\d{2}:\d{2}(Z|[+-]\d{2}:?\d{2})?\Z", re.ASCII
)

DEFAULT_STORE_TIMEZONE = "UTC"

# Zone used to read naive date strings and to reinterpret wall clocks
REFERENCE_TIMEZONE = "UTC"

DEFAULT_MINOR_UNIT = 2


def _coerce_minor_unit(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_MINOR_UNIT
    try:
        minor_unit = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MINOR_UNIT
    return max(minor_unit, 0)


def _coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


@dataclass(frozen=True)
class CurrencyInfo:
    """Currency settings sent by the store alongside prices"""

    currency_code: str = ""
    currency_symbol: str = ""
    currency_minor_unit: int = DEFAULT_MINOR_UNIT
    currency_decimal_separator: str = "."
    currency_thousand_separator: str = ","
    currency_prefix: str = ""
    currency_suffix: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CurrencyInfo":
        """Build from the response's currency object, tolerating gaps"""
        return cls(
            currency_code=_coerce_str(data.get("currency_code")),
            currency_symbol=_coerce_str(data.get("currency_symbol")),
            currency_minor_unit=_coerce_minor_unit(
                data.get("currency_minor_unit", DEFAULT_MINOR_UNIT)
            ),
            currency_decimal_separator=_coerce_str(
                data.get("currency_decimal_separator"), "."
            ),
            currency_thousand_separator=_coerce_str(
                data.get("currency_thousand_separator"), ","
            ),
            currency_prefix=_coerce_str(data.get("currency_prefix")),
            currency_suffix=_coerce_str(data.get("currency_suffix")),
        )

    @classmethod
    def coerce(cls, info: Any) -> Optional["CurrencyInfo"]:
        """Accept a CurrencyInfo or a mapping; anything else gives None"""
        if isinstance(info, cls):
            return info
        if isinstance(info, Mapping):
            return cls.from_mapping(info)
        return None

    def to_dict(self) -> dict:
        return asdict(self)


CurrencyFormatFunction = Callable[[Any, CurrencyInfo], Optional[str]]


@dataclass
class CurrencyFormatterConfig:
    """Normalized currency formatting configuration"""

    enabled: bool = False
    auto_format: bool = False
    preserve_original: bool = False
    currency_fields: List[str] = field(
        default_factory=lambda: list(COMMON_CURRENCY_FIELDS)
    )
    format_function: Optional[CurrencyFormatFunction] = None

    def copy(self, **changes) -> "CurrencyFormatterConfig":
        changes.setdefault("currency_fields", list(self.currency_fields))
        return replace(self, **changes)


@dataclass
class TimezoneConversionOptions:
    """Normalized timezone conversion configuration"""

    enabled: bool = False
    store_timezone: str = DEFAULT_STORE_TIMEZONE
    target_timezone: Optional[str] = None
    date_fields: List[str] = field(default_factory=list)
    preserve_original: bool = False
    date_time_formatter: Optional[Callable] = None
    date_pattern: Pattern[str] = DEFAULT_DATE_PATTERN
    timezone_resolver: Callable[[], str] = field(
        default_factory=lambda: resolve_host_timezone, repr=False, compare=False
    )

    def resolved_target_timezone(self) -> str:
        return self.target_timezone or self.timezone_resolver()

    def copy(self, **changes) -> "TimezoneConversionOptions":
        changes.setdefault("date_fields", list(self.date_fields))
        return replace(self, **changes)


class FieldResult(NamedTuple):
    """Outcome of formatting or converting a single field value"""

    value: Any
    converted: bool

    @classmethod
    def fallback(cls, original: Any) -> "FieldResult":
        return cls(original, False)
