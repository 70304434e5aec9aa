"""
cocart_transform - Response Field Transformation for CoCart API Clients

Formats monetary fields and converts date fields of decoded CoCart /
WooCommerce API responses, keeping `_original_<field>` snapshots of the
values it rewrites.
"""

from cocart_transform.transformation.config import (
    normalize_currency_config,
    normalize_timezone_config,
)
from cocart_transform.transformation.currency import (
    CurrencyFormatter,
    create_currency_formatter,
    default_currency_formatter,
    extract_currency_info,
    process_object_currency,
)
from cocart_transform.transformation.schemas import (
    COMMON_CURRENCY_FIELDS,
    COMMON_DATE_FIELDS,
    DEFAULT_DATE_PATTERN,
    CurrencyFormatterConfig,
    CurrencyInfo,
    TimezoneConversionOptions,
)
from cocart_transform.transformation.timezone import (
    convert_date_timezone,
    format_date_time,
    process_object_dates,
)
from cocart_transform.transformation.transformers import (
    create_currency_transformer,
    create_response_transformer,
    create_timezone_transformer,
)
from cocart_transform.transformation.validators import (
    detect_date_strings,
    is_currency_field,
    is_date_string,
)

__version__ = "1.0.0"

__all__ = [
    "COMMON_CURRENCY_FIELDS",
    "COMMON_DATE_FIELDS",
    "DEFAULT_DATE_PATTERN",
    "CurrencyFormatter",
    "CurrencyFormatterConfig",
    "CurrencyInfo",
    "TimezoneConversionOptions",
    "convert_date_timezone",
    "create_currency_formatter",
    "create_currency_transformer",
    "create_response_transformer",
    "create_timezone_transformer",
    "default_currency_formatter",
    "detect_date_strings",
    "extract_currency_info",
    "format_date_time",
    "is_currency_field",
    "is_date_string",
    "normalize_currency_config",
    "normalize_timezone_config",
    "process_object_currency",
    "process_object_dates",
]
