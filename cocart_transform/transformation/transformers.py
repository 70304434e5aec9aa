"""
Response Transformers - Factories

Build the callables the HTTP layer runs once per decoded response. Each
transformer returns the response unchanged (same object) when its pass
is disabled or has nothing to work with.
"""

import logging
from typing import Any, Callable, List, Optional, Union

from .config import (
    CurrencyOptions,
    TimezoneOptions,
    normalize_currency_config,
    normalize_timezone_config,
)
from .currency import extract_currency_info, process_object_currency
from .schemas import CurrencyFormatterConfig, TimezoneConversionOptions
from .timezone import process_object_dates

logger = logging.getLogger(__name__)

ResponseTransformer = Callable[..., Any]

# Response locations probed for the store timezone, in priority order
STORE_TIMEZONE_PATHS = [
    ("store_info", "timezone"),
    ("meta", "timezone"),
]


def get_store_timezone(response: Any) -> Optional[str]:
    """Store timezone reported by the response itself, if any"""
    if not isinstance(response, dict):
        return None

    for parent_key, key in STORE_TIMEZONE_PATHS:
        parent = response.get(parent_key)
        if isinstance(parent, dict):
            value = parent.get(key)
            if value and isinstance(value, str):
                return value

    return None


def create_currency_transformer(
    config: Union[CurrencyFormatterConfig, CurrencyOptions],
) -> ResponseTransformer:
    """
    Create a response transformer for currency formatting

    Args:
        config: Currency formatter configuration (raw options are normalized)

    Returns:
        Callable taking (response, endpoint=None) and returning the response
    """
    if not isinstance(config, CurrencyFormatterConfig):
        config = normalize_currency_config(config)

    def transform(response: Any, endpoint: Optional[str] = None) -> Any:
        if not config.enabled or not config.auto_format or not response:
            return response

        currency_info = extract_currency_info(response)
        if currency_info is None:
            logger.debug(f"No currency info in response for {endpoint or 'response'}")
            return response

        return process_object_currency(response, config, currency_info)

    return transform


def create_timezone_transformer(
    config: Union[TimezoneConversionOptions, TimezoneOptions],
) -> ResponseTransformer:
    """
    Create a response transformer for timezone conversion

    Args:
        config: Timezone configuration (raw options are normalized)

    Returns:
        Callable taking (response, endpoint=None) and returning the response
    """
    if not isinstance(config, TimezoneConversionOptions):
        config = normalize_timezone_config(config)

    def transform(response: Any, endpoint: Optional[str] = None) -> Any:
        if not config.enabled or not response:
            return response

        store_timezone = get_store_timezone(response)
        if store_timezone:
            logger.debug(f"Using store timezone {store_timezone} from {endpoint or 'response'}")

        return process_object_dates(response, config, store_timezone)

    return transform


def create_response_transformer(
    currency: Union[CurrencyFormatterConfig, CurrencyOptions] = None,
    timezone_conversion: Union[TimezoneConversionOptions, TimezoneOptions] = None,
    timezone_resolver: Optional[Callable[[], str]] = None,
) -> ResponseTransformer:
    """
    Compose both passes: timezone conversion first, then currency formatting

    Args:
        currency: Currency options or bool
        timezone_conversion: Timezone options or bool
        timezone_resolver: Host timezone lookup for the default target zone

    Returns:
        Callable taking (response, endpoint=None) and returning the response
    """
    steps: List[ResponseTransformer] = [
        create_timezone_transformer(
            normalize_timezone_config(timezone_conversion, timezone_resolver)
        ),
        create_currency_transformer(normalize_currency_config(currency)),
    ]

    def transform(response: Any, endpoint: Optional[str] = None) -> Any:
        result = response
        for step in steps:
            result = step(result, endpoint)
        return result

    return transform
