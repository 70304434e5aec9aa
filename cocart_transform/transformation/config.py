"""
Config Normalizers

Turn caller input (bool, mapping or nothing) into fully populated config
records. Input is never rejected: unknown keys are ignored and values of
the wrong type fall back to the default for that key.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Union

from cocart_transform.coreutils.time import resolve_host_timezone

from .schemas import (
    DEFAULT_DATE_PATTERN,
    DEFAULT_STORE_TIMEZONE,
    CurrencyFormatterConfig,
    TimezoneConversionOptions,
)
from .validators import compile_date_pattern

logger = logging.getLogger(__name__)

CurrencyOptions = Union[bool, Mapping, CurrencyFormatterConfig, None]
TimezoneOptions = Union[bool, Mapping, TimezoneConversionOptions, None]


def _is_str_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _is_optional_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _is_optional_callable(value: Any) -> bool:
    return value is None or callable(value)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


CURRENCY_KEY_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "enabled": _is_bool,
    "auto_format": _is_bool,
    "preserve_original": _is_bool,
    "currency_fields": _is_str_list,
    "format_function": _is_optional_callable,
}

TIMEZONE_KEY_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "enabled": _is_bool,
    "store_timezone": _is_optional_str,
    "target_timezone": _is_optional_str,
    "date_fields": _is_str_list,
    "preserve_original": _is_bool,
    "date_time_formatter": _is_optional_callable,
    "date_pattern": lambda v: True,
}


def _accepted_options(
    options: Mapping, checks: Dict[str, Callable[[Any], bool]], kind: str
) -> Dict[str, Any]:
    """Keep known keys whose values have the expected type"""
    accepted = {}
    for key, value in options.items():
        check = checks.get(key)
        if check is None:
            logger.debug(f"Ignoring unknown {kind} option: {key!r}")
        elif not check(value):
            logger.debug(f"Ignoring invalid {kind} option {key!r}={value!r}")
        else:
            accepted[key] = value
    return accepted


def normalize_currency_config(options: CurrencyOptions = None) -> CurrencyFormatterConfig:
    """
    Normalize currency formatter configuration

    A bool sets enabled, auto_format and preserve_original together. A
    mapping is merged onto the defaults; when it enables formatting without
    naming auto_format / preserve_original, those are switched on too.

    Args:
        options: Caller-provided options or bool

    Returns:
        CurrencyFormatterConfig: Fully populated configuration
    """
    if isinstance(options, CurrencyFormatterConfig):
        return options.copy()

    if isinstance(options, bool):
        return CurrencyFormatterConfig(
            enabled=options, auto_format=options, preserve_original=options
        )

    if isinstance(options, Mapping):
        accepted = _accepted_options(options, CURRENCY_KEY_CHECKS, "currency")
        if "currency_fields" in accepted:
            accepted["currency_fields"] = list(accepted["currency_fields"])

        config = CurrencyFormatterConfig(**accepted)

        # Presence, not value: an explicit False stays False
        if config.enabled:
            if "auto_format" not in accepted:
                config.auto_format = True
            if "preserve_original" not in accepted:
                config.preserve_original = True

        return config

    if options is not None:
        logger.debug(f"Unsupported currency options {options!r}, using defaults")

    return CurrencyFormatterConfig()


def normalize_timezone_config(
    options: TimezoneOptions = None,
    timezone_resolver: Optional[Callable[[], str]] = None,
) -> TimezoneConversionOptions:
    """
    Normalize timezone conversion configuration

    Args:
        options: Caller-provided options or bool
        timezone_resolver: Returns the host timezone used as the default target

    Returns:
        TimezoneConversionOptions: Fully populated configuration
    """
    resolver = timezone_resolver or resolve_host_timezone

    if isinstance(options, TimezoneConversionOptions):
        config = options.copy()
        if timezone_resolver is not None:
            config.timezone_resolver = timezone_resolver
        if not config.target_timezone:
            config.target_timezone = config.timezone_resolver()
        return config

    defaults = {
        "enabled": False,
        "store_timezone": DEFAULT_STORE_TIMEZONE,
        "target_timezone": resolver(),
        "date_fields": [],
        "preserve_original": False,
        "date_time_formatter": None,
        "date_pattern": DEFAULT_DATE_PATTERN,
    }

    if isinstance(options, bool):
        defaults["enabled"] = options
    elif isinstance(options, Mapping):
        defaults.update(_accepted_options(options, TIMEZONE_KEY_CHECKS, "timezone"))
    elif options is not None:
        logger.debug(f"Unsupported timezone options {options!r}, using defaults")

    defaults["date_fields"] = list(defaults["date_fields"])
    defaults["date_pattern"] = compile_date_pattern(defaults["date_pattern"])

    return TimezoneConversionOptions(timezone_resolver=resolver, **defaults)
