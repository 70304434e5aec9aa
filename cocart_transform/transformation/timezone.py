"""
Timezone Conversion - Response Date Pass

Pure functions that rewrite date strings of a decoded API response from
the store's timezone into the caller's timezone.

convert_date_timezone reads the source-zone wall clock of an instant,
reinterprets that wall clock in the reference zone and renders the result
in the target zone. It does not preserve the absolute instant; existing
consumers depend on this output, so it is kept as is.

Failures never escape: a date that cannot be converted is returned as it
came in.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from cocart_transform.coreutils.time import get_zone

from .config import TimezoneOptions, normalize_timezone_config
from .schemas import (
    DEFAULT_STORE_TIMEZONE,
    ORIGINAL_PREFIX,
    REFERENCE_TIMEZONE,
    FieldResult,
    TimezoneConversionOptions,
)
from .validators import (
    detect_date_strings,
    is_date_string,
    is_preserved_field,
    parse_date_string,
)

logger = logging.getLogger(__name__)


def _as_aware(value: datetime, reference_timezone: str) -> datetime:
    """Attach the reference zone to naive datetimes"""
    if value.tzinfo is None:
        return value.replace(tzinfo=get_zone(reference_timezone))
    return value


def _iso_instant(value: Any) -> str:
    """Absolute ISO string in UTC ('2023-10-15T12:00:00.000Z'), never raises"""
    try:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        instant = value.astimezone(timezone.utc)
        return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    except (AttributeError, ValueError, OverflowError):
        return str(value)


def _wall_clock(value: datetime) -> str:
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}T"
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def format_date_time(
    date: datetime,
    tz: str,
    fmt: Optional[str] = None,
    reference_timezone: str = REFERENCE_TIMEZONE,
) -> str:
    """
    Format a datetime as observed in a timezone

    Args:
        date: Datetime to format (naive values are read in reference_timezone)
        tz: IANA timezone to render in
        fmt: Optional strftime pattern; without it the zero-padded
            'YYYY-MM-DDTHH:MM:SS' wall clock is returned
        reference_timezone: Zone for naive input

    Returns:
        str: Formatted date, or the absolute ISO instant on failure
    """
    try:
        local = _as_aware(date, reference_timezone).astimezone(get_zone(tz))
        if fmt is None:
            return _wall_clock(local)
        return local.strftime(fmt)
    except Exception as e:
        logger.error(f"Date formatting error for {date!r} in {tz!r}: {e}")
        return _iso_instant(date)


def convert_date_value(
    date_str: str,
    source_timezone: str,
    target_timezone: str,
    reference_timezone: str = REFERENCE_TIMEZONE,
) -> FieldResult:
    """Convert one date string, reporting whether conversion happened"""
    try:
        parsed = parse_date_string(date_str)
        if parsed is None:
            logger.debug(f"Not a parseable date, left unchanged: {date_str!r}")
            return FieldResult.fallback(date_str)

        instant = _as_aware(parsed, reference_timezone)

        # Wall clock in the source zone, reinterpreted in the reference zone
        source_wall = instant.astimezone(get_zone(source_timezone))
        reinterpreted = source_wall.replace(
            microsecond=0, tzinfo=get_zone(reference_timezone)
        )

        local = reinterpreted.astimezone(get_zone(target_timezone))
        return FieldResult(_wall_clock(local), True)
    except Exception as e:
        logger.error(f"Date conversion error for {date_str!r}: {e}")
        return FieldResult.fallback(date_str)


def convert_date_timezone(
    date_str: str,
    source_timezone: str,
    target_timezone: str,
    reference_timezone: str = REFERENCE_TIMEZONE,
) -> str:
    """
    Convert a date string from one timezone to another

    Args:
        date_str: Date string to convert
        source_timezone: Store timezone
        target_timezone: Timezone to render in
        reference_timezone: Zone for naive input and the wall-clock reinterpretation

    Returns:
        str: 'YYYY-MM-DDTHH:MM:SS' without zone suffix, or date_str unchanged
        if it cannot be converted
    """
    return convert_date_value(
        date_str, source_timezone, target_timezone, reference_timezone
    ).value


def _apply_formatter(
    converted: str, original: str, config: TimezoneConversionOptions, target: str
) -> Any:
    if config.date_time_formatter is None or converted == original:
        return converted

    try:
        date = datetime.fromisoformat(converted).replace(tzinfo=get_zone(target))
        return config.date_time_formatter(date, target)
    except Exception as e:
        logger.warning(f"Custom date formatter failed for {converted!r}: {e}")
        return converted


def process_object_dates(
    obj: Any,
    config: Union[TimezoneConversionOptions, TimezoneOptions],
    store_timezone: Optional[str] = None,
) -> Any:
    """
    Convert date fields of an object, recursively

    Fields are config.date_fields when given, else the date strings
    detected on each object's own keys. Nested objects and lists are
    always visited. The input is not modified.

    Args:
        obj: Object or list to process
        config: Timezone conversion configuration (raw options are normalized)
        store_timezone: Store timezone to use (overrides config)

    Returns:
        Processed copy, or obj itself when source and target zones match
    """
    if not isinstance(config, TimezoneConversionOptions):
        config = normalize_timezone_config(config)

    if not obj or not isinstance(obj, (dict, list)):
        return obj

    source = store_timezone or config.store_timezone or DEFAULT_STORE_TIMEZONE
    target = config.resolved_target_timezone()

    # Same zone: no conversion needed
    if source == target:
        return obj

    return _walk(obj, config, source, target)


def _walk(obj: Any, config: TimezoneConversionOptions, source: str, target: str) -> Any:
    if isinstance(obj, list):
        return [
            _walk(item, config, source, target) if isinstance(item, (dict, list)) else item
            for item in obj
        ]

    result = dict(obj)

    date_fields = list(config.date_fields) or detect_date_strings(
        obj, config.date_pattern
    )

    for field in date_fields:
        if is_preserved_field(field):
            continue

        value = obj.get(field)
        if not isinstance(value, str) or not is_date_string(value, config.date_pattern):
            continue

        if config.preserve_original:
            result[f"{ORIGINAL_PREFIX}{field}"] = value

        converted = convert_date_timezone(value, source, target)
        result[field] = _apply_formatter(converted, value, config, target)

    # Process any nested objects
    for key, value in list(result.items()):
        if not is_preserved_field(key) and isinstance(value, (dict, list)):
            result[key] = _walk(value, config, source, target)

    return result
