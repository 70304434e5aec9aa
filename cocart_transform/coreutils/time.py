import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cocart_transform.coreutils.env import env_get

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

# Host zone sources on Linux / macOS
LOCALTIME_PATH = "/etc/localtime"
TIMEZONE_FILE = "/etc/timezone"

# Subtrees some tz databases ship next to the canonical keys
ZONEINFO_VARIANTS = ("posix/", "right/")


@lru_cache(maxsize=128)
def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA timezone name. Raises ZoneInfoNotFoundError or ValueError."""
    return ZoneInfo(name)


def is_known_timezone(name: str | None) -> bool:
    """True if `name` is a timezone key zoneinfo can load."""
    if not name or not isinstance(name, str):
        return False
    try:
        get_zone(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def zone_key_from_path(path: Union[str, Path]) -> Optional[str]:
    """IANA key of a zoneinfo file path, following symlinks.

    '/usr/share/zoneinfo/America/Los_Angeles' -> 'America/Los_Angeles'.
    Returns None when the path is not below a 'zoneinfo' directory or the
    key is unknown.
    """
    real = Path(os.path.realpath(path)).as_posix()
    _, marker, key = real.rpartition("zoneinfo/")
    if not marker:
        return None

    for variant in ZONEINFO_VARIANTS:
        if key.startswith(variant):
            key = key[len(variant):]

    return key if is_known_timezone(key) else None


def _read_timezone_file(path: Union[str, Path]) -> Optional[str]:
    try:
        name = Path(path).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None
    return name if is_known_timezone(name) else None


def resolve_host_timezone(
    localtime_path: Union[str, Path] = LOCALTIME_PATH,
    timezone_file: Union[str, Path] = TIMEZONE_FILE,
) -> str:
    """IANA name of the host's local timezone, 'UTC' if unknown.

    Order: the TZ environment variable (a zone key or a zoneinfo file path,
    with or without the leading ':'), the /etc/localtime symlink target,
    then /etc/timezone.
    """
    tz_env = env_get("TZ")
    if tz_env:
        tz_env = tz_env.lstrip(":")
        if is_known_timezone(tz_env):
            return tz_env
        key = zone_key_from_path(tz_env)
        if key:
            return key
        logger.debug(f"Ignoring unknown TZ value: {tz_env!r}")

    key = zone_key_from_path(localtime_path) or _read_timezone_file(timezone_file)
    if key:
        return key

    logger.debug(f"Host timezone not found, using {DEFAULT_TIMEZONE}")
    return DEFAULT_TIMEZONE
