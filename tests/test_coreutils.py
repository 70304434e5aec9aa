"""
Test Core Utilities - environment flags, timezone lookup, logging setup
"""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cocart_transform.coreutils.env import env_bool, env_get
from cocart_transform.coreutils.logging import setup_logging
from cocart_transform.coreutils.time import (
    get_zone,
    is_known_timezone,
    resolve_host_timezone,
)

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def test_env_bool(monkeypatch):
    for value in ("1", "true", "YES", " on "):
        monkeypatch.setenv("COCART_TEST_FLAG", value)
        assert env_bool("COCART_TEST_FLAG") is True

    monkeypatch.setenv("COCART_TEST_FLAG", "off")
    assert env_bool("COCART_TEST_FLAG", default=True) is False

    monkeypatch.setenv("COCART_TEST_FLAG", "  ")
    assert env_bool("COCART_TEST_FLAG", default=True) is True

    monkeypatch.delenv("COCART_TEST_FLAG")
    assert env_bool("COCART_TEST_FLAG") is False
    assert env_get("COCART_TEST_FLAG", "fallback") == "fallback"


def test_is_known_timezone():
    assert is_known_timezone("UTC")
    assert is_known_timezone("America/New_York")
    assert not is_known_timezone("Not/AZone")
    assert not is_known_timezone("")
    assert not is_known_timezone(None)
    assert get_zone("Asia/Tokyo") is get_zone("Asia/Tokyo")


def test_resolve_host_timezone_prefers_tz_env(monkeypatch):
    monkeypatch.setenv("TZ", "Europe/Paris")
    assert resolve_host_timezone() == "Europe/Paris"

    monkeypatch.setenv("TZ", ":Asia/Tokyo")
    assert resolve_host_timezone() == "Asia/Tokyo"


def test_resolve_host_timezone_accepts_tz_file_path(monkeypatch):
    monkeypatch.setenv("TZ", ":/usr/share/zoneinfo/America/Los_Angeles")

    assert resolve_host_timezone() == "America/Los_Angeles"


def make_zoneinfo_tree(tmp_path, key):
    zone_file = tmp_path / "share" / "zoneinfo" / key
    zone_file.parent.mkdir(parents=True)
    zone_file.write_bytes(b"TZif")
    return zone_file


def test_resolve_host_timezone_from_localtime_symlink(tmp_path, monkeypatch):
    """A DST host configured through /etc/localtime, no TZ variable"""
    monkeypatch.delenv("TZ", raising=False)
    localtime = tmp_path / "localtime"
    localtime.symlink_to(make_zoneinfo_tree(tmp_path, "America/Los_Angeles"))

    resolved = resolve_host_timezone(localtime, tmp_path / "missing")

    assert resolved == "America/Los_Angeles"


def test_resolve_host_timezone_strips_posix_subtree(tmp_path, monkeypatch):
    monkeypatch.delenv("TZ", raising=False)
    localtime = tmp_path / "localtime"
    localtime.symlink_to(make_zoneinfo_tree(tmp_path, "posix/Europe/Berlin"))

    assert resolve_host_timezone(localtime, tmp_path / "missing") == "Europe/Berlin"


def test_resolve_host_timezone_from_timezone_file(tmp_path, monkeypatch):
    monkeypatch.delenv("TZ", raising=False)
    localtime = tmp_path / "localtime"
    localtime.write_bytes(b"TZif")
    timezone_file = tmp_path / "timezone"
    timezone_file.write_text("Australia/Sydney\n", encoding="utf-8")

    assert resolve_host_timezone(localtime, timezone_file) == "Australia/Sydney"


def test_resolve_host_timezone_defaults_to_utc(tmp_path, monkeypatch):
    monkeypatch.setenv("TZ", "Not/AZone")

    assert resolve_host_timezone(tmp_path / "missing", tmp_path / "missing") == "UTC"


def test_resolve_host_timezone_always_returns_known_zone(monkeypatch):
    monkeypatch.setenv("TZ", "Not/AZone")

    assert is_known_timezone(resolve_host_timezone())


def test_setup_logging_writes_dated_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    root.handlers.clear()

    try:
        setup_logging(logging.DEBUG, log_dir=tmp_path / "logs")
        logging.getLogger("cocart_transform.test").info("hello")
        for handler in root.handlers:
            handler.flush()

        log_files = list((tmp_path / "logs").glob("cocart_transform_*.log"))
        assert len(log_files) == 1
        assert "hello" in log_files[0].read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
