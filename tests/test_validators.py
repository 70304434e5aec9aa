"""
Test Field Validators - currency field matching and date detection
"""

import os
import sys
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cocart_transform.transformation.schemas import COMMON_CURRENCY_FIELDS
from cocart_transform.transformation.validators import (
    compile_date_pattern,
    detect_date_strings,
    is_currency_field,
    is_date_string,
    is_numeric_value,
    is_preserved_field,
    to_decimal,
)
import logging

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def test_is_currency_field_matching_rules():
    """Exact names, _<known> suffixes and <known>_ substrings all match"""
    assert is_currency_field("price", COMMON_CURRENCY_FIELDS)
    assert is_currency_field("shipping_total", COMMON_CURRENCY_FIELDS)
    assert is_currency_field("cart_subtotal", COMMON_CURRENCY_FIELDS)
    assert is_currency_field("total_discount", COMMON_CURRENCY_FIELDS)
    assert is_currency_field("line_subtotal_tax", COMMON_CURRENCY_FIELDS)


def test_is_currency_field_rejects_other_names():
    assert not is_currency_field("name", COMMON_CURRENCY_FIELDS)
    assert not is_currency_field("quantity", COMMON_CURRENCY_FIELDS)
    assert not is_currency_field("totals", COMMON_CURRENCY_FIELDS)
    assert not is_currency_field("id", COMMON_CURRENCY_FIELDS)
    assert not is_currency_field("price", [])
    assert not is_currency_field("anything", [""])


def test_is_preserved_field():
    assert is_preserved_field("_original_price")
    assert is_preserved_field("formatted_total")
    assert is_preserved_field("price_formatted_value")
    assert not is_preserved_field("price")
    assert not is_preserved_field("original_price")


def test_to_decimal():
    assert to_decimal(4599) == Decimal("4599")
    assert to_decimal(45.5) == Decimal("45.5")
    assert to_decimal(" 100 ") == Decimal("100")
    assert to_decimal("1e3") == Decimal("1000")
    assert to_decimal("12abc") is None
    assert to_decimal(True) is None
    assert to_decimal(None) is None
    assert to_decimal("Infinity") is None
    assert to_decimal(float("nan")) is None

    assert is_numeric_value("-3.5")
    assert not is_numeric_value([1])


def test_is_date_string_default_pattern():
    assert is_date_string("2023-10-15T14:30:00Z")
    assert is_date_string("2023-10-15T14:30:00+05:00")
    assert is_date_string("2023-10-15T14:30:00-0800")
    assert is_date_string("2023-10-15 14:30:00")


def test_is_date_string_rejects_non_dates():
    assert not is_date_string("not-a-date")
    assert not is_date_string("2023-10-15")
    assert not is_date_string("2023-10-15T14:30")
    assert not is_date_string("2023-10-15T14:30:00.123Z")
    assert not is_date_string("2023-02-30T10:00:00")
    assert not is_date_string(None)
    assert not is_date_string(20231015)


def test_is_date_string_custom_pattern():
    pattern = r"^\d{2}/\d{2}/\d{4} \d{2}:\d{2}$"

    assert is_date_string("10/15/2023 14:30", pattern)
    assert not is_date_string("2023-10-15T14:30:00Z", pattern)


def test_compile_date_pattern_falls_back_on_invalid():
    default = compile_date_pattern(None)

    assert compile_date_pattern("[unclosed") is default
    assert compile_date_pattern(42) is default
    assert compile_date_pattern(default) is default


def test_detect_date_strings_scans_own_keys_only():
    obj = {
        "id": 1,
        "name": "Test",
        "date_created": "2023-10-15T14:30:00Z",
        "date_modified": "2023-10-16T09:15:00Z",
        "status": "active",
        "meta": {"timestamp": "2023-10-15T14:30:00Z"},
    }

    assert detect_date_strings(obj) == ["date_created", "date_modified"]


def test_detect_date_strings_non_objects():
    assert detect_date_strings(None) == []
    assert detect_date_strings("2023-10-15T14:30:00Z") == []
    assert detect_date_strings(["2023-10-15T14:30:00Z"]) == []
