from __future__ import annotations

import pytest

from app.utils.errors import (
    MSG_INVALID_NUMBER,
    MSG_OUT_OF_RANGE,
    MSG_SYMBOL_REQUIRED,
    AppError,
    ValidationError,
)
from app.utils.validation import require_symbol, validate_and_parse_days


@pytest.mark.parametrize("raw, expected", [("30", 30), ("1", 1), ("365", 365), ("007", 7)])
def test_parses_valid_days(raw, expected):
    assert validate_and_parse_days(raw, "days") == expected


@pytest.mark.parametrize("raw", ["abc", "3.14", "", " 7", "7 ", "7d", "+7", "1e3", None])
def test_rejects_non_integer_input(raw):
    with pytest.raises(ValidationError) as excinfo:
        validate_and_parse_days(raw, "days")

    err = excinfo.value
    assert isinstance(err, AppError)
    assert err.status_code == 400
    assert err.message == MSG_INVALID_NUMBER
    assert err.details == {"field": "days", "received": raw}


@pytest.mark.parametrize("raw, received", [("0", 0), ("366", 366), ("-5", -5), ("999999", 999999)])
def test_rejects_out_of_range(raw, received):
    with pytest.raises(ValidationError) as excinfo:
        validate_and_parse_days(raw, "days")

    err = excinfo.value
    assert err.status_code == 400
    assert err.message == MSG_OUT_OF_RANGE
    assert err.details == {"field": "days", "min": 1, "max": 365, "received": received}


@pytest.mark.parametrize("raw", ["9" * 5000, "-" + "9" * 5000])
def test_rejects_integers_too_long_to_convert(raw):
    with pytest.raises(ValidationError) as excinfo:
        validate_and_parse_days(raw, "days")

    err = excinfo.value
    assert err.status_code == 400
    assert err.message == MSG_OUT_OF_RANGE
    assert err.details == {"field": "days", "min": 1, "max": 365, "received": raw}


def test_custom_bounds():
    with pytest.raises(ValidationError):
        validate_and_parse_days("4", "window", 5, 10)
    with pytest.raises(ValidationError):
        validate_and_parse_days("11", "window", 5, 10)

    assert validate_and_parse_days("7", "window", 5, 10) == 7
    assert validate_and_parse_days("0", "window", 0, 365) == 0


def test_require_symbol_strips_and_rejects_blank():
    assert require_symbol("  BTC ") == "BTC"

    for raw in ("", "   ", None):
        with pytest.raises(ValidationError) as excinfo:
            require_symbol(raw)
        assert excinfo.value.message == MSG_SYMBOL_REQUIRED
        assert excinfo.value.details == {"field": "symbol"}
