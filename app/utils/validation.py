"""Validation of untrusted path input before it reaches the price pipeline."""

from __future__ import annotations

import re

from app.utils.errors import (
    MSG_INVALID_NUMBER,
    MSG_OUT_OF_RANGE,
    MSG_SYMBOL_REQUIRED,
    ValidationError,
)


DAYS_MIN = 1
DAYS_MAX = 365

_INTEGER_RE = re.compile(r"-?[0-9]+")


def validate_and_parse_days(
    raw: str | None,
    field_name: str,
    min_value: int = DAYS_MIN,
    max_value: int = DAYS_MAX,
) -> int:
    """
    Parse a base-10 integer and check it lies in [min_value, max_value].

    Decimals, signs other than a leading '-', whitespace padding and empty
    input are all rejected as non-numeric.
    """
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        raise ValidationError(
            MSG_INVALID_NUMBER,
            {"field": field_name, "received": raw},
        )

    try:
        value = int(raw)
    except ValueError:
        # past the interpreter's digit limit; far outside any sane bound
        raise ValidationError(
            MSG_OUT_OF_RANGE,
            {"field": field_name, "min": min_value, "max": max_value, "received": raw},
        ) from None

    if value < min_value or value > max_value:
        raise ValidationError(
            MSG_OUT_OF_RANGE,
            {"field": field_name, "min": min_value, "max": max_value, "received": value},
        )
    return value


def require_symbol(raw: str | None) -> str:
    symbol = (raw or "").strip()
    if not symbol:
        raise ValidationError(MSG_SYMBOL_REQUIRED, {"field": "symbol"})
    return symbol
