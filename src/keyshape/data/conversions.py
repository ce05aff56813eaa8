"""Value conversions shared by the Hash and JSON codecs."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from pydantic import ValidationError

from keyshape.core.types import Point
from keyshape.exceptions import MalformedFieldValueError, TypeMismatchError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MILLISECOND = timedelta(milliseconds=1)

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
NUMBER_PATTERN = re.compile(_NUMBER)
INTEGER_PATTERN = re.compile(r"[+-]?\d+")
POINT_PATTERN = re.compile(rf"({_NUMBER}),({_NUMBER})")


def is_number(value: Any) -> bool:
    """Whether a value is a finite int or float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def format_number(value: int | float) -> str:
    """Render a number the way it is stored in a Hash.

    Integral floats drop their fractional part ("3", not "3.0").
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def parse_number(raw: str) -> int | float | None:
    """Parse a stored number strictly, returning None when malformed."""
    if INTEGER_PATTERN.fullmatch(raw):
        return int(raw)
    if NUMBER_PATTERN.fullmatch(raw):
        number = float(raw)
        # "1e400" overflows to inf, which no codec writes
        return number if math.isfinite(number) else None
    return None


def stringify(value: Any) -> str | None:
    """String form of a scalar, or None if the value has none."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    return None


def to_epoch_ms(field_name: str, value: Any) -> int | float:
    """Convert a date-like value to epoch milliseconds.

    Accepts datetimes (naive ones are taken as UTC), dates, epoch
    milliseconds and ISO-8601 strings.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as e:
            raise TypeMismatchError(field_name, value, "an ISO-8601 date string") from e
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return (moment - EPOCH) // ONE_MILLISECOND
    if isinstance(value, date):
        return (datetime.combine(value, time(), tzinfo=timezone.utc) - EPOCH) // ONE_MILLISECOND
    if is_number(value):
        return value
    raise TypeMismatchError(
        field_name, value, "a datetime, epoch milliseconds, or an ISO-8601 string"
    )


def from_epoch_ms(milliseconds: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=milliseconds)


def to_point(field_name: str, value: Any) -> Point:
    """Coerce a Point or a longitude/latitude mapping to a Point."""
    if isinstance(value, Point):
        return value
    if isinstance(value, Mapping) and "longitude" in value and "latitude" in value:
        try:
            return Point(longitude=value["longitude"], latitude=value["latitude"])
        except ValidationError as e:
            raise TypeMismatchError(field_name, dict(value), "a valid point") from e
    raise TypeMismatchError(field_name, value, "a point")


def is_point_text(value: Any) -> bool:
    return isinstance(value, str) and POINT_PATTERN.fullmatch(value) is not None


def point_from_text(field_name: str, raw: str) -> Point:
    """Parse the ``"<longitude>,<latitude>"`` storage form."""
    match = POINT_PATTERN.fullmatch(raw)
    if match is None:
        raise MalformedFieldValueError(field_name, raw, "a point string 'longitude,latitude'")
    try:
        return Point(longitude=float(match.group(1)), latitude=float(match.group(2)))
    except ValidationError as e:
        raise MalformedFieldValueError(field_name, raw, "a point within GEO range") from e
