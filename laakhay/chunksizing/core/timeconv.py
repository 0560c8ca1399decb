"""Conversion of dimension values to their internal int64 representation.

Integer columns are used as-is. Temporal columns are mapped to microseconds
since the Unix epoch so that slice ranges, data extents and intervals share
one unit.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from .enums import INT64_MAX, INT64_MIN, ColumnType
from .exceptions import ValidationError

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
USECS_PER_DAY = 86_400_000_000


def _datetime_to_usecs(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - UNIX_EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def time_value_to_internal(value: object, column_type: ColumnType) -> int:
    """Convert a column value into the dimension's internal integer unit.

    Args:
        value: Value read from the chunk (int, date or datetime)
        column_type: Declared type of the dimension column

    Returns:
        Internal int64 value

    Raises:
        ValidationError: If the value does not match the column type
    """
    if column_type.is_integer:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"expected an integer value for {column_type.value} column, "
                f"got {type(value).__name__}"
            )
        internal = value
    elif column_type is ColumnType.DATE:
        if isinstance(value, datetime) or not isinstance(value, date):
            raise ValidationError(f"expected a date value, got {type(value).__name__}")
        internal = (value - UNIX_EPOCH.date()).days * USECS_PER_DAY
    else:
        if not isinstance(value, datetime):
            raise ValidationError(
                f"expected a datetime value for {column_type.value} column, "
                f"got {type(value).__name__}"
            )
        internal = _datetime_to_usecs(value)

    if not INT64_MIN <= internal <= INT64_MAX:
        raise ValidationError(f"value {value!r} is out of range for an internal time value")
    return internal


def interval_to_internal(interval: int | timedelta, column_type: ColumnType) -> int:
    """Convert an interval length into internal units."""
    if isinstance(interval, timedelta):
        if column_type.is_integer:
            raise ValidationError(
                f"interval must be an integer for {column_type.value} dimensions"
            )
        return (interval.days * 86_400 + interval.seconds) * 1_000_000 + interval.microseconds
    return interval
