"""Scalar codec: native python values to column storage values.

Every function here is pure. The storage representation per kind is:

* integral kinds, ``date`` (days), ``timestamp`` (millis) and ``real``
  (raw float32 bits): ``int``
* ``double``: ``float``
* ``boolean``: ``bool``
* ``varchar``, ``char``, ``varbinary``: ``bytes``
"""

import logging
import numbers
from datetime import date, datetime, timedelta
from typing import Any, Optional

import numpy as np
import pytz

from .config import default_timezone_name
from .errors import UnsupportedTypeError, ValueOutOfRangeError
from .types import (
    INTEGRAL_BOUNDS,
    INTEGRAL_KINDS,
    LONG_KINDS,
    SLICE_KINDS,
    ScalarKind,
    ScalarType,
)

logger = logging.getLogger(__name__)

MILLIS_PER_DAY = 24 * 60 * 60 * 1000

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)
_EPOCH_DATE = date(1970, 1, 1)
_ONE_MILLI = timedelta(milliseconds=1)

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1


def default_timezone() -> pytz.BaseTzInfo:
    return pytz.timezone(default_timezone_name())


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, numbers.Number)
        and not isinstance(value, bool)
        and not isinstance(value, complex)
    )


def to_long(value: Any) -> int:
    """Narrow a number to a signed 64-bit integer the way a long cast does"""
    if not _is_number(value):
        raise UnsupportedTypeError(
            f"unsupported long field type: {type(value).__name__}"
        )

    if isinstance(value, float):
        if value != value:
            return 0
        if value >= _LONG_MAX:
            return _LONG_MAX
        if value <= _LONG_MIN:
            return _LONG_MIN
        return int(value)

    v = int(value)
    return ((v - _LONG_MIN) % 2**64) + _LONG_MIN


def float_to_raw_int_bits(value: Any) -> int:
    """IEEE-754 bit pattern of the value narrowed to float32, as a signed int32"""
    if not _is_number(value):
        raise UnsupportedTypeError(
            f"unsupported real field type: {type(value).__name__}"
        )
    with np.errstate(over="ignore"):
        return int(np.array(float(value), dtype=np.float32).view(np.int32))


def _local_millis(value: datetime, tz: pytz.BaseTzInfo) -> int:
    # naive values are wall-clock time in the default timezone
    if value.tzinfo is None:
        value = tz.localize(value)
    instant_millis = (value - _EPOCH) // _ONE_MILLI
    offset = value.astimezone(tz).utcoffset()
    return instant_millis + offset // _ONE_MILLI


def date_to_days(value: Any, tz: Optional[pytz.BaseTzInfo] = None) -> int:
    """Whole days since the epoch of the value's calendar day in the default timezone"""
    if isinstance(value, datetime):
        tz = tz or default_timezone()
        return _local_millis(value, tz) // MILLIS_PER_DAY
    if isinstance(value, date):
        return (value - _EPOCH_DATE).days
    return to_long(value)


def timestamp_to_millis(value: Any, tz: Optional[pytz.BaseTzInfo] = None) -> int:
    """Epoch millis of the instant shifted by the default timezone's UTC offset"""
    if isinstance(value, datetime):
        tz = tz or default_timezone()
        return _local_millis(value, tz)
    if isinstance(value, date):
        return (value - _EPOCH_DATE).days * MILLIS_PER_DAY
    return to_long(value)


def long_expressed_value(
    value: Any, column_type: ScalarType, tz: Optional[pytz.BaseTzInfo] = None
) -> int:
    kind = column_type.kind
    if kind == ScalarKind.DATE:
        return date_to_days(value, tz)
    if kind == ScalarKind.TIMESTAMP:
        return timestamp_to_millis(value, tz)
    if kind == ScalarKind.REAL:
        return float_to_raw_int_bits(value)
    return to_long(value)


def double_expressed_value(value: Any) -> float:
    if not _is_number(value):
        raise UnsupportedTypeError(
            f"unsupported double field type: {type(value).__name__}"
        )
    return float(value)


def boolean_value(value: Any) -> bool:
    if not isinstance(value, bool):
        raise UnsupportedTypeError(
            f"unsupported boolean field type: {type(value).__name__}"
        )
    return value


def truncate_to_length(data: bytes, length: Optional[int]) -> bytes:
    """Keep at most ``length`` code points of a UTF-8 byte string"""
    if length is None:
        return data
    text = data.decode("utf-8", errors="surrogateescape")
    if len(text) <= length:
        return data
    return text[:length].encode("utf-8", errors="surrogateescape")


def truncate_to_length_and_trim_spaces(data: bytes, length: Optional[int]) -> bytes:
    return truncate_to_length(data, length).rstrip(b" ")


def slice_expressed_value(value: Any, column_type: ScalarType) -> bytes:
    if isinstance(value, str):
        data = value.encode("utf-8")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
    elif isinstance(value, int) and not isinstance(value, bool):
        data = str(value).encode("utf-8")
    else:
        raise UnsupportedTypeError(
            f"unsupported string field type: {type(value).__name__}"
        )

    if column_type.kind == ScalarKind.VARCHAR:
        data = truncate_to_length(data, column_type.length)
    elif column_type.kind == ScalarKind.CHAR:
        data = truncate_to_length_and_trim_spaces(data, column_type.length)

    return data


def check_integral_range(column_type: ScalarType, value: int) -> int:
    if column_type.kind in INTEGRAL_KINDS:
        low, high = INTEGRAL_BOUNDS[column_type.kind]
        if value < low or value > high:
            raise ValueOutOfRangeError(
                f"Value {value} exceeds the range of {column_type.signature()}"
            )
    return value


def storage_value(
    column_type: ScalarType, value: Any, tz: Optional[pytz.BaseTzInfo] = None
) -> Any:
    """Storage value of a scalar for the given column type, None stays None"""
    if value is None:
        return None

    kind = column_type.kind

    if kind == ScalarKind.BOOLEAN:
        return boolean_value(value)

    if kind in LONG_KINDS:
        return check_integral_range(
            column_type, long_expressed_value(value, column_type, tz)
        )

    if kind == ScalarKind.DOUBLE:
        return double_expressed_value(value)

    if kind in SLICE_KINDS:
        return slice_expressed_value(value, column_type)

    raise UnsupportedTypeError(f"Unsupported primitive type: {column_type}")


__all__ = [
    "MILLIS_PER_DAY",
    "default_timezone",
    "to_long",
    "float_to_raw_int_bits",
    "date_to_days",
    "timestamp_to_millis",
    "long_expressed_value",
    "double_expressed_value",
    "boolean_value",
    "truncate_to_length",
    "truncate_to_length_and_trim_spaces",
    "slice_expressed_value",
    "check_integral_range",
    "storage_value",
]
