import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import pyarrow as pa
import pytz

from . import codec
from .builders import BlockBuilder, MapBlockBuilder, RowBlockBuilder, create_block_builder
from .errors import ShapeMismatchError
from .models import Transaction, transaction_suppliers
from .types import ArrayType, ColumnType, MapType, RowType, ScalarType

logger = logging.getLogger(__name__)


def _require_builder(builder: Optional[BlockBuilder]) -> BlockBuilder:
    if builder is None:
        raise ValueError("parent builder is null")
    return builder


def serialize_object(
    column_type: ColumnType,
    builder: Optional[BlockBuilder],
    value: Any,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[Any]:
    """Write ``value`` into ``builder`` following ``column_type``.

    When ``builder`` is None the call is the root of a structural value and the
    finished value is returned instead: a ``pyarrow.Array`` of elements for
    arrays, a ``pyarrow.MapScalar`` for maps and a ``pyarrow.StructScalar``
    for rows. Otherwise nothing is returned.
    """
    if isinstance(column_type, ScalarType):
        serialize_primitive(column_type, builder, value, tz)
        return None
    elif isinstance(column_type, ArrayType):
        return serialize_list(column_type, builder, value, tz)
    elif isinstance(column_type, MapType):
        return serialize_map(column_type, builder, value, tz)
    elif isinstance(column_type, RowType):
        return serialize_struct(column_type, builder, value, tz)

    raise ShapeMismatchError(f"Unknown object type: {column_type}")


def serialize_primitive(
    column_type: ScalarType,
    builder: Optional[BlockBuilder],
    value: Any,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> None:
    builder = _require_builder(builder)

    if value is None:
        builder.append_null()
        return

    builder.write_value(codec.storage_value(column_type, value, tz))


def serialize_list(
    column_type: ArrayType,
    builder: Optional[BlockBuilder],
    value: Any,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[pa.Array]:
    if value is None:
        _require_builder(builder).append_null()
        return None

    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise ShapeMismatchError(
            f"Unknown object type: {type(value).__name__} for {column_type.signature()}"
        )

    element_type = column_type.element_type

    if builder is not None:
        current = builder.begin_block_entry()
    else:
        current = create_block_builder(element_type)

    for element in value:
        serialize_object(element_type, current, element, tz)

    if builder is not None:
        builder.close_entry()
        return None

    return current.build()


def serialize_map(
    column_type: MapType,
    builder: Optional[BlockBuilder],
    value: Any,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[pa.MapScalar]:
    if value is None:
        _require_builder(builder).append_null()
        return None

    if not isinstance(value, Mapping):
        raise ShapeMismatchError(
            f"Unknown object type: {type(value).__name__} for {column_type.signature()}"
        )

    synthesized: Optional[MapBlockBuilder] = None
    if builder is None:
        synthesized = create_block_builder(column_type)
        builder = synthesized

    current = builder.begin_block_entry()

    for key, item in value.items():
        # entries with a null key are dropped, as Hive does
        if key is None:
            continue
        serialize_object(column_type.key_type, current, key, tz)
        serialize_object(column_type.value_type, current, item, tz)

    builder.close_entry()

    if synthesized is not None:
        return synthesized.build()[0]
    return None


def serialize_struct(
    column_type: RowType,
    builder: Optional[BlockBuilder],
    value: Any,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[pa.StructScalar]:
    if value is None:
        _require_builder(builder).append_null()
        return None

    if not isinstance(value, Transaction):
        raise ShapeMismatchError(
            f"Unknown object type: {type(value).__name__} for {column_type.signature()}"
        )

    field_types = column_type.field_types
    suppliers = transaction_suppliers(value)
    if len(field_types) > len(suppliers):
        raise ShapeMismatchError(
            f"{column_type.signature()} has more fields than a transaction provides"
        )

    synthesized: Optional[RowBlockBuilder] = None
    if builder is None:
        synthesized = create_block_builder(column_type)
        builder = synthesized

    current = builder.begin_block_entry()

    for field_type, supplier in zip(field_types, suppliers):
        serialize_object(field_type, current, supplier(), tz)

    builder.close_entry()

    if synthesized is not None:
        return synthesized.build()[0]
    return None


__all__ = [
    "serialize_object",
    "serialize_primitive",
    "serialize_list",
    "serialize_map",
    "serialize_struct",
]
