import logging
from typing import List, Sequence

import polars as pl
import pyarrow as pa

from . import codec
from .builders import create_block_builder
from .cursors import EthereumRecordCursor
from .metadata import ColumnHandle
from .types import LONG_KINDS, SLICE_KINDS, ScalarKind, ScalarType

logger = logging.getLogger(__name__)


def arrow_schema(columns: Sequence[ColumnHandle]) -> pa.Schema:
    return pa.schema([pa.field(c.name, c.type.arrow_type()) for c in columns])


def read_table(
    cursor: EthereumRecordCursor, columns: Sequence[ColumnHandle]
) -> pa.Table:
    """Drain a cursor into a pyarrow table with one column per requested column"""
    builders = [create_block_builder(c.type) for c in columns]

    rows = 0
    while cursor.advance_next_position():
        for i, column in enumerate(columns):
            builder = builders[i]
            column_type = column.type

            if not isinstance(column_type, ScalarType):
                cursor.write_field(i, builder)
            elif cursor.is_null(i):
                builder.append_null()
            elif column_type.kind == ScalarKind.BOOLEAN:
                builder.write_value(cursor.get_boolean(i))
            elif column_type.kind in LONG_KINDS:
                builder.write_value(
                    codec.check_integral_range(column_type, cursor.get_long(i))
                )
            elif column_type.kind == ScalarKind.DOUBLE:
                builder.write_value(cursor.get_double(i))
            elif column_type.kind in SLICE_KINDS:
                builder.write_value(cursor.get_slice(i))
            else:
                raise Exception(f"Unknown column kind: {column_type}")
        rows += 1

    cursor.close()

    logger.debug(f"read {rows} rows for columns {[c.name for c in columns]}")

    arrays: List[pa.Array] = [b.build() for b in builders]

    return pa.Table.from_arrays(arrays, schema=arrow_schema(columns))


def read_polars(
    cursor: EthereumRecordCursor, columns: Sequence[ColumnHandle]
) -> pl.DataFrame:
    return pl.from_arrow(read_table(cursor, columns))


__all__ = ["arrow_schema", "read_table", "read_polars"]
