"""Column builders that accumulate storage values and produce pyarrow arrays.

A builder receives one entry at a time. Scalar builders take storage values
from the codec. Structural builders hand out an entry writer from
``begin_block_entry`` and finish the entry on ``close_entry``:

* array: the writer is the element builder itself
* map: the writer alternates between the key and the value builder
* row: the writer moves through the field builders in order
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import pyarrow as pa

from .errors import ShapeMismatchError, UnsupportedTypeError
from .types import ArrayType, ColumnType, MapType, RowType, ScalarKind, ScalarType

logger = logging.getLogger(__name__)


class BlockBuilder(ABC):
    """Sink for the entries of one column"""

    @abstractmethod
    def append_null(self) -> None:
        pass

    @abstractmethod
    def write_value(self, value: Any) -> None:
        """Append a scalar storage value"""
        pass

    @abstractmethod
    def begin_block_entry(self) -> "BlockBuilder":
        """Start a nested entry and return the builder its children go to"""
        pass

    @abstractmethod
    def close_entry(self) -> None:
        pass


class ColumnBuilder(BlockBuilder):
    def __init__(self, column_type: ColumnType):
        self.column_type = column_type

    @property
    @abstractmethod
    def position_count(self) -> int:
        pass

    @abstractmethod
    def build(self) -> pa.Array:
        pass


class ScalarBlockBuilder(ColumnBuilder):
    def __init__(self, column_type: ScalarType):
        super().__init__(column_type)
        self.values: List[Any] = []

    @property
    def position_count(self) -> int:
        return len(self.values)

    def append_null(self) -> None:
        self.values.append(None)

    def write_value(self, value: Any) -> None:
        self.values.append(value)

    def begin_block_entry(self) -> BlockBuilder:
        raise ShapeMismatchError(
            f"cannot begin a nested entry on {self.column_type.signature()}"
        )

    def close_entry(self) -> None:
        raise ShapeMismatchError(
            f"cannot close a nested entry on {self.column_type.signature()}"
        )

    def build(self) -> pa.Array:
        column_type = self.column_type
        storage = pa.array(self.values, type=column_type.storage_type())

        if column_type.kind in (ScalarKind.REAL, ScalarKind.DATE, ScalarKind.TIMESTAMP):
            return storage.view(column_type.arrow_type())
        if column_type.kind in (ScalarKind.VARCHAR, ScalarKind.CHAR):
            return storage.cast(pa.string())

        return storage


class _OffsetsMixin:
    # start offset of every entry, None marks a null entry
    starts: List[Optional[int]]

    def _offsets(self, end: int) -> pa.Array:
        return pa.array(self.starts + [end], type=pa.int32())


class ArrayBlockBuilder(_OffsetsMixin, ColumnBuilder):
    def __init__(self, column_type: ArrayType):
        super().__init__(column_type)
        self.starts = []
        self.element_builder = create_block_builder(column_type.element_type)
        self._open = False

    @property
    def position_count(self) -> int:
        return len(self.starts)

    def append_null(self) -> None:
        self.starts.append(None)

    def write_value(self, value: Any) -> None:
        raise ShapeMismatchError(
            f"cannot write a scalar into {self.column_type.signature()}"
        )

    def begin_block_entry(self) -> BlockBuilder:
        if self._open:
            raise ValueError("Expected current entry to be closed but was opened")
        self._open = True
        self.starts.append(self.element_builder.position_count)
        return self.element_builder

    def close_entry(self) -> None:
        if not self._open:
            raise ValueError("Expected entry to be opened but was closed")
        self._open = False

    def build(self) -> pa.Array:
        values = self.element_builder.build()
        return pa.ListArray.from_arrays(self._offsets(len(values)), values)


class _MapEntryWriter(BlockBuilder):
    def __init__(self, key_builder: ColumnBuilder, value_builder: ColumnBuilder):
        self.key_builder = key_builder
        self.value_builder = value_builder
        self.writing_key = True
        self.nested: Optional[ColumnBuilder] = None

    def _target(self) -> ColumnBuilder:
        return self.key_builder if self.writing_key else self.value_builder

    def _advance(self):
        self.writing_key = not self.writing_key

    def append_null(self) -> None:
        if self.writing_key:
            raise ValueError("map key cannot be null")
        self.value_builder.append_null()
        self._advance()

    def write_value(self, value: Any) -> None:
        self._target().write_value(value)
        self._advance()

    def begin_block_entry(self) -> BlockBuilder:
        self.nested = self._target()
        return self.nested.begin_block_entry()

    def close_entry(self) -> None:
        if self.nested is None:
            raise ValueError("Expected entry to be opened but was closed")
        self.nested.close_entry()
        self.nested = None
        self._advance()


class MapBlockBuilder(_OffsetsMixin, ColumnBuilder):
    def __init__(self, column_type: MapType):
        super().__init__(column_type)
        self.starts = []
        self.key_builder = create_block_builder(column_type.key_type)
        self.value_builder = create_block_builder(column_type.value_type)
        self.entry: Optional[_MapEntryWriter] = None

    @property
    def position_count(self) -> int:
        return len(self.starts)

    def append_null(self) -> None:
        self.starts.append(None)

    def write_value(self, value: Any) -> None:
        raise ShapeMismatchError(
            f"cannot write a scalar into {self.column_type.signature()}"
        )

    def begin_block_entry(self) -> BlockBuilder:
        if self.entry is not None:
            raise ValueError("Expected current entry to be closed but was opened")
        self.starts.append(self.key_builder.position_count)
        self.entry = _MapEntryWriter(self.key_builder, self.value_builder)
        return self.entry

    def close_entry(self) -> None:
        if self.entry is None:
            raise ValueError("Expected entry to be opened but was closed")
        if not self.entry.writing_key:
            raise ValueError("map entry has a key without a value")
        self.entry = None

    def build(self) -> pa.Array:
        keys = self.key_builder.build()
        items = self.value_builder.build()
        return pa.MapArray.from_arrays(self._offsets(len(keys)), keys, items)


class _RowEntryWriter(BlockBuilder):
    def __init__(self, field_builders: List[ColumnBuilder]):
        self.field_builders = field_builders
        self.field_index = 0
        self.nested: Optional[ColumnBuilder] = None

    def _target(self) -> ColumnBuilder:
        if self.field_index >= len(self.field_builders):
            raise ShapeMismatchError(
                f"row has {len(self.field_builders)} fields, too many values written"
            )
        return self.field_builders[self.field_index]

    def append_null(self) -> None:
        self._target().append_null()
        self.field_index += 1

    def write_value(self, value: Any) -> None:
        self._target().write_value(value)
        self.field_index += 1

    def begin_block_entry(self) -> BlockBuilder:
        self.nested = self._target()
        return self.nested.begin_block_entry()

    def close_entry(self) -> None:
        if self.nested is None:
            raise ValueError("Expected entry to be opened but was closed")
        self.nested.close_entry()
        self.nested = None
        self.field_index += 1


class RowBlockBuilder(ColumnBuilder):
    def __init__(self, column_type: RowType):
        super().__init__(column_type)
        self.field_builders = [create_block_builder(t) for t in column_type.field_types]
        self.is_null: List[bool] = []
        self.entry: Optional[_RowEntryWriter] = None

    @property
    def position_count(self) -> int:
        return len(self.is_null)

    def append_null(self) -> None:
        # keep field columns aligned with the row positions
        for builder in self.field_builders:
            builder.append_null()
        self.is_null.append(True)

    def write_value(self, value: Any) -> None:
        raise ShapeMismatchError(
            f"cannot write a scalar into {self.column_type.signature()}"
        )

    def begin_block_entry(self) -> BlockBuilder:
        if self.entry is not None:
            raise ValueError("Expected current entry to be closed but was opened")
        self.entry = _RowEntryWriter(self.field_builders)
        return self.entry

    def close_entry(self) -> None:
        if self.entry is None:
            raise ValueError("Expected entry to be opened but was closed")
        if self.entry.field_index != len(self.field_builders):
            raise ShapeMismatchError(
                f"row entry has {self.entry.field_index} of {len(self.field_builders)} fields"
            )
        self.entry = None
        self.is_null.append(False)

    def build(self) -> pa.Array:
        column_type = self.column_type
        arrays = [b.build() for b in self.field_builders]
        fields = [
            pa.field(name, arr.type)
            for name, arr in zip(column_type.field_names(), arrays)
        ]
        return pa.StructArray.from_arrays(
            arrays, fields=fields, mask=pa.array(self.is_null, type=pa.bool_())
        )


def create_block_builder(column_type: ColumnType) -> ColumnBuilder:
    if isinstance(column_type, ScalarType):
        return ScalarBlockBuilder(column_type)
    if isinstance(column_type, ArrayType):
        return ArrayBlockBuilder(column_type)
    if isinstance(column_type, MapType):
        return MapBlockBuilder(column_type)
    if isinstance(column_type, RowType):
        return RowBlockBuilder(column_type)
    raise UnsupportedTypeError(f"Unknown column type: {column_type}")


__all__ = [
    "BlockBuilder",
    "ColumnBuilder",
    "ScalarBlockBuilder",
    "ArrayBlockBuilder",
    "MapBlockBuilder",
    "RowBlockBuilder",
    "create_block_builder",
]
