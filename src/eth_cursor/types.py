"""Column types understood by the cursor and the structural serializer.

A column type is one of four frozen dataclasses: ``ScalarType``,
``ArrayType``, ``MapType`` and ``RowType``. Every type maps to an Arrow
logical type (what readers see) and scalar types additionally map to a
storage type (what the codec writes).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import pyarrow as pa


class ScalarKind(str, Enum):
    BOOLEAN = "boolean"
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    REAL = "real"
    DOUBLE = "double"
    DATE = "date"
    TIMESTAMP = "timestamp"
    VARCHAR = "varchar"
    CHAR = "char"
    VARBINARY = "varbinary"


INTEGRAL_KINDS = (
    ScalarKind.TINYINT,
    ScalarKind.SMALLINT,
    ScalarKind.INTEGER,
    ScalarKind.BIGINT,
)

# kinds whose storage is a 64-bit (or narrower) integer
LONG_KINDS = INTEGRAL_KINDS + (ScalarKind.REAL, ScalarKind.DATE, ScalarKind.TIMESTAMP)

SLICE_KINDS = (ScalarKind.VARCHAR, ScalarKind.CHAR, ScalarKind.VARBINARY)

INTEGRAL_BOUNDS = {
    ScalarKind.TINYINT: (-(2**7), 2**7 - 1),
    ScalarKind.SMALLINT: (-(2**15), 2**15 - 1),
    ScalarKind.INTEGER: (-(2**31), 2**31 - 1),
    ScalarKind.BIGINT: (-(2**63), 2**63 - 1),
}

_STORAGE_TYPES = {
    ScalarKind.BOOLEAN: pa.bool_(),
    ScalarKind.TINYINT: pa.int8(),
    ScalarKind.SMALLINT: pa.int16(),
    ScalarKind.INTEGER: pa.int32(),
    ScalarKind.BIGINT: pa.int64(),
    ScalarKind.REAL: pa.int32(),
    ScalarKind.DOUBLE: pa.float64(),
    ScalarKind.DATE: pa.int32(),
    ScalarKind.TIMESTAMP: pa.int64(),
    ScalarKind.VARCHAR: pa.binary(),
    ScalarKind.CHAR: pa.binary(),
    ScalarKind.VARBINARY: pa.binary(),
}

_ARROW_TYPES = {
    ScalarKind.BOOLEAN: pa.bool_(),
    ScalarKind.TINYINT: pa.int8(),
    ScalarKind.SMALLINT: pa.int16(),
    ScalarKind.INTEGER: pa.int32(),
    ScalarKind.BIGINT: pa.int64(),
    ScalarKind.REAL: pa.float32(),
    ScalarKind.DOUBLE: pa.float64(),
    ScalarKind.DATE: pa.date32(),
    ScalarKind.TIMESTAMP: pa.timestamp("ms"),
    ScalarKind.VARCHAR: pa.string(),
    ScalarKind.CHAR: pa.string(),
    ScalarKind.VARBINARY: pa.binary(),
}


@dataclass(frozen=True)
class ScalarType:
    kind: ScalarKind
    # declared length for varchar(n) / char(n), None when unbounded
    length: Optional[int] = None

    @property
    def is_structural(self) -> bool:
        return False

    def signature(self) -> str:
        if self.length is not None:
            return f"{self.kind.value}({self.length})"
        return self.kind.value

    def storage_type(self) -> pa.DataType:
        return _STORAGE_TYPES[self.kind]

    def arrow_type(self) -> pa.DataType:
        return _ARROW_TYPES[self.kind]


@dataclass(frozen=True)
class ArrayType:
    element_type: "ColumnType"

    @property
    def is_structural(self) -> bool:
        return True

    def signature(self) -> str:
        return f"array({self.element_type.signature()})"

    def arrow_type(self) -> pa.DataType:
        return pa.list_(self.element_type.arrow_type())


@dataclass(frozen=True)
class MapType:
    key_type: "ColumnType"
    value_type: "ColumnType"

    @property
    def is_structural(self) -> bool:
        return True

    def signature(self) -> str:
        return f"map({self.key_type.signature()},{self.value_type.signature()})"

    def arrow_type(self) -> pa.DataType:
        return pa.map_(self.key_type.arrow_type(), self.value_type.arrow_type())


@dataclass(frozen=True)
class RowField:
    name: Optional[str]
    type: "ColumnType"


@dataclass(frozen=True)
class RowType:
    fields: Tuple[RowField, ...]

    @property
    def is_structural(self) -> bool:
        return True

    @property
    def field_types(self) -> List["ColumnType"]:
        return [f.type for f in self.fields]

    def field_names(self) -> List[str]:
        return [
            f.name if f.name is not None else f"field{i}"
            for i, f in enumerate(self.fields)
        ]

    def signature(self) -> str:
        parts = []
        for f in self.fields:
            if f.name is None:
                parts.append(f.type.signature())
            else:
                parts.append(f"{f.name} {f.type.signature()}")
        return f"row({','.join(parts)})"

    def arrow_type(self) -> pa.DataType:
        return pa.struct(
            [
                pa.field(name, t.arrow_type())
                for name, t in zip(self.field_names(), self.field_types)
            ]
        )


ColumnType = Union[ScalarType, ArrayType, MapType, RowType]


BOOLEAN = ScalarType(ScalarKind.BOOLEAN)
TINYINT = ScalarType(ScalarKind.TINYINT)
SMALLINT = ScalarType(ScalarKind.SMALLINT)
INTEGER = ScalarType(ScalarKind.INTEGER)
BIGINT = ScalarType(ScalarKind.BIGINT)
REAL = ScalarType(ScalarKind.REAL)
DOUBLE = ScalarType(ScalarKind.DOUBLE)
DATE = ScalarType(ScalarKind.DATE)
TIMESTAMP = ScalarType(ScalarKind.TIMESTAMP)
VARBINARY = ScalarType(ScalarKind.VARBINARY)


def varchar(length: Optional[int] = None) -> ScalarType:
    return ScalarType(ScalarKind.VARCHAR, length)


def char(length: int = 1) -> ScalarType:
    return ScalarType(ScalarKind.CHAR, length)


def row(*fields: Tuple[Optional[str], ColumnType]) -> RowType:
    return RowType(tuple(RowField(name, t) for name, t in fields))


class _SignatureParser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> ValueError:
        return ValueError(
            f"invalid type signature {self.text!r} at position {self.pos}: {message}"
        )

    def skip_ws(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        self.skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, ch: str):
        if self.peek() != ch:
            raise self.error(f"expected {ch!r}")
        self.pos += 1

    def word(self) -> str:
        self.skip_ws()
        start = self.pos
        while self.pos < len(self.text) and (
            self.text[self.pos].isalnum() or self.text[self.pos] == "_"
        ):
            self.pos += 1
        if start == self.pos:
            raise self.error("expected identifier")
        return self.text[start : self.pos]

    def parse_type(self) -> ColumnType:
        name = self.word().lower()

        if name == "array":
            self.expect("(")
            element = self.parse_type()
            self.expect(")")
            return ArrayType(element)

        if name == "map":
            self.expect("(")
            key = self.parse_type()
            self.expect(",")
            value = self.parse_type()
            self.expect(")")
            return MapType(key, value)

        if name == "row":
            self.expect("(")
            fields = [self.parse_row_field()]
            while self.peek() == ",":
                self.pos += 1
                fields.append(self.parse_row_field())
            self.expect(")")
            return RowType(tuple(fields))

        try:
            kind = ScalarKind(name)
        except ValueError:
            raise self.error(f"unknown type {name!r}") from None

        length = None
        if self.peek() == "(":
            if kind not in (ScalarKind.VARCHAR, ScalarKind.CHAR):
                raise self.error(f"{name} takes no parameters")
            self.pos += 1
            digits = self.word()
            if not digits.isdigit():
                raise self.error("expected length")
            length = int(digits)
            self.expect(")")
        elif kind == ScalarKind.CHAR:
            length = 1

        return ScalarType(kind, length)

    def parse_row_field(self) -> RowField:
        # a row field is either "name type" or an anonymous "type"
        start = self.pos
        first = self.word()
        nxt = self.peek()
        if nxt not in ("", ",", ")", "("):
            return RowField(first, self.parse_type())
        self.pos = start
        return RowField(None, self.parse_type())


def parse_type_signature(signature: str) -> ColumnType:
    """Parse signatures such as ``array(varchar(66))`` or ``map(varchar,bigint)``"""
    parser = _SignatureParser(signature)
    column_type = parser.parse_type()
    if parser.peek() != "":
        raise parser.error("trailing characters")
    return column_type


def type_signature_to_arrow(signature: str) -> pa.DataType:
    return parse_type_signature(signature).arrow_type()


__all__ = [
    "ScalarKind",
    "ScalarType",
    "ArrayType",
    "MapType",
    "RowField",
    "RowType",
    "ColumnType",
    "INTEGRAL_KINDS",
    "LONG_KINDS",
    "SLICE_KINDS",
    "INTEGRAL_BOUNDS",
    "BOOLEAN",
    "TINYINT",
    "SMALLINT",
    "INTEGER",
    "BIGINT",
    "REAL",
    "DOUBLE",
    "DATE",
    "TIMESTAMP",
    "VARBINARY",
    "varchar",
    "char",
    "row",
    "parse_type_signature",
    "type_signature_to_arrow",
]
