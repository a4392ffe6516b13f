from datetime import date, datetime

import pyarrow as pa
import pytest
import pytz

from eth_cursor import types as ct
from eth_cursor.builders import create_block_builder
from eth_cursor.errors import ShapeMismatchError
from eth_cursor.metadata import row_type_for_transaction
from eth_cursor.serializer import serialize_object

HASH_NONCE = ct.parse_type_signature("row(hash varchar(66), nonce bigint)")


def test_root_list_returns_elements():
    result = serialize_object(ct.ArrayType(ct.varchar()), None, ["a", None, "b"])

    assert isinstance(result, pa.Array)
    assert result.type == pa.string()
    assert result.to_pylist() == ["a", None, "b"]


def test_root_list_of_scalar_kinds():
    assert serialize_object(ct.ArrayType(ct.REAL), None, [1.5]).to_pylist() == [1.5]
    assert serialize_object(ct.ArrayType(ct.DATE), None, [date(2024, 1, 1)]).to_pylist() == [
        date(2024, 1, 1)
    ]

    timestamps = serialize_object(
        ct.ArrayType(ct.TIMESTAMP), None, [datetime(2024, 1, 1, 12)], pytz.utc
    )
    assert timestamps.to_pylist() == [datetime(2024, 1, 1, 12)]


def test_map_drops_null_keys():
    result = serialize_object(ct.MapType(ct.varchar(), ct.BIGINT), None, {None: 1, "a": 2})

    assert len(result.as_py()) == 1
    assert dict(result.as_py()) == {"a": 2}


def test_map_keeps_iteration_order():
    result = serialize_object(ct.MapType(ct.varchar(), ct.BIGINT), None, {"b": 1, "a": 2})

    assert [k for k, _ in result.as_py()] == ["b", "a"]


def test_root_row_projects_transaction(transactions):
    tx = transactions[0]

    result = serialize_object(row_type_for_transaction(), None, tx)
    value = result.as_py()

    assert value["hash"] == tx.hash
    assert value["nonce"] == 7
    assert value["from"] == tx.from_address
    assert value["value"] == float(10**18)
    assert value["input"] == "0x"


def test_row_uses_leading_transaction_fields(transactions):
    result = serialize_object(HASH_NONCE, None, transactions[1])

    assert result.as_py() == {"hash": transactions[1].hash, "nonce": 8}


def test_nested_depth_three(transactions):
    column_type = ct.ArrayType(ct.MapType(ct.varchar(), ct.ArrayType(ct.BIGINT)))
    value = [{"a": [1, 2], "b": None, "c": []}, None, {}]

    result = serialize_object(column_type, None, value).to_pylist()

    assert dict(result[0]) == {"a": [1, 2], "b": None, "c": []}
    assert result[1] is None
    assert len(result[2]) == 0

    column_type = ct.MapType(ct.varchar(), ct.ArrayType(HASH_NONCE))
    value = {"block": [transactions[0], None, transactions[1]]}

    result = dict(serialize_object(column_type, None, value).as_py())

    assert result == {
        "block": [
            {"hash": transactions[0].hash, "nonce": 7},
            None,
            {"hash": transactions[1].hash, "nonce": 8},
        ]
    }


def test_nested_into_builder_returns_nothing():
    column_type = ct.ArrayType(ct.BIGINT)
    builder = create_block_builder(column_type)

    assert serialize_object(column_type, builder, [1, 2]) is None
    assert serialize_object(column_type, builder, None) is None
    assert serialize_object(column_type, builder, []) is None

    assert builder.build().to_pylist() == [[1, 2], None, []]


def test_rows_into_builder(transactions):
    builder = create_block_builder(HASH_NONCE)

    serialize_object(HASH_NONCE, builder, transactions[0])
    serialize_object(HASH_NONCE, builder, None)

    assert builder.build().to_pylist() == [
        {"hash": transactions[0].hash, "nonce": 7},
        None,
    ]


def test_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        serialize_object(ct.ArrayType(ct.BIGINT), None, "abc")
    with pytest.raises(ShapeMismatchError):
        serialize_object(ct.MapType(ct.varchar(), ct.BIGINT), None, [1, 2])
    with pytest.raises(ShapeMismatchError):
        serialize_object(HASH_NONCE, None, {"hash": "0x"})


def test_root_requires_builder_for_scalars_and_nulls():
    with pytest.raises(ValueError):
        serialize_object(ct.BIGINT, None, 1)
    with pytest.raises(ValueError):
        serialize_object(ct.ArrayType(ct.BIGINT), None, None)
