import math

import pytest
from conftest import (
    RECEIVER,
    SENDER,
    UNKNOWN_TOKEN,
    FakeClient,
    address_topic,
    h32,
    transfer_log,
)

from eth_cursor.config import CursorConfig, EthereumTable
from eth_cursor.cursors import EthereumRecordCursor
from eth_cursor.erc20 import TRANSFER_EVENT_TOPIC
from eth_cursor.errors import ShapeMismatchError
from eth_cursor.metadata import get_column_handles, table_columns


def test_table_columns():
    assert len(table_columns(EthereumTable.BLOCK)) == 18
    assert len(table_columns(EthereumTable.TRANSACTION)) == 11
    assert len(table_columns(EthereumTable.ERC20)) == 6

    for table in EthereumTable:
        ordinals = [c.ordinal_position for c in table_columns(table)]
        assert ordinals == list(range(len(ordinals)))


def test_block_is_single_row(block, config):
    columns = get_column_handles(EthereumTable.BLOCK)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.BLOCK, config=config)

    assert cursor.advance_next_position()

    assert cursor.get_long(0) == 100
    assert cursor.get_slice(1) == block.hash.encode("utf-8")
    assert cursor.get_double(10) == float(2**70)
    assert cursor.get_object(16).to_pylist() == [h32("a1"), h32("a2")]
    assert cursor.get_object(17).to_pylist() == [h32("0f")]
    assert cursor.completed_bytes == 1234

    assert not cursor.advance_next_position()
    assert not cursor.advance_next_position()


def test_transactions(block, config):
    columns = get_column_handles(EthereumTable.TRANSACTION)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.TRANSACTION, config=config)

    hashes = []
    missing_to = []
    while cursor.advance_next_position():
        hashes.append(cursor.get_slice(0).decode("utf-8"))
        missing_to.append(cursor.is_null(6))
        assert cursor.get_long(3) == 100

    assert hashes == [h32("a1"), h32("a2")]
    # the second transaction creates a contract
    assert missing_to == [False, True]
    assert not cursor.advance_next_position()


def test_erc20_transfers(block, logs, config):
    columns = get_column_handles(EthereumTable.ERC20)
    cursor = EthereumRecordCursor(
        columns, block, EthereumTable.ERC20, logs=logs, config=config
    )

    rows = []
    while cursor.advance_next_position():
        rows.append(
            (
                cursor.get_slice(0).decode("utf-8"),
                cursor.get_slice(1).decode("utf-8"),
                cursor.get_slice(2).decode("utf-8"),
                cursor.get_double(3),
                cursor.get_slice(4).decode("utf-8"),
                cursor.get_long(5),
            )
        )

    assert rows == [
        ("USDT", SENDER, RECEIVER, 1e18, h32("a1"), 100),
        (f"ERC20({UNKNOWN_TOKEN})", RECEIVER, SENDER, 5.0, h32("a2"), 100),
    ]
    assert not cursor.advance_next_position()
    assert not cursor.advance_next_position()


def test_erc20_without_transfers(block, logs, config):
    columns = get_column_handles(EthereumTable.ERC20)
    cursor = EthereumRecordCursor(
        columns, block, EthereumTable.ERC20, logs=logs[:1], config=config
    )

    assert not cursor.advance_next_position()
    assert not cursor.advance_next_position()


def test_logs_are_fetched_lazily(block, logs, config):
    client = FakeClient(logs)
    columns = get_column_handles(EthereumTable.ERC20)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.ERC20, client=client, config=config)

    assert client.calls == 0
    assert cursor.advance_next_position()
    assert cursor.advance_next_position()
    assert not cursor.advance_next_position()
    assert client.calls == 1


def test_logs_are_fetched_eagerly(block, logs):
    client = FakeClient(logs)
    config = CursorConfig(default_timezone="UTC", lazy_logs=False)
    columns = get_column_handles(EthereumTable.ERC20)

    EthereumRecordCursor(columns, block, EthereumTable.ERC20, client=client, config=config)

    assert client.calls == 1


def test_column_order_resolves_to_same_fields(block, config):
    declared = get_column_handles(EthereumTable.TRANSACTION)
    shuffled = list(reversed(declared))

    first = EthereumRecordCursor(declared, block, EthereumTable.TRANSACTION, config=config)
    second = EthereumRecordCursor(shuffled, block, EthereumTable.TRANSACTION, config=config)

    assert first.advance_next_position()
    assert second.advance_next_position()

    last = len(declared) - 1
    for i, column in enumerate(declared):
        assert second.get_type(last - i) == column.type
        assert first.is_null(i) == second.is_null(last - i)
        if first.is_null(i):
            continue
        if column.name in ("tx_value", "tx_gas", "tx_gas_price"):
            assert first.get_double(i) == second.get_double(last - i)
        elif column.name in ("tx_nonce", "tx_block_number", "tx_transaction_index"):
            assert first.get_long(i) == second.get_long(last - i)
        else:
            assert first.get_slice(i) == second.get_slice(last - i)


def test_requested_subset(block, config):
    columns = get_column_handles(EthereumTable.BLOCK, ["block_uncles", "block_number"])
    cursor = EthereumRecordCursor(columns, block, EthereumTable.BLOCK, config=config)

    assert cursor.advance_next_position()
    assert cursor.get_object(0).to_pylist() == [h32("0f")]
    assert cursor.get_long(1) == 100


def test_invalid_access(block, config):
    columns = get_column_handles(EthereumTable.BLOCK)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.BLOCK, config=config)
    assert cursor.advance_next_position()

    with pytest.raises(ValueError):
        cursor.get_type(len(columns))
    with pytest.raises(ShapeMismatchError):
        cursor.get_long(16)
    with pytest.raises(ValueError):
        get_column_handles(EthereumTable.BLOCK, ["no_such_column"])
    with pytest.raises(ValueError):
        EthereumRecordCursor(columns, None, EthereumTable.BLOCK, config=config)


def test_oversized_transfer_amount(block, config):
    log = transfer_log(
        [TRANSFER_EVENT_TOPIC, address_topic(SENDER), address_topic(RECEIVER)],
        "0x" + "ff" * 160,
    )
    columns = get_column_handles(EthereumTable.ERC20)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.ERC20, logs=[log], config=config)

    assert cursor.advance_next_position()
    assert cursor.get_double(3) == math.inf


def test_eager_logs_only_for_transfers(block, logs):
    config = CursorConfig(default_timezone="UTC", lazy_logs=False)

    for table in (EthereumTable.BLOCK, EthereumTable.TRANSACTION):
        client = FakeClient(logs)
        cursor = EthereumRecordCursor(get_column_handles(table), block, table, client=client, config=config)

        while cursor.advance_next_position():
            pass

        assert client.calls == 0


def test_scalar_getters_reject_structural_columns(block, config):
    columns = get_column_handles(EthereumTable.BLOCK)
    cursor = EthereumRecordCursor(columns, block, EthereumTable.BLOCK, config=config)
    assert cursor.advance_next_position()

    for getter in (cursor.get_boolean, cursor.get_long, cursor.get_double, cursor.get_slice):
        with pytest.raises(ShapeMismatchError):
            getter(16)
