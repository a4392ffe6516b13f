import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import EthereumTable
from .types import ColumnType, parse_type_signature

logger = logging.getLogger(__name__)

# bumped whenever a column is added, removed or reordered
SCHEMA_VERSION = 1

H8_BYTE_HASH_STRING_LENGTH = 2 + 8 * 2
H20_BYTE_HASH_STRING_LENGTH = 2 + 20 * 2
H32_BYTE_HASH_STRING_LENGTH = 2 + 32 * 2
H256_BYTE_HASH_STRING_LENGTH = 2 + 256 * 2

_H8 = f"varchar({H8_BYTE_HASH_STRING_LENGTH})"
_H20 = f"varchar({H20_BYTE_HASH_STRING_LENGTH})"
_H32 = f"varchar({H32_BYTE_HASH_STRING_LENGTH})"
_H256 = f"varchar({H256_BYTE_HASH_STRING_LENGTH})"


@dataclass(frozen=True)
class ColumnHandle:
    name: str
    type: ColumnType
    ordinal_position: int


_BLOCK_COLUMNS: List[Tuple[str, str]] = [
    ("block_number", "bigint"),
    ("block_hash", _H32),
    ("block_parent_hash", _H32),
    ("block_nonce", _H8),
    ("block_sha3_uncles", _H32),
    ("block_logs_bloom", _H256),
    ("block_transactions_root", _H32),
    ("block_state_root", _H32),
    ("block_miner", _H20),
    ("block_difficulty", "bigint"),
    ("block_total_difficulty", "double"),
    ("block_size", "integer"),
    ("block_extra_data", "varchar"),
    ("block_gas_limit", "double"),
    ("block_gas_used", "double"),
    ("block_timestamp", "bigint"),
    ("block_transactions", f"array({_H32})"),
    ("block_uncles", f"array({_H32})"),
]

_TRANSACTION_COLUMNS: List[Tuple[str, str]] = [
    ("tx_hash", _H32),
    ("tx_nonce", "bigint"),
    ("tx_block_hash", _H32),
    ("tx_block_number", "bigint"),
    ("tx_transaction_index", "integer"),
    ("tx_from", _H20),
    ("tx_to", _H20),
    ("tx_value", "double"),
    ("tx_gas", "double"),
    ("tx_gas_price", "double"),
    ("tx_input", "varchar"),
]

_ERC20_COLUMNS: List[Tuple[str, str]] = [
    ("erc20_token", "varchar"),
    ("erc20_from", _H20),
    ("erc20_to", _H20),
    ("erc20_value", "double"),
    ("erc20_tx_hash", _H32),
    ("erc20_block_number", "bigint"),
]

_TABLE_COLUMNS: Dict[EthereumTable, List[Tuple[str, str]]] = {
    EthereumTable.BLOCK: _BLOCK_COLUMNS,
    EthereumTable.TRANSACTION: _TRANSACTION_COLUMNS,
    EthereumTable.ERC20: _ERC20_COLUMNS,
}


def table_columns(table: EthereumTable) -> List[ColumnHandle]:
    """All columns of a table in declared order"""
    return [
        ColumnHandle(name, parse_type_signature(signature), i)
        for i, (name, signature) in enumerate(_TABLE_COLUMNS[table])
    ]


def get_column_handles(
    table: EthereumTable, names: Optional[Sequence[str]] = None
) -> List[ColumnHandle]:
    """Columns of a table, either all of them or the requested ones in request order"""
    columns = table_columns(table)
    if names is None:
        return columns

    by_name = {c.name: c for c in columns}
    out = []
    for name in names:
        if name not in by_name:
            raise ValueError(f"Unknown column {name} for table {table.value}")
        out.append(by_name[name])

    return out


def row_type_for_transaction() -> ColumnType:
    """Row type matching the transaction column layout"""
    fields = ",".join(
        f"{name[len('tx_'):]} {signature}" for name, signature in _TRANSACTION_COLUMNS
    )
    return parse_type_signature(f"row({fields})")


__all__ = [
    "SCHEMA_VERSION",
    "H8_BYTE_HASH_STRING_LENGTH",
    "H20_BYTE_HASH_STRING_LENGTH",
    "H32_BYTE_HASH_STRING_LENGTH",
    "H256_BYTE_HASH_STRING_LENGTH",
    "ColumnHandle",
    "table_columns",
    "get_column_handles",
    "row_type_for_transaction",
]
