import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence

from .. import codec
from ..builders import BlockBuilder
from ..client import NodeClient
from ..config import CursorConfig, EthereumTable
from ..erc20 import TransferLog, h32_to_h20, hex_to_double, normalize_transfer, token_label
from ..errors import ShapeMismatchError
from ..logs import LazyLogIterator
from ..metadata import ColumnHandle
from ..models import Block, Log, transaction_suppliers
from ..serializer import serialize_object
from ..types import ColumnType, ScalarType
from .base import RecordCursor

logger = logging.getLogger(__name__)

Supplier = Callable[[], Any]


def block_suppliers(block: Block) -> List[Supplier]:
    return [
        lambda: block.number,
        lambda: block.hash,
        lambda: block.parent_hash,
        lambda: block.nonce_raw,
        lambda: block.sha3_uncles,
        lambda: block.logs_bloom,
        lambda: block.transactions_root,
        lambda: block.state_root,
        lambda: block.miner,
        lambda: block.difficulty,
        lambda: block.total_difficulty,
        lambda: block.size,
        lambda: block.extra_data,
        lambda: block.gas_limit,
        lambda: block.gas_used,
        lambda: block.timestamp,
        lambda: [tx.hash for tx in block.transactions],
        lambda: block.uncles,
    ]


def transfer_suppliers(transfer: TransferLog) -> List[Supplier]:
    log = transfer.log
    topics = transfer.topics
    data = transfer.data
    return [
        lambda: token_label(log.address),
        lambda: h32_to_h20(topics[1]),
        lambda: h32_to_h20(topics[2]),
        lambda: hex_to_double(data),
        lambda: log.transaction_hash,
        lambda: log.block_number,
    ]


class EthereumRecordCursor(RecordCursor):
    """Cursor over one block, read as the block itself, its transactions or its ERC20 transfers"""

    def __init__(
        self,
        column_handles: Sequence[ColumnHandle],
        block: Block,
        table: EthereumTable,
        client: Optional[NodeClient] = None,
        logs: Optional[Iterable[Log]] = None,
        config: Optional[CursorConfig] = None,
    ):
        if block is None:
            raise ValueError("block is null")

        config = config or CursorConfig()

        self.column_handles = list(column_handles)
        self.block = block
        self.table = EthereumTable(table)
        self.tz = config.timezone()

        self.field_to_column_index = [c.ordinal_position for c in self.column_handles]
        self.suppliers: List[Supplier] = []

        self._block_iter = iter([block])
        self._tx_iter = iter(block.transactions)

        if (
            logs is None
            and client is not None
            and not config.lazy_logs
            and self.table == EthereumTable.ERC20
        ):
            logs = client.get_logs(block)

        if logs is not None:
            self._log_iter = iter(logs)
        else:
            self._log_iter = LazyLogIterator(block, client)

        self._exhausted = False

        logger.debug(
            f"created {self.table.value} cursor for block {block.number} "
            f"with columns {[c.name for c in self.column_handles]}"
        )

    @property
    def completed_bytes(self) -> int:
        return self.block.size or 0

    def get_type(self, field: int) -> ColumnType:
        if field < 0 or field >= len(self.column_handles):
            raise ValueError("Invalid field index")
        return self.column_handles[field].type

    def advance_next_position(self) -> bool:
        if self._exhausted:
            return False

        if self.table == EthereumTable.BLOCK:
            suppliers = self._next_block()
        elif self.table == EthereumTable.TRANSACTION:
            suppliers = self._next_transaction()
        elif self.table == EthereumTable.ERC20:
            suppliers = self._next_transfer()
        else:
            raise Exception(f"Unknown table: {self.table}")

        if suppliers is None:
            logger.debug(f"{self.table.value} cursor for block {self.block.number} is exhausted")
            self._exhausted = True
            return False

        self.suppliers = suppliers
        return True

    def _next_block(self) -> Optional[List[Supplier]]:
        block = next(self._block_iter, None)
        if block is None:
            return None
        return block_suppliers(block)

    def _next_transaction(self) -> Optional[List[Supplier]]:
        tx = next(self._tx_iter, None)
        if tx is None:
            return None
        return transaction_suppliers(tx)

    def _next_transfer(self) -> Optional[List[Supplier]]:
        for log in self._log_iter:
            transfer = normalize_transfer(log)
            if transfer is not None:
                return transfer_suppliers(transfer)
        return None

    def _value(self, field: int) -> Any:
        return self.suppliers[self.field_to_column_index[field]]()

    def _scalar_type(self, field: int) -> ScalarType:
        column_type = self.column_handles[field].type
        if not isinstance(column_type, ScalarType):
            raise ShapeMismatchError(
                f"column {self.column_handles[field].name} has structural type {column_type.signature()}"
            )
        return column_type

    def get_boolean(self, field: int) -> bool:
        self._scalar_type(field)
        return codec.boolean_value(self._value(field))

    def get_long(self, field: int) -> int:
        return codec.long_expressed_value(self._value(field), self._scalar_type(field), self.tz)

    def get_double(self, field: int) -> float:
        self._scalar_type(field)
        return codec.double_expressed_value(self._value(field))

    def get_slice(self, field: int) -> bytes:
        return codec.slice_expressed_value(self._value(field), self._scalar_type(field))

    def get_object(self, field: int) -> Any:
        return serialize_object(self.column_handles[field].type, None, self._value(field), self.tz)

    def is_null(self, field: int) -> bool:
        return self._value(field) is None

    def write_field(self, field: int, builder: BlockBuilder) -> None:
        """Serialize the field of the current row into a column builder"""
        serialize_object(self.column_handles[field].type, builder, self._value(field), self.tz)


__all__ = ["EthereumRecordCursor", "block_suppliers", "transfer_suppliers"]
