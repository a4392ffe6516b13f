import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from .utils import hex_to_int, to_hex_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transaction:
    hash: Optional[str] = None
    nonce: Optional[int] = None
    block_hash: Optional[str] = None
    block_number: Optional[int] = None
    transaction_index: Optional[int] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    value: Optional[int] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    input: Optional[str] = None

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Transaction":
        return cls(
            hash=to_hex_str(data.get("hash")),
            nonce=hex_to_int(data.get("nonce")),
            block_hash=to_hex_str(data.get("blockHash")),
            block_number=hex_to_int(data.get("blockNumber")),
            transaction_index=hex_to_int(data.get("transactionIndex")),
            from_address=data.get("from"),
            to_address=data.get("to"),
            value=hex_to_int(data.get("value")),
            gas=hex_to_int(data.get("gas")),
            gas_price=hex_to_int(data.get("gasPrice")),
            input=to_hex_str(data.get("input")),
        )


def transaction_suppliers(tx: Transaction) -> List[Callable[[], Any]]:
    """Field suppliers of a transaction, in transaction column order"""
    return [
        lambda: tx.hash,
        lambda: tx.nonce,
        lambda: tx.block_hash,
        lambda: tx.block_number,
        lambda: tx.transaction_index,
        lambda: tx.from_address,
        lambda: tx.to_address,
        lambda: tx.value,
        lambda: tx.gas,
        lambda: tx.gas_price,
        lambda: tx.input,
    ]


@dataclass(frozen=True)
class Block:
    number: Optional[int] = None
    hash: Optional[str] = None
    parent_hash: Optional[str] = None
    nonce_raw: Optional[str] = None
    sha3_uncles: Optional[str] = None
    logs_bloom: Optional[str] = None
    transactions_root: Optional[str] = None
    state_root: Optional[str] = None
    miner: Optional[str] = None
    difficulty: Optional[int] = None
    total_difficulty: Optional[int] = None
    size: Optional[int] = None
    extra_data: Optional[str] = None
    gas_limit: Optional[int] = None
    gas_used: Optional[int] = None
    timestamp: Optional[int] = None
    transactions: List[Transaction] = field(default_factory=list)
    uncles: List[str] = field(default_factory=list)

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Block":
        transactions = []
        for tx in data.get("transactions") or []:
            if not isinstance(tx, Mapping):
                raise ValueError(
                    "block must be fetched with full transaction objects, got a transaction hash"
                )
            transactions.append(Transaction.from_rpc(tx))

        return cls(
            number=hex_to_int(data.get("number")),
            hash=to_hex_str(data.get("hash")),
            parent_hash=to_hex_str(data.get("parentHash")),
            nonce_raw=to_hex_str(data.get("nonce")),
            sha3_uncles=to_hex_str(data.get("sha3Uncles")),
            logs_bloom=to_hex_str(data.get("logsBloom")),
            transactions_root=to_hex_str(data.get("transactionsRoot")),
            state_root=to_hex_str(data.get("stateRoot")),
            miner=data.get("miner"),
            difficulty=hex_to_int(data.get("difficulty")),
            total_difficulty=hex_to_int(data.get("totalDifficulty")),
            size=hex_to_int(data.get("size")),
            extra_data=to_hex_str(data.get("extraData")),
            gas_limit=hex_to_int(data.get("gasLimit")),
            gas_used=hex_to_int(data.get("gasUsed")),
            timestamp=hex_to_int(data.get("timestamp")),
            transactions=transactions,
            uncles=[to_hex_str(u) for u in data.get("uncles") or []],
        )


@dataclass(frozen=True)
class Log:
    address: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    data: str = "0x"
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    log_index: Optional[int] = None

    @classmethod
    def from_rpc(cls, data: Mapping[str, Any]) -> "Log":
        return cls(
            address=data.get("address"),
            topics=[to_hex_str(t) for t in data.get("topics") or []],
            data=to_hex_str(data.get("data")) or "0x",
            transaction_hash=to_hex_str(data.get("transactionHash")),
            block_number=hex_to_int(data.get("blockNumber")),
            block_hash=to_hex_str(data.get("blockHash")),
            log_index=hex_to_int(data.get("logIndex")),
        )


__all__ = ["Transaction", "Block", "Log", "transaction_suppliers"]
