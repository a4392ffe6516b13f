from . import codec, config, erc20, metadata, serializer, types
from .cursors import EthereumRecordCursor, RecordCursor
from .record_set import read_polars, read_table

__all__ = [
    "codec",
    "config",
    "erc20",
    "metadata",
    "serializer",
    "types",
    "EthereumRecordCursor",
    "RecordCursor",
    "read_table",
    "read_polars",
]
