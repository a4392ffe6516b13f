from .base import RecordCursor
from .ethereum import EthereumRecordCursor

__all__ = ["RecordCursor", "EthereumRecordCursor"]
