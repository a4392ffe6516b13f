from abc import ABC, abstractmethod
from typing import Any
import logging

from ..types import ColumnType

logger = logging.getLogger(__name__)


class RecordCursor(ABC):
    """Row-by-row cursor driven by a query engine.

    ``advance_next_position`` must return True before any field is read.
    Field indexes address the columns requested for the query.
    """

    @property
    @abstractmethod
    def completed_bytes(self) -> int:
        pass

    @property
    def read_time_nanos(self) -> int:
        return 0

    @abstractmethod
    def get_type(self, field: int) -> ColumnType:
        pass

    @abstractmethod
    def advance_next_position(self) -> bool:
        pass

    @abstractmethod
    def get_boolean(self, field: int) -> bool:
        pass

    @abstractmethod
    def get_long(self, field: int) -> int:
        pass

    @abstractmethod
    def get_double(self, field: int) -> float:
        pass

    @abstractmethod
    def get_slice(self, field: int) -> bytes:
        pass

    @abstractmethod
    def get_object(self, field: int) -> Any:
        pass

    @abstractmethod
    def is_null(self, field: int) -> bool:
        pass

    def close(self) -> None:
        pass
