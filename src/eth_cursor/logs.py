import logging
from typing import Iterator, List, Optional

from .client import NodeClient
from .models import Block, Log

logger = logging.getLogger(__name__)


class LazyLogIterator(Iterator[Log]):
    """Iterates the logs of a block, fetching them from the node on first use"""

    def __init__(self, block: Block, client: Optional[NodeClient]):
        self.block = block
        self.client = client
        self._logs: Optional[Iterator[Log]] = None

    def _fetch(self) -> Iterator[Log]:
        if self.client is None:
            raise ValueError("a node client is required to fetch logs")
        logs: List[Log] = self.client.get_logs(self.block)
        logger.debug(f"fetched {len(logs)} logs for block {self.block.number}")
        return iter(logs)

    def __next__(self) -> Log:
        if self._logs is None:
            self._logs = self._fetch()
        return next(self._logs)


__all__ = ["LazyLogIterator"]
