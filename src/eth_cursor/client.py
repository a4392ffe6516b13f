import logging
from typing import List, Union

from web3 import Web3

from .models import Block, Log

logger = logging.getLogger(__name__)


class NodeClient:
    """Fetches decoded blocks and logs from an ethereum JSON-RPC node"""

    def __init__(self, rpc_url: str, request_timeout_seconds: float = 30.0):
        self.rpc_url = rpc_url
        self.web3 = Web3(
            Web3.HTTPProvider(
                rpc_url, request_kwargs={"timeout": request_timeout_seconds}
            )
        )

    def get_block(self, block_identifier: Union[int, str] = "latest") -> Block:
        logger.debug(f"fetching block {block_identifier} from {self.rpc_url}")
        data = self.web3.eth.get_block(block_identifier, full_transactions=True)
        return Block.from_rpc(data)

    def get_logs(self, block: Block) -> List[Log]:
        logger.debug(f"fetching logs of block {block.number} ({block.hash})")
        entries = self.web3.eth.get_logs({"blockHash": block.hash})
        return [Log.from_rpc(entry) for entry in entries]


__all__ = ["NodeClient"]
