# You can run this script with:
# python main.py --table erc20 --block 20000000
# The RPC endpoint is read from ETH_CURSOR_RPC_URL (a .env file works too).

import argparse
import logging
import sys

from eth_cursor.config import EthereumTable, load_config
from eth_cursor.client import NodeClient
from eth_cursor.cursors import EthereumRecordCursor
from eth_cursor.logging_setup import setup_logging
from eth_cursor.metadata import get_column_handles
from eth_cursor.record_set import read_polars

logger = logging.getLogger("eth_cursor.main")

DEFAULT_RPC_URL = "https://ethereum-rpc.publicnode.com"


def main():
    parser = argparse.ArgumentParser(description="Read one ethereum block as a table")
    parser.add_argument(
        "--table",
        choices=[t.value for t in EthereumTable],
        default=EthereumTable.BLOCK.value,
        help="Which rows to read from the block",
    )
    parser.add_argument(
        "--block",
        default="latest",
        help="Block number or tag",
    )
    parser.add_argument(
        "--columns",
        required=False,
        help="Comma separated column names, all columns when omitted",
    )
    args = parser.parse_args()

    config = load_config()
    setup_logging(config.log_level)

    rpc_url = config.rpc_url or DEFAULT_RPC_URL
    block_identifier = int(args.block) if args.block.isdigit() else args.block
    table = EthereumTable(args.table)
    names = args.columns.split(",") if args.columns else None

    try:
        client = NodeClient(rpc_url, config.request_timeout_seconds)
        block = client.get_block(block_identifier)
        logger.info(f"fetched block {block.number} with {len(block.transactions)} transactions")

        columns = get_column_handles(table, names)
        cursor = EthereumRecordCursor(columns, block, table, client=client, config=config)

        df = read_polars(cursor, columns)
        logger.info(f"\n{df}")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
