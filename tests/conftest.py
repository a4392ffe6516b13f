import logging

import pytest

from eth_cursor.config import CursorConfig
from eth_cursor.erc20 import TRANSFER_EVENT_TOPIC
from eth_cursor.models import Block, Log, Transaction


# Configure logging for tests
@pytest.fixture(autouse=True)
def configure_logging():
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    yield


def h32(byte: str) -> str:
    return "0x" + byte * 32


def address_word(address: str) -> str:
    """32-byte topic word holding a 20-byte address"""
    return "0" * 24 + address[2:]


def address_topic(address: str) -> str:
    return "0x" + address_word(address)


def amount_word(amount: int) -> str:
    return format(amount, "064x")


SENDER = "0x" + "ab" * 20
RECEIVER = "0x" + "cd" * 20
USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
UNKNOWN_TOKEN = "0x" + "12" * 20


@pytest.fixture
def config():
    return CursorConfig(default_timezone="UTC")


@pytest.fixture
def transactions():
    return [
        Transaction(
            hash=h32("a1"),
            nonce=7,
            block_hash=h32("bb"),
            block_number=100,
            transaction_index=0,
            from_address=SENDER,
            to_address=RECEIVER,
            value=10**18,
            gas=21000,
            gas_price=30 * 10**9,
            input="0x",
        ),
        Transaction(
            hash=h32("a2"),
            nonce=8,
            block_hash=h32("bb"),
            block_number=100,
            transaction_index=1,
            from_address=SENDER,
            to_address=None,
            value=0,
            gas=500000,
            gas_price=31 * 10**9,
            input="0x6080",
        ),
    ]


@pytest.fixture
def block(transactions):
    return Block(
        number=100,
        hash=h32("bb"),
        parent_hash=h32("aa"),
        nonce_raw="0x0000000000000042",
        sha3_uncles=h32("cc"),
        logs_bloom="0x" + "00" * 256,
        transactions_root=h32("dd"),
        state_root=h32("ee"),
        miner=SENDER,
        difficulty=2**40,
        total_difficulty=2**70,
        size=1234,
        extra_data="0x",
        gas_limit=30000000,
        gas_used=521000,
        timestamp=1700000000,
        transactions=transactions,
        uncles=[h32("0f")],
    )


def transfer_log(topics, data, address=USDT, tx="a1", block_number=100) -> Log:
    return Log(
        address=address,
        topics=topics,
        data=data,
        transaction_hash=h32(tx),
        block_number=block_number,
    )


@pytest.fixture
def logs():
    return [
        # not a transfer
        transfer_log([h32("99"), address_topic(SENDER)], "0x" + amount_word(1)),
        # indexed from and to
        transfer_log(
            [TRANSFER_EVENT_TOPIC, address_topic(SENDER), address_topic(RECEIVER)],
            "0x" + amount_word(10**18),
        ),
        # transfer signature but the field count does not add up
        transfer_log([TRANSFER_EVENT_TOPIC], "0x" + amount_word(1)),
        # nothing indexed
        transfer_log(
            [TRANSFER_EVENT_TOPIC],
            "0x" + address_word(RECEIVER) + address_word(SENDER) + amount_word(5),
            address=UNKNOWN_TOKEN,
            tx="a2",
        ),
    ]


class FakeClient:
    """Stands in for the node client, counting log fetches"""

    def __init__(self, logs):
        self.logs = logs
        self.calls = 0

    def get_logs(self, block):
        self.calls += 1
        return list(self.logs)
