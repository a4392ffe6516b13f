import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .metadata import H20_BYTE_HASH_STRING_LENGTH, H32_BYTE_HASH_STRING_LENGTH
from .models import Log

logger = logging.getLogger(__name__)

# keccak256("Transfer(address,address,uint256)")
TRANSFER_EVENT_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

# topic0 + from + to + value
TRANSFER_EVENT_FIELD_COUNT = 4

_WORD_LENGTH = 64


class Erc20Token(str, Enum):
    USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"
    USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
    DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
    WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
    WBTC = "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"
    LINK = "0x514910771af9ca656af840dff83e8264ecf986ca"
    MKR = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
    SHIB = "0x95ad61b0a150d79219dcf64e1e6cc01f0b64c4ce"


TOKEN_LOOKUP: Dict[str, Erc20Token] = {token.value: token for token in Erc20Token}


@dataclass(frozen=True)
class TransferLog:
    """A transfer log with exactly three topics and the amount word as data"""

    log: Log
    topics: List[str]
    data: str


def token_label(address: str) -> str:
    token = TOKEN_LOOKUP.get(address.lower())
    if token is not None:
        return token.name
    return f"ERC20({address})"


def h32_to_h20(h32: str) -> str:
    return "0x" + h32[H32_BYTE_HASH_STRING_LENGTH - H20_BYTE_HASH_STRING_LENGTH + 2 :]


def hex_to_double(data: str) -> float:
    digits = data[2:] if data[:2].lower() == "0x" else data
    if not digits:
        return 0.0
    try:
        return float(int(digits, 16))
    except OverflowError:
        return math.inf


def _data_word_count(data: str) -> int:
    return max(len(data) - 2, 0) // _WORD_LENGTH


def is_transfer_event(log: Log) -> bool:
    return len(log.topics) > 0 and log.topics[0].lower() == TRANSFER_EVENT_TOPIC


def normalize_transfer(log: Log) -> Optional[TransferLog]:
    """Move unindexed transfer fields from the data payload into topics.

    Returns None when the log is not a transfer event, or when its topic
    count plus data word count does not add up to the four transfer fields.
    """
    if not is_transfer_event(log):
        return None

    topics = list(log.topics)
    data = log.data

    if (
        len(topics) < 3
        and len(topics) + _data_word_count(data) != TRANSFER_EVENT_FIELD_COUNT
    ):
        logger.debug(
            f"skipping non-conforming transfer log in tx {log.transaction_hash}: "
            f"{len(topics)} topics, {_data_word_count(data)} data words"
        )
        return None

    if len(topics) < 3:
        payload = data[2:]
        words = iter(
            payload[i : i + _WORD_LENGTH] for i in range(0, len(payload), _WORD_LENGTH)
        )
        while len(topics) < 3:
            topics.append("0x" + next(words))
        data = "0x" + next(words)

    return TransferLog(log=log, topics=topics, data=data)


__all__ = [
    "TRANSFER_EVENT_TOPIC",
    "Erc20Token",
    "TOKEN_LOOKUP",
    "TransferLog",
    "token_label",
    "h32_to_h20",
    "hex_to_double",
    "is_transfer_event",
    "normalize_transfer",
]
