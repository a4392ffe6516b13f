import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pytz
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class EthereumTable(str, Enum):
    BLOCK = "block"
    TRANSACTION = "transaction"
    ERC20 = "erc20"


def default_timezone_name() -> str:
    """Timezone of the host process, used by date and timestamp encoding"""
    return os.environ.get("ETH_CURSOR_TIMEZONE", os.environ.get("TZ", "UTC"))


@dataclass
class CursorConfig:
    rpc_url: Optional[str] = None
    default_timezone: str = field(default_factory=default_timezone_name)
    request_timeout_seconds: float = 30.0
    lazy_logs: bool = True
    log_level: str = "INFO"

    def timezone(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.default_timezone)


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(dotenv_path: Optional[str] = None) -> CursorConfig:
    """Build a CursorConfig from the environment, reading a .env file first"""
    load_dotenv(dotenv_path)

    timeout = os.environ.get("ETH_CURSOR_REQUEST_TIMEOUT")

    config = CursorConfig(
        rpc_url=os.environ.get("ETH_CURSOR_RPC_URL"),
        default_timezone=default_timezone_name(),
        request_timeout_seconds=float(timeout) if timeout is not None else 30.0,
        lazy_logs=_env_bool(os.environ.get("ETH_CURSOR_LAZY_LOGS"), True),
        log_level=os.environ.get("LOGLEVEL", "INFO").upper(),
    )

    logger.debug(f"Loaded cursor config: {config}")

    return config


__all__ = ["EthereumTable", "CursorConfig", "default_timezone_name", "load_config"]
