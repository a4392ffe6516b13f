import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Global variables to track logging state
_is_logging_configured = False
_current_log_file: Optional[Path] = None


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> logging.Logger:
    """Configure logging for all modules"""
    global _is_logging_configured, _current_log_file

    if _is_logging_configured:
        return logging.getLogger()

    directory = Path(log_dir)
    directory.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    _current_log_file = directory / f"eth_cursor_{timestamp}.log"

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(_current_log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level.upper())
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Set higher log level for noisy third-party libraries
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _is_logging_configured = True
    return root_logger


def get_current_log_file() -> Optional[Path]:
    """Get the path to the current log file"""
    return _current_log_file


__all__ = ["setup_logging", "get_current_log_file"]
