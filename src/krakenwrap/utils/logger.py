# src/krakenwrap/utils/logger.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from colorama import Fore, Style

_LOGGER_NAME = "krakenwrap"
_BANNER_WIDTH = 104


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def setup_logger(log_file: Union[str, Path, None] = "krakenwrap.log") -> logging.Logger:
    """
    Configure the root 'krakenwrap' logger:
      - INFO to console
      - DEBUG to file (krakenwrap.log), unless log_file is None
    Idempotent: safe to call multiple times.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if getattr(setup_logger, "_configured", False):
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove any pre-existing handlers (only for our logger)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file is not None:
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    setup_logger._configured = True  # type: ignore[attr-defined]
    return logger


# -------- Banners ------------------------------------------------------------

def format_banner(message: str, symbol: str) -> str:
    """Frame a message in a three-line box drawn with `symbol`."""
    width = max(_BANNER_WIDTH, len(message) + 20)
    edge = symbol * width
    inner = width - 10
    middle = symbol * 5 + message.center(inner) + symbol * 5
    return "\n".join(["", edge, middle, edge, ""])


def _banner(message: str, symbol: str, color: str = "") -> None:
    text = format_banner(message, symbol)
    if color:
        text = f"{color}{text}{Style.RESET_ALL}"
    print(text, file=sys.stderr, flush=True)


def comment(message: str) -> None:
    get_logger().debug(message)
    _banner(message, "-")


def warning(message: str) -> None:
    get_logger().warning(message)
    _banner(message, "*", Fore.YELLOW)


def error(message: str) -> None:
    get_logger().error(message)
    _banner(message, "*", Fore.RED)


def announcement(message: str) -> None:
    get_logger().debug(message)
    _banner(message, "#", Fore.CYAN)


def success(message: str) -> None:
    get_logger().info(f"{Fore.GREEN}{message}{Style.RESET_ALL}")
