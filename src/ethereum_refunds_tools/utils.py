"""
Utilities for the refund tools
"""

import logging
from decimal import Decimal
from typing import Any, Union

from eth_utils import to_wei

from ethereum_refunds.fork_types import Address
from ethereum_refunds.trace import (
    LogEmitted,
    MessageEnd,
    MessageStart,
    TraceEvent,
    TransactionEnd,
    TransactionStart,
)


def parse_amount(value: Union[int, str]) -> int:
    """
    Read an amount of wei from an int, a decimal or hex string, or a string
    with a denomination such as `"0.1 ether"`.
    """
    if isinstance(value, bool):
        raise ValueError("expected an amount, got a bool")
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.startswith("0x"):
        return int(text[2:], 16)
    number, _, unit = text.partition(" ")
    if unit:
        return int(to_wei(Decimal(number), unit.strip()))
    return int(text)


def get_stream_logger(name: str, level: int = logging.INFO) -> Any:
    """
    Get a logger that writes to stderr.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    logger.setLevel(level=level)

    return logger


def _short(address: Address) -> str:
    return "0x" + address.hex()[:8]


class LoggingTracer:
    """
    Tracer writing one line per trace event, indented by call depth.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def __call__(self, frame: object, event: TraceEvent) -> None:
        if isinstance(event, TransactionStart):
            self.logger.info(
                "tx from %s: %s", _short(event.sender), event.function
            )
        elif isinstance(event, TransactionEnd):
            if event.error is None:
                self.logger.info("tx ok: %r", event.output)
            else:
                self.logger.info("tx failed: %r", event.error)
        elif isinstance(event, MessageStart):
            self.logger.info(
                "%s-> %s %s value=%s",
                "  " * int(event.depth),
                _short(event.target),
                event.function or "<receive>",
                event.value,
            )
        elif isinstance(event, MessageEnd):
            if event.error is not None:
                self.logger.info(
                    "%s<- %r", "  " * int(event.depth), event.error
                )
        elif isinstance(event, LogEmitted):
            self.logger.info(
                "log %s topic0=0x%s",
                _short(event.log.address),
                event.log.topics[0].hex(),
            )
