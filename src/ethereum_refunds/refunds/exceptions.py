"""
Errors raised by the refundable token contracts.
"""

from typing import Final

from ethereum_types.numeric import U256, Uint

from ..contracts.guard import ReentrancyViolation
from ..vm.exceptions import Revert

__all__ = (
    "RefundError",
    "RefundWindowClosed",
    "RefundWindowOpen",
    "SaleClosed",
    "IncorrectPayment",
    "DeadlineNotMonotonic",
    "ReentrancyViolation",
)


class RefundError(Revert):
    """
    Base class of errors specific to refundable tokens.
    """


class RefundWindowClosed(RefundError):
    """
    The refund deadline of the unit has been reached.
    """

    deadline: Final[U256]
    """
    Block number from which refunds are rejected.
    """

    block_number: Final[Uint]
    """
    Block the refund was attempted in.
    """

    def __init__(self, deadline: U256, block_number: Uint):
        super().__init__(
            f"refunds closed at block {deadline}, now at block {block_number}"
        )
        self.deadline = deadline
        self.block_number = block_number


class RefundWindowOpen(RefundError):
    """
    The escrow cannot be claimed while refunds are still possible.
    """

    deadline: Final[U256]
    block_number: Final[Uint]

    def __init__(self, deadline: U256, block_number: Uint):
        super().__init__(
            f"refunds open until block {deadline}, now at block {block_number}"
        )
        self.deadline = deadline
        self.block_number = block_number


class SaleClosed(RefundError):
    """
    Units can no longer be purchased, because the refund deadline they would
    be issued with has been reached or no sale has been opened.
    """


class IncorrectPayment(RefundError):
    """
    The value sent with a purchase differs from its price.
    """

    expected: Final[Uint]
    received: Final[U256]

    def __init__(self, expected: Uint, received: U256):
        super().__init__(f"expected a payment of {expected}, got {received}")
        self.expected = expected
        self.received = received


class DeadlineNotMonotonic(RefundError):
    """
    A new sale phase would end before the previous one.
    """
