"""
Errors raised by the base token contracts.
"""

from typing import Final, Optional

from ethereum_types.numeric import U256

from ..fork_types import Address
from ..vm.exceptions import Revert


class TokenError(Revert):
    """
    Base class of errors raised by token contracts.
    """


class InsufficientHolding(TokenError):
    """
    The account does not hold the amount of tokens an operation needs.
    """

    holder: Final[Address]
    """
    Account whose holding was checked.
    """

    requested: Final[U256]
    """
    Amount the operation needed.
    """

    held: Final[U256]
    """
    Amount the account holds.
    """

    def __init__(self, holder: Address, requested: U256, held: U256):
        super().__init__(
            f"0x{holder.hex()} holds {held}, {requested} requested"
        )
        self.holder = holder
        self.requested = requested
        self.held = held


class InsufficientAllowance(TokenError):
    """
    The spender has not been approved for the amount it tries to move.
    """


class Unauthorized(TokenError):
    """
    The caller is neither the owner nor approved for the operation.
    """

    caller: Final[Address]

    def __init__(self, caller: Address, reason: str = "not authorized"):
        super().__init__(f"0x{caller.hex()}: {reason}")
        self.caller = caller


class NonexistentToken(TokenError):
    """
    The token identifier has never been issued, or no longer exists.
    """

    token_id: Final[U256]

    def __init__(self, token_id: U256):
        super().__init__(f"token {token_id} does not exist")
        self.token_id = token_id


class TokenAlreadyMinted(TokenError):
    """
    The token identifier has already been issued.
    """

    token_id: Final[U256]

    def __init__(self, token_id: U256):
        super().__init__(f"token {token_id} was already issued")
        self.token_id = token_id


class InvalidRecipient(TokenError):
    """
    Tokens cannot be sent to the recipient: it is the zero address, or a
    contract that did not accept them.
    """

    recipient: Final[Optional[Address]]

    def __init__(self, recipient: Optional[Address], reason: str):
        super().__init__(reason)
        self.recipient = recipient


class MismatchedArguments(TokenError):
    """
    Batch arguments that must line up have different lengths.
    """


class SupplyOverflow(TokenError):
    """
    Minting would push a supply past the largest representable amount.
    """
