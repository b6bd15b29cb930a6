"""
Error types common to the whole ledger.
"""

from typing import Final

from ethereum_types.numeric import U256, Uint


class EthereumException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown during normal
    operation.
    """


class InvalidBlock(EthereumException):
    """
    Thrown when the chain is asked to move to a block that cannot follow the
    current one.
    """


class InvalidTransaction(EthereumException):
    """
    Thrown when a transaction being processed is found to be invalid.
    """


class InsufficientBalanceError(InvalidTransaction):
    """
    Thrown when value cannot be moved because the sending account does not
    hold enough native currency.
    """

    balance: Final[U256]
    """
    Balance of the sending account.
    """

    amount: Final[U256]
    """
    Amount that was to be moved.
    """

    def __init__(self, balance: U256, amount: U256):
        super().__init__(f"insufficient balance ({balance} < {amount})")
        self.balance = balance
        self.amount = amount


class NonceMismatchError(InvalidTransaction):
    """
    Thrown when a transaction's nonce does not match the expected nonce for the
    sender.
    """

    expected: Final[Uint]
    actual: Final[Uint]

    def __init__(self, expected: Uint, actual: Uint):
        super().__init__(f"expected nonce {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
