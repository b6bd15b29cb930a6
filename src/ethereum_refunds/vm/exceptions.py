"""
Exceptions specific to message execution.
"""

from typing import Final, Optional

from ..exceptions import EthereumException


class ExceptionalHalt(EthereumException):
    """
    Indicates that execution has halted for a reason other than the contract
    deliberately rejecting the call.
    """


class StackDepthLimitError(ExceptionalHalt):
    """
    Raised when a message would nest deeper than `STACK_DEPTH_LIMIT`.
    """


class WriteInStaticContext(ExceptionalHalt):
    """
    Raised when a read-only message attempts to write to storage, emit a log
    or move value.
    """


class InvalidFunction(ExceptionalHalt):
    """
    Raised when a message names a function the target does not expose, or
    sends plain value to a contract without a `receive` hook.
    """

    function: Final[Optional[str]]
    """
    Signature of the missing function, `None` for plain value transfers.
    """

    def __init__(self, function: Optional[str]):
        if function is None:
            super().__init__("contract does not accept plain value transfers")
        else:
            super().__init__(f"unknown function `{function}`")
        self.function = function


class NonPayableFunction(ExceptionalHalt):
    """
    Raised when value is sent to a function that does not accept it.
    """


class InvalidArguments(ExceptionalHalt):
    """
    Raised when a message carries the wrong number of arguments for the
    function it calls.
    """


class Revert(EthereumException):
    """
    Raised by contract code to reject a call. Subclasses describe the
    reason.
    """


class TransferFailed(Revert):
    """
    Raised when a value transfer or nested call made by a contract fails.
    """

    cause: Final[EthereumException]
    """
    The error that made the nested message fail.
    """

    def __init__(self, cause: EthereumException):
        super().__init__(f"nested call failed: {cause!r}")
        self.cause = cause


class AddressCollision(ExceptionalHalt):
    """
    Raised when a contract would be created at an address that is already in
    use.
    """
