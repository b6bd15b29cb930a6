"""
Message Execution
^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

The environment and bookkeeping shared by every message executed on the
ledger. Contracts are Python objects (see `ethereum_refunds.contracts`); a
`Frame` records what one message did while their code ran.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union

from ethereum_types.bytes import Bytes0
from ethereum_types.numeric import U64, U256, Uint

from ..exceptions import EthereumException
from ..fork_types import Address, Log
from ..state import State

if TYPE_CHECKING:
    from ..contracts import Contract

__all__ = (
    "BlockEnvironment",
    "TransactionEnvironment",
    "Message",
    "Frame",
    "incorporate_child_on_success",
)


@dataclass
class BlockEnvironment:
    """
    Items external to the execution, provided by the block being built.
    """

    chain_id: U64
    state: State
    number: Uint


@dataclass
class TransactionEnvironment:
    """
    Items that are used by every message of a transaction.
    """

    origin: Address
    index_in_block: Uint


@dataclass
class Message:
    """
    Items that are used by contract creation or message call.

    `function` is the signature of the external function to run, for example
    `"refund(uint256)"`, and `arguments` its positional arguments. A message
    without a function is a plain value transfer.
    """

    block_env: BlockEnvironment
    tx_env: TransactionEnvironment
    caller: Address
    target: Union[Bytes0, Address]
    current_target: Address
    value: U256
    function: Optional[str]
    arguments: Tuple[Any, ...]
    code: Optional["Contract"]
    depth: Uint
    should_transfer_value: bool
    is_static: bool
    parent_frame: Optional["Frame"]


@dataclass
class Frame:
    """The record of one message while its code runs."""

    message: Message
    logs: Tuple[Log, ...]
    output: Any
    error: Optional[EthereumException]

    @property
    def state(self) -> State:
        """
        State the message executes against.
        """
        return self.message.block_env.state

    @property
    def block_number(self) -> Uint:
        """
        Number of the block the message executes in.
        """
        return self.message.block_env.number

    @property
    def address(self) -> Address:
        """
        Address of the contract whose code is running.
        """
        return self.message.current_target

    @property
    def caller(self) -> Address:
        """
        Immediate caller of the message.
        """
        return self.message.caller


def incorporate_child_on_success(frame: Frame, child_frame: Frame) -> None:
    """
    Incorporate the state of a successful `child_frame` into the parent
    `frame`.

    Parameters
    ----------
    frame :
        The parent `Frame`.
    child_frame :
        The child frame to incorporate.
    """
    frame.logs += child_frame.logs

