"""
Transactions are atomic units of work created externally to the ledger and
submitted to be executed. A transaction either creates a contract, calls an
external function of one, or sends plain value to an account.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union

from ethereum_types.bytes import Bytes0
from ethereum_types.numeric import U256, Uint

from .exceptions import (
    InsufficientBalanceError,
    InvalidTransaction,
    NonceMismatchError,
)
from .fork_types import Address
from .state import State, get_account

if TYPE_CHECKING:
    from .contracts import Contract


@dataclass
class Transaction:
    """
    A request from an externally owned account.

    `to` is empty for contract creation, in which case `code` holds the
    contract to install and `arguments` are passed to its constructor.
    """

    sender: Address
    to: Union[Bytes0, Address]
    value: U256 = U256(0)
    function: Optional[str] = None
    arguments: Tuple[Any, ...] = ()
    code: Optional["Contract"] = None
    nonce: Optional[Uint] = None


def validate_transaction(state: State, tx: Transaction) -> None:
    """
    Check that `tx` can be included in a block.

    Raises
    ------
    InvalidTransaction :
        If the sender is a contract, creation carries no code, the nonce does
        not match or the sender cannot pay the value.
    """
    sender_account = get_account(state, tx.sender)
    if sender_account.code is not None:
        raise InvalidTransaction("sender is not an externally owned account")
    if isinstance(tx.to, Bytes0) and tx.code is None:
        raise InvalidTransaction("contract creation without code")
    if tx.nonce is not None and tx.nonce != sender_account.nonce:
        raise NonceMismatchError(sender_account.nonce, tx.nonce)
    if sender_account.balance < tx.value:
        raise InsufficientBalanceError(sender_account.balance, tx.value)
