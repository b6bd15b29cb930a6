"""
Ledger Types
^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Types re-used throughout the ledger.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ethereum_types.bytes import Bytes, Bytes20
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U256, Uint

from .crypto.hash import Hash32

if TYPE_CHECKING:
    from .contracts import Contract

Address = Bytes20

ZERO_ADDRESS = Address(b"\x00" * 20)
"""
The address that tokens are minted from and burned to.
"""


@slotted_freezable
@dataclass
class Account:
    """
    State associated with an address.

    `code` is the contract object that runs when the account receives a
    message, or `None` for accounts controlled by a key holder.
    """

    nonce: Uint
    balance: U256
    code: Optional["Contract"]


EMPTY_ACCOUNT = Account(
    nonce=Uint(0),
    balance=U256(0),
    code=None,
)


@slotted_freezable
@dataclass
class Log:
    """
    Data record produced during the execution of a transaction.
    """

    address: Address
    topics: Tuple[Hash32, ...]
    data: Bytes
