"""
State
^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

The state contains all information that is preserved between transactions.

It consists of the accounts, keyed by address, and a storage mapping for
each contract. Storage keys are tuples whose first element names the
variable (for example `("balances", holder)`), and values are `U256`,
`Address` or `bool`.

There is a distinction between an account that does not exist and
`EMPTY_ACCOUNT`.
"""
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Callable,
    Dict,
    Hashable,
    List,
    Optional,
    Tuple,
    Union,
)

from ethereum_types.frozen import modify
from ethereum_types.numeric import U256, Uint

from .exceptions import InsufficientBalanceError
from .fork_types import EMPTY_ACCOUNT, Account, Address

if TYPE_CHECKING:
    from .contracts import Contract

StorageKey = Tuple[Hashable, ...]
StorageValue = Union[U256, Address, bool]
Storage = Dict[StorageKey, StorageValue]


@dataclass
class State:
    """
    Contains all information that is preserved between transactions.
    """

    _accounts: Dict[Address, Account] = field(default_factory=dict)
    _storage: Dict[Address, Storage] = field(default_factory=dict)
    _snapshots: List[
        Tuple[Dict[Address, Account], Dict[Address, Storage]]
    ] = field(default_factory=list)


def begin_transaction(state: State) -> None:
    """
    Start a state transaction.

    Transactions are entirely implicit and can be nested. Accounts are frozen
    and storage values immutable, so copying the containers is enough.

    Parameters
    ----------
    state : State
        The state.
    """
    state._snapshots.append(
        (
            dict(state._accounts),
            {k: dict(s) for (k, s) in state._storage.items()},
        )
    )


def commit_transaction(state: State) -> None:
    """
    Commit a state transaction.

    Parameters
    ----------
    state : State
        The state.
    """
    state._snapshots.pop()


def rollback_transaction(state: State) -> None:
    """
    Rollback a state transaction, resetting the state to the point when the
    corresponding `begin_transaction()` call was made.

    Parameters
    ----------
    state : State
        The state.
    """
    state._accounts, state._storage = state._snapshots.pop()


def in_transaction(state: State) -> bool:
    """
    Whether a state transaction is currently open.
    """
    return bool(state._snapshots)


def get_account(state: State, address: Address) -> Account:
    """
    Get the `Account` object at an address. Returns `EMPTY_ACCOUNT` if there
    is no account at the address.

    Use `get_account_optional()` if you care about the difference between a
    non-existent account and `EMPTY_ACCOUNT`.

    Parameters
    ----------
    state: `State`
        The state
    address : `Address`
        Address to lookup.

    Returns
    -------
    account : `Account`
        Account at address.
    """
    account = get_account_optional(state, address)
    if account is None:
        return EMPTY_ACCOUNT
    return account


def get_account_optional(state: State, address: Address) -> Optional[Account]:
    """
    Get the `Account` object at an address. Returns `None` (rather than
    `EMPTY_ACCOUNT`) if there is no account at the address.
    """
    return state._accounts.get(address)


def set_account(
    state: State, address: Address, account: Optional[Account]
) -> None:
    """
    Set the `Account` object at an address. Setting to `None` deletes
    the account (but not its storage).
    """
    if account is None:
        state._accounts.pop(address, None)
    else:
        state._accounts[address] = account


def account_exists(state: State, address: Address) -> bool:
    """
    Checks if an account exists in the state.
    """
    return get_account_optional(state, address) is not None


def account_has_code(state: State, address: Address) -> bool:
    """
    Checks if the account at `address` is a contract.
    """
    return get_account(state, address).code is not None


def modify_state(
    state: State, address: Address, f: Callable[[Account], None]
) -> None:
    """
    Modify an `Account` in the `State`.
    """
    set_account(state, address, modify(get_account(state, address), f))


def move_ether(
    state: State,
    sender_address: Address,
    recipient_address: Address,
    amount: U256,
) -> None:
    """
    Move funds between accounts.

    Raises `InsufficientBalanceError` without touching either account when
    the sender cannot cover `amount`.
    """
    sender_balance = get_account(state, sender_address).balance
    if sender_balance < amount:
        raise InsufficientBalanceError(sender_balance, amount)

    def reduce_sender_balance(sender: Account) -> None:
        sender.balance -= amount

    def increase_recipient_balance(recipient: Account) -> None:
        recipient.balance += amount

    modify_state(state, sender_address, reduce_sender_balance)
    modify_state(state, recipient_address, increase_recipient_balance)


def set_account_balance(state: State, address: Address, amount: U256) -> None:
    """
    Sets the balance of an account.
    """

    def set_balance(account: Account) -> None:
        account.balance = amount

    modify_state(state, address, set_balance)


def increment_nonce(state: State, address: Address) -> None:
    """
    Increments the nonce of an account.
    """

    def increase_nonce(sender: Account) -> None:
        sender.nonce += Uint(1)

    modify_state(state, address, increase_nonce)


def set_code(
    state: State, address: Address, code: Optional["Contract"]
) -> None:
    """
    Sets the contract object of the account at `address`.
    """

    def write_code(sender: Account) -> None:
        sender.code = code

    modify_state(state, address, write_code)


def get_storage(
    state: State, address: Address, key: StorageKey
) -> Optional[StorageValue]:
    """
    Get a value at a storage key on an account. Returns `None` if the
    storage key has not been set previously.
    """
    storage = state._storage.get(address)
    if storage is None:
        return None
    return storage.get(key)


def set_storage(
    state: State,
    address: Address,
    key: StorageKey,
    value: Optional[StorageValue],
) -> None:
    """
    Set a value at a storage key on an account. Setting to `None` deletes
    the key.
    """
    storage = state._storage.setdefault(address, {})
    if value is None:
        storage.pop(key, None)
    else:
        storage[key] = value
    if not storage:
        del state._storage[address]


def destroy_storage(state: State, address: Address) -> None:
    """
    Completely remove the storage at `address`.
    """
    state._storage.pop(address, None)
