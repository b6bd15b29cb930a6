import pytest
from ethereum_types.numeric import U256

from ethereum_refunds.contracts import coerce_arguments
from ethereum_refunds.exceptions import InsufficientBalanceError
from ethereum_refunds.state import (
    State,
    begin_transaction,
    commit_transaction,
    get_account,
    get_storage,
    in_transaction,
    increment_nonce,
    move_ether,
    rollback_transaction,
    set_account_balance,
    set_storage,
)
from tests.helpers import ALICE, BOB


def test_missing_account_is_empty() -> None:
    state = State()
    account = get_account(state, ALICE)
    assert account.balance == 0
    assert account.nonce == 0
    assert account.code is None


def test_rollback_restores_accounts_and_storage() -> None:
    state = State()
    set_account_balance(state, ALICE, U256(10))
    set_storage(state, ALICE, ("key",), U256(1))

    begin_transaction(state)
    assert in_transaction(state)
    move_ether(state, ALICE, BOB, U256(4))
    set_storage(state, ALICE, ("key",), U256(2))
    increment_nonce(state, ALICE)
    rollback_transaction(state)

    assert not in_transaction(state)
    assert get_account(state, ALICE).balance == 10
    assert get_account(state, ALICE).nonce == 0
    assert get_account(state, BOB).balance == 0
    assert get_storage(state, ALICE, ("key",)) == U256(1)


def test_nested_commit_then_rollback() -> None:
    state = State()
    begin_transaction(state)
    begin_transaction(state)
    set_storage(state, ALICE, ("key",), U256(7))
    commit_transaction(state)
    assert get_storage(state, ALICE, ("key",)) == U256(7)
    rollback_transaction(state)
    assert get_storage(state, ALICE, ("key",)) is None


def test_storage_none_deletes() -> None:
    state = State()
    set_storage(state, ALICE, ("key",), True)
    set_storage(state, ALICE, ("key",), None)
    assert get_storage(state, ALICE, ("key",)) is None


def test_coerced_ids_share_storage_keys() -> None:
    token_id, amount = coerce_arguments(
        "refund(uint256,uint256)", (3, U256(4))
    )
    assert type(token_id) is U256
    assert type(amount) is U256

    state = State()
    set_storage(state, ALICE, ("price", token_id), U256(1))
    assert get_storage(state, ALICE, ("price", U256(3))) == U256(1)


def test_move_ether_insufficient_balance() -> None:
    state = State()
    set_account_balance(state, ALICE, U256(3))
    with pytest.raises(InsufficientBalanceError):
        move_ether(state, ALICE, BOB, U256(4))
    assert get_account(state, ALICE).balance == 3
    assert get_account(state, BOB).balance == 0
