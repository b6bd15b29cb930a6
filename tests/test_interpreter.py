import pytest
from ethereum_types.numeric import U64, U256, Uint

from ethereum_refunds.chain import (
    BlockChain,
    call,
    deploy,
    get_balance,
    transact,
)
from ethereum_refunds.state import get_account, get_storage
from ethereum_refunds.vm import (
    BlockEnvironment,
    Message,
    TransactionEnvironment,
)
from ethereum_refunds.vm.exceptions import (
    InvalidArguments,
    InvalidFunction,
    NonPayableFunction,
    StackDepthLimitError,
    WriteInStaticContext,
)
from ethereum_refunds.vm.interpreter import STACK_DEPTH_LIMIT, process_message
from tests.helpers import ALICE, BOB, ISSUER, ether
from tests.helpers.contracts import (
    MintableFungible,
    Receiver,
    Recursive,
    Rejecter,
)


def test_value_transfer_between_accounts(chain: BlockChain) -> None:
    receipt = transact(chain, ALICE, BOB, value=ether(1))
    assert receipt.succeeded
    assert get_balance(chain, ALICE) == ether(999)
    assert get_balance(chain, BOB) == ether(1001)
    assert get_account(chain.state, ALICE).nonce == 1


def test_contract_without_receive_rejects_value(chain: BlockChain) -> None:
    rejecter = deploy(chain, ISSUER, Rejecter())
    receipt = transact(chain, ALICE, rejecter, value=ether(1))
    assert isinstance(receipt.error, InvalidFunction)
    assert get_balance(chain, ALICE) == ether(1000)
    assert get_balance(chain, rejecter) == 0


def test_receive_hook_accepts_value(chain: BlockChain) -> None:
    receiver = deploy(chain, ISSUER, Receiver())
    assert transact(chain, ALICE, receiver, value=ether(2)).succeeded
    assert get_balance(chain, receiver) == ether(2)


def test_unknown_function(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, MintableFungible("Token", "TKN"))
    receipt = transact(chain, ALICE, token, "missing()")
    assert isinstance(receipt.error, InvalidFunction)
    assert receipt.error.function == "missing()"


def test_value_to_non_payable_function(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, MintableFungible("Token", "TKN"))
    receipt = transact(
        chain,
        ALICE,
        token,
        "transfer(address,uint256)",
        BOB,
        0,
        value=U256(1),
    )
    assert isinstance(receipt.error, NonPayableFunction)
    assert get_balance(chain, token) == 0


def test_wrong_argument_count(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, MintableFungible("Token", "TKN"))
    receipt = transact(chain, ALICE, token, "mint(address,uint256)", BOB)
    assert isinstance(receipt.error, InvalidArguments)


def test_failed_message_rolls_back_storage(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, MintableFungible("Token", "TKN"))
    transact(chain, ALICE, token, "mint(address,uint256)", ALICE, 5)
    receipt = transact(
        chain, ALICE, token, "burn(address,uint256)", ALICE, 6
    )
    assert not receipt.succeeded
    assert receipt.logs == ()
    assert get_storage(chain.state, token, ("balances", ALICE)) == U256(5)


def test_static_call_cannot_write(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, MintableFungible("Token", "TKN"))
    with pytest.raises(WriteInStaticContext):
        call(chain, token, "mint(address,uint256)", ALICE, 5)
    assert call(chain, token, "totalSupply()") == 0


def test_nested_calls_up_to_depth_limit(chain: BlockChain) -> None:
    recursive = deploy(chain, ISSUER, Recursive())
    receipt = transact(
        chain, ALICE, recursive, "recurse(uint256)", int(STACK_DEPTH_LIMIT)
    )
    assert receipt.succeeded
    assert receipt.output == int(STACK_DEPTH_LIMIT)


def test_nested_calls_beyond_depth_limit(chain: BlockChain) -> None:
    recursive = deploy(chain, ISSUER, Recursive())
    receipt = transact(
        chain,
        ALICE,
        recursive,
        "recurse(uint256)",
        int(STACK_DEPTH_LIMIT) + 1,
    )
    assert isinstance(receipt.error, StackDepthLimitError)


def test_message_beyond_depth_limit_does_not_run(chain: BlockChain) -> None:
    recursive = deploy(chain, ISSUER, Recursive())
    message = Message(
        block_env=BlockEnvironment(
            chain_id=U64(1), state=chain.state, number=Uint(0)
        ),
        tx_env=TransactionEnvironment(origin=ALICE, index_in_block=Uint(0)),
        caller=ALICE,
        target=recursive,
        current_target=recursive,
        value=ether(1),
        function="recurse(uint256)",
        arguments=(0,),
        code=get_account(chain.state, recursive).code,
        depth=STACK_DEPTH_LIMIT + Uint(1),
        should_transfer_value=True,
        is_static=False,
        parent_frame=None,
    )
    frame = process_message(message)
    assert isinstance(frame.error, StackDepthLimitError)
    assert get_balance(chain, ALICE) == ether(1000)


def test_deploy_records_contract_address(chain: BlockChain) -> None:
    first = deploy(chain, ISSUER, Receiver())
    second = deploy(chain, ISSUER, Receiver())
    assert first != second
    receipt = chain.receipts[-1]
    assert receipt.contract_address == second
    assert receipt.output is None
