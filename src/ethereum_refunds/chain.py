"""
Ledger
^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Entry point for driving the ledger: creating accounts, moving the block
number forward, deploying contracts and applying transactions one at a time.

There is no consensus and no gas. Each transaction runs to completion
against the current state before the next one starts, and blocks exist only
as the monotonic counter refund deadlines are measured against.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from ethereum_types.bytes import Bytes0, Bytes4
from ethereum_types.numeric import U64, U256, Uint

from .exceptions import EthereumException, InvalidBlock
from .fork_types import ZERO_ADDRESS, Address, Log
from .introspection import ERC165, INVALID_INTERFACE_ID
from .state import (
    State,
    account_exists,
    begin_transaction,
    get_account,
    increment_nonce,
    rollback_transaction,
    set_account_balance,
)
from .trace import TransactionStart, evm_trace
from .transactions import Transaction, validate_transaction
from .utils.message import prepare_message
from .vm import BlockEnvironment, Message, TransactionEnvironment
from .vm.interpreter import process_message, process_message_call

if TYPE_CHECKING:
    from .contracts import Contract

logger = logging.getLogger(__name__)

DEFAULT_CHAIN_ID = U64(1)


@dataclass
class Receipt:
    """
    Result of applying a transaction.
    """

    block_number: Uint
    succeeded: bool
    error: Optional[EthereumException]
    output: Any
    logs: Tuple[Log, ...]
    contract_address: Optional[Address]


@dataclass
class BlockChain:
    """
    Current state of the ledger and the receipts of every transaction
    applied to it.
    """

    state: State = field(default_factory=State)
    number: Uint = Uint(0)
    chain_id: U64 = DEFAULT_CHAIN_ID
    receipts: List[Receipt] = field(default_factory=list)


def create_account(
    chain: BlockChain, address: Address, balance: U256 = U256(0)
) -> None:
    """
    Add an externally owned account holding `balance`.
    """
    if account_exists(chain.state, address):
        raise ValueError(f"account 0x{address.hex()} already exists")
    set_account_balance(chain.state, address, balance)
    logger.debug("created account 0x%s with %s wei", address.hex(), balance)


def get_balance(chain: BlockChain, address: Address) -> U256:
    """
    Native currency held by `address`.
    """
    return get_account(chain.state, address).balance


def advance_to(chain: BlockChain, number: Uint) -> None:
    """
    Move the chain to block `number`.

    Raises
    ------
    InvalidBlock :
        If `number` is behind the current block.
    """
    if number < chain.number:
        raise InvalidBlock(
            f"cannot move from block {chain.number} back to {number}"
        )
    logger.debug("advancing from block %s to %s", chain.number, number)
    chain.number = number


def mine(chain: BlockChain, blocks: Uint = Uint(1)) -> Uint:
    """
    Move the chain forward by `blocks` and return the new block number.
    """
    advance_to(chain, chain.number + blocks)
    return chain.number


def apply_transaction(chain: BlockChain, tx: Transaction) -> Receipt:
    """
    Execute a transaction in the current block.

    Failures of the executed code are reported on the receipt. The sender's
    nonce is incremented whether or not the code succeeds.

    Parameters
    ----------
    chain :
        Ledger to apply the transaction to.
    tx :
        Transaction to apply.

    Returns
    -------
    receipt : `Receipt`
        Outcome of the transaction.

    Raises
    ------
    InvalidTransaction :
        If the transaction cannot be included; the state is left untouched.
    """
    validate_transaction(chain.state, tx)

    block_env = BlockEnvironment(
        chain_id=chain.chain_id,
        state=chain.state,
        number=chain.number,
    )
    tx_env = TransactionEnvironment(
        origin=tx.sender,
        index_in_block=Uint(
            sum(1 for r in chain.receipts if r.block_number == chain.number)
        ),
    )

    evm_trace(None, TransactionStart(tx.sender, tx.function))

    increment_nonce(chain.state, tx.sender)
    message = prepare_message(block_env, tx_env, tx)
    output = process_message_call(message)

    receipt = Receipt(
        block_number=chain.number,
        succeeded=output.error is None,
        error=output.error,
        output=output.return_data,
        logs=output.logs,
        contract_address=output.contract_address,
    )
    chain.receipts.append(receipt)
    return receipt


def transact(
    chain: BlockChain,
    sender: Address,
    to: Address,
    function: Optional[str] = None,
    *arguments: Any,
    value: U256 = U256(0),
) -> Receipt:
    """
    Call `function` on `to` with `arguments`, or send plain `value` when no
    function is given.
    """
    return apply_transaction(
        chain,
        Transaction(
            sender=sender,
            to=to,
            value=value,
            function=function,
            arguments=arguments,
        ),
    )


def deploy(
    chain: BlockChain,
    sender: Address,
    code: "Contract",
    *arguments: Any,
    value: U256 = U256(0),
) -> Address:
    """
    Install `code` at a new address, running its constructor with
    `arguments`.

    Raises
    ------
    EthereumException :
        The error of the constructor, if it failed.
    """
    receipt = apply_transaction(
        chain,
        Transaction(
            sender=sender,
            to=Bytes0(b""),
            value=value,
            arguments=arguments,
            code=code,
        ),
    )
    if receipt.error is not None:
        raise receipt.error
    assert receipt.contract_address is not None
    logger.info(
        "deployed %s at 0x%s in block %s",
        type(code).__name__,
        receipt.contract_address.hex(),
        chain.number,
    )
    return receipt.contract_address


def call(
    chain: BlockChain,
    target: Address,
    function: str,
    *arguments: Any,
    caller: Address = ZERO_ADDRESS,
) -> Any:
    """
    Run `function` on `target` in a read-only message and return its
    output. Nothing the call does is kept.

    Raises
    ------
    EthereumException :
        The error of the call, if it failed.
    """
    block_env = BlockEnvironment(
        chain_id=chain.chain_id,
        state=chain.state,
        number=chain.number,
    )
    tx_env = TransactionEnvironment(origin=caller, index_in_block=Uint(0))
    message = Message(
        block_env=block_env,
        tx_env=tx_env,
        caller=caller,
        target=target,
        current_target=target,
        value=U256(0),
        function=function,
        arguments=arguments,
        code=get_account(chain.state, target).code,
        depth=Uint(0),
        should_transfer_value=False,
        is_static=True,
        parent_frame=None,
    )

    begin_transaction(chain.state)
    try:
        frame = process_message(message)
    finally:
        rollback_transaction(chain.state)

    if frame.error is not None:
        raise frame.error
    return frame.output


def supports_interface(
    chain: BlockChain, target: Address, interface_id: Bytes4
) -> bool:
    """
    Detect whether `target` implements `interface_id`, following the
    [ERC-165] detection procedure: the contract must report support for
    ERC-165 itself, must not report support for `0xffffffff`, and must then
    report support for `interface_id`.

    [ERC-165]: https://eips.ethereum.org/EIPS/eip-165
    """

    def query(queried: Bytes4) -> bool:
        try:
            result = call(chain, target, "supportsInterface(bytes4)", queried)
        except EthereumException:
            return False
        return result is True

    if not query(ERC165.interface_id) or query(INVALID_INTERFACE_ID):
        return False
    return query(interface_id)
