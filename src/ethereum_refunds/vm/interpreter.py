"""
Message Interpreter
^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A straightforward interpreter that executes messages against contract
objects.

Every message runs inside its own state transaction: the state is
snapshotted before value moves, and the snapshot is restored if the message
fails for any reason. Messages nest (a contract paying out native currency
to another contract runs that contract's `receive` hook as a child message),
so a failure deep inside a call tree only unwinds the messages above it that
choose to propagate it.
"""
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ethereum_types.bytes import Bytes0
from ethereum_types.numeric import Uint

from ..exceptions import EthereumException
from ..fork_types import Address, Log
from ..state import (
    begin_transaction,
    commit_transaction,
    destroy_storage,
    get_account,
    increment_nonce,
    move_ether,
    rollback_transaction,
    set_code,
)
from ..trace import MessageEnd, MessageStart, TransactionEnd, evm_trace
from . import Frame, Message
from .exceptions import (
    AddressCollision,
    StackDepthLimitError,
    WriteInStaticContext,
)

STACK_DEPTH_LIMIT = Uint(1024)


@dataclass
class MessageCallOutput:
    """
    Output of a particular message call

    Contains the following:

          1. `logs`: list of `Log` generated during execution.
          2. `error`: The error from the execution if any.
          3. `return_data`: The output of the execution.
          4. `contract_address`: Address of the created contract, if any.
    """

    logs: Tuple[Log, ...]
    error: Optional[EthereumException]
    return_data: Any
    contract_address: Optional[Address]


def process_message_call(message: Message) -> MessageCallOutput:
    """
    If `message.target` is empty then it creates a smart contract
    else it executes a call from the `message.caller` to the `message.target`.

    Parameters
    ----------
    message :
        Transaction specific items.

    Returns
    -------
    output : `MessageCallOutput`
        Output of the message call
    """
    state = message.block_env.state
    contract_address = None
    if message.target == Bytes0(b""):
        target = get_account(state, message.current_target)
        if target.nonce != Uint(0) or target.code is not None:
            frame = new_frame(message)
            frame.error = AddressCollision()
        else:
            frame = process_create_message(message)
            if not frame.error:
                contract_address = message.current_target
    else:
        frame = process_message(message)

    if frame.error:
        logs: Tuple[Log, ...] = ()
    else:
        logs = frame.logs

    evm_trace(frame, TransactionEnd(frame.output, frame.error))

    return MessageCallOutput(
        logs=logs,
        error=frame.error,
        return_data=frame.output,
        contract_address=contract_address,
    )


def process_create_message(message: Message) -> Frame:
    """
    Executes a call to create a smart contract. The contract's constructor
    runs with the new address as its storage, and the contract object is
    installed only if the constructor succeeds.

    Parameters
    ----------
    message :
        Transaction specific items.

    Returns
    -------
    frame: :py:class:`~ethereum_refunds.vm.Frame`
        Items containing execution specific objects.
    """
    state = message.block_env.state
    # take snapshot of state before processing the message
    begin_transaction(state)

    destroy_storage(state, message.current_target)
    increment_nonce(state, message.current_target)

    frame = process_message(message)
    if not frame.error:
        set_code(state, message.current_target, message.code)
        commit_transaction(state)
    else:
        rollback_transaction(state)
    return frame


def process_message(message: Message) -> Frame:
    """
    Executes a message call, moving `message.value` first.

    Parameters
    ----------
    message :
        Transaction specific items.

    Returns
    -------
    frame: :py:class:`~ethereum_refunds.vm.Frame`
        Items containing execution specific objects
    """
    state = message.block_env.state
    frame = new_frame(message)
    if message.depth > STACK_DEPTH_LIMIT:
        frame.error = StackDepthLimitError("Stack depth limit reached")
        return frame

    evm_trace(
        frame,
        MessageStart(
            depth=message.depth,
            caller=message.caller,
            target=message.current_target,
            function=message.function,
            value=message.value,
        ),
    )

    # take snapshot of state before processing the message
    begin_transaction(state)

    try:
        if message.should_transfer_value and message.value != 0:
            if message.is_static:
                raise WriteInStaticContext("value sent in static context")
            move_ether(
                state, message.caller, message.current_target, message.value
            )
        execute_code(frame)
    except EthereumException as error:
        frame.error = error

    if frame.error:
        # revert state to the last saved checkpoint
        # since the message call resulted in an error
        rollback_transaction(state)
        frame.logs = ()
    else:
        commit_transaction(state)

    evm_trace(frame, MessageEnd(depth=message.depth, error=frame.error))
    return frame


def execute_code(frame: Frame) -> None:
    """
    Runs the contract object of `frame.message`.

    Constructors run for creation messages, the named external function for
    calls, and the `receive` hook for plain value transfers. Accounts without
    code accept any message and do nothing.

    Parameters
    ----------
    frame :
        The frame of the message being executed.
    """
    message = frame.message
    code = message.code
    if message.target == Bytes0(b""):
        assert code is not None
        code.construct(frame)
    elif code is None:
        return
    elif message.function is None:
        code.receive(frame)
    else:
        frame.output = code.dispatch(frame)


def new_frame(message: Message) -> Frame:
    """
    Create the frame a message records its execution in.
    """
    return Frame(message=message, logs=(), output=None, error=None)
