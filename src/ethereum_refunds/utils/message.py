"""
Utility Functions For The Message Data-structure
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Message specific functions used by the ledger.
"""
from ethereum_types.bytes import Bytes0
from ethereum_types.numeric import Uint

from ..fork_types import Address
from ..state import get_account
from ..transactions import Transaction
from ..vm import BlockEnvironment, Message, TransactionEnvironment
from .address import compute_contract_address


def prepare_message(
    block_env: BlockEnvironment,
    tx_env: TransactionEnvironment,
    tx: Transaction,
) -> Message:
    """
    Create the top level message of a transaction. Must be called after the
    sender's nonce has been incremented.

    Parameters
    ----------
    block_env :
        Environment of the block being built.
    tx_env :
        Environment of the transaction.
    tx :
        Transaction to execute.

    Returns
    -------
    message: `ethereum_refunds.vm.Message`
        Items containing contract creation or message call specific data.
    """
    if isinstance(tx.to, Bytes0):
        current_target = compute_contract_address(
            tx.sender,
            get_account(block_env.state, tx.sender).nonce - Uint(1),
        )
        code = tx.code
    elif isinstance(tx.to, Address):
        current_target = tx.to
        code = get_account(block_env.state, tx.to).code
    else:
        raise TypeError()

    return Message(
        block_env=block_env,
        tx_env=tx_env,
        caller=tx.sender,
        target=tx.to,
        current_target=current_target,
        value=tx.value,
        function=tx.function,
        arguments=tx.arguments,
        code=code,
        depth=Uint(0),
        should_transfer_value=True,
        is_static=False,
        parent_frame=None,
    )
