"""
Multi Token
^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Balance bookkeeping for a contract managing many token types at once
([ERC-1155]). Each identifier has its own fungible supply, so an item can be
unique (a supply of one) or one of many interchangeable copies.

Unlike the fungible and unique tokens, every transfer into a contract,
including minting, requires the receiving contract to accept the tokens.

[ERC-1155]: https://eips.ethereum.org/EIPS/eip-1155
"""

from typing import Tuple

from ethereum_types.bytes import Bytes, Bytes4
from ethereum_types.numeric import U256

from ..contracts import Contract, external
from ..fork_types import ZERO_ADDRESS, Address
from ..introspection import ERC165, ERC1155, function_selector
from ..vm import Frame
from .exceptions import (
    InsufficientHolding,
    InvalidRecipient,
    MismatchedArguments,
    SupplyOverflow,
    Unauthorized,
)

TRANSFER_SINGLE = "TransferSingle(address,address,address,uint256,uint256)"
TRANSFER_BATCH = "TransferBatch(address,address,address,uint256[],uint256[])"
APPROVAL_FOR_ALL = "ApprovalForAll(address,address,bool)"

ON_ERC1155_RECEIVED = (
    "onERC1155Received(address,address,uint256,uint256,bytes)"
)
ON_ERC1155_BATCH_RECEIVED = (
    "onERC1155BatchReceived(address,address,uint256[],uint256[],bytes)"
)
ERC1155_RECEIVED: Bytes4 = function_selector(ON_ERC1155_RECEIVED)
ERC1155_BATCH_RECEIVED: Bytes4 = function_selector(ON_ERC1155_BATCH_RECEIVED)


class MultiToken(Contract):
    """
    A token contract holding many token types, each with its own supply.
    """

    INTERFACES = (ERC165, ERC1155)

    def __init__(self, uri: str):
        self.token_uri = uri

    @external("uri(uint256)", view=True)
    def uri(self, frame: Frame, token_id: U256) -> str:
        """
        Metadata URI template shared by all identifiers.
        """
        return self.token_uri

    @external("balanceOf(address,uint256)", view=True)
    def balance_of(
        self, frame: Frame, holder: Address, token_id: U256
    ) -> U256:
        """
        Amount of `token_id` held by `holder`.
        """
        return self.load_u256(frame, ("balances", token_id, holder))

    @external("balanceOfBatch(address[],uint256[])", view=True)
    def balance_of_batch(
        self,
        frame: Frame,
        holders: Tuple[Address, ...],
        token_ids: Tuple[U256, ...],
    ) -> Tuple[U256, ...]:
        """
        Balances of each (`holder`, `token_id`) pair.
        """
        if len(holders) != len(token_ids):
            raise MismatchedArguments("holders and ids differ in length")
        return tuple(
            self.balance_of(frame, holder, token_id)
            for holder, token_id in zip(holders, token_ids)
        )

    @external("totalSupply(uint256)", view=True)
    def total_supply(self, frame: Frame, token_id: U256) -> U256:
        """
        Amount of `token_id` in existence.
        """
        return self.load_u256(frame, ("totalSupply", token_id))

    @external("isApprovedForAll(address,address)", view=True)
    def is_approved_for_all(
        self, frame: Frame, owner: Address, operator: Address
    ) -> bool:
        """
        Whether `operator` may move every token of `owner`.
        """
        return self.load_bool(frame, ("operatorApprovals", owner, operator))

    @external("setApprovalForAll(address,bool)")
    def set_approval_for_all(
        self, frame: Frame, operator: Address, approved: bool
    ) -> None:
        """
        Allow or forbid `operator` to move all of the caller's tokens.
        """
        if operator == frame.caller:
            raise InvalidRecipient(operator, "cannot approve yourself")
        self.store(
            frame, ("operatorApprovals", frame.caller, operator), approved
        )
        self.emit(
            frame,
            APPROVAL_FOR_ALL,
            frame.caller,
            operator,
            approved,
            indexed=2,
        )

    @external("safeTransferFrom(address,address,uint256,uint256,bytes)")
    def safe_transfer_from(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_id: U256,
        amount: U256,
        data: Bytes,
    ) -> None:
        """
        Move `amount` of `token_id` from `sender` to `recipient`.
        """
        self._check_operator(frame, sender)
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "transfer to the zero address")
        self._move(frame, sender, recipient, token_id, amount)
        self.emit(
            frame,
            TRANSFER_SINGLE,
            frame.caller,
            sender,
            recipient,
            token_id,
            amount,
            indexed=3,
        )
        self._check_on_received(
            frame, sender, recipient, token_id, amount, data
        )

    @external(
        "safeBatchTransferFrom(address,address,uint256[],uint256[],bytes)"
    )
    def safe_batch_transfer_from(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_ids: Tuple[U256, ...],
        amounts: Tuple[U256, ...],
        data: Bytes,
    ) -> None:
        """
        Move several token types from `sender` to `recipient` at once.
        """
        if len(token_ids) != len(amounts):
            raise MismatchedArguments("ids and amounts differ in length")
        self._check_operator(frame, sender)
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "transfer to the zero address")
        for token_id, amount in zip(token_ids, amounts):
            self._move(frame, sender, recipient, token_id, amount)
        self.emit(
            frame,
            TRANSFER_BATCH,
            frame.caller,
            sender,
            recipient,
            token_ids,
            amounts,
            indexed=3,
        )
        self._check_on_batch_received(
            frame, sender, recipient, token_ids, amounts, data
        )

    def _check_operator(self, frame: Frame, owner: Address) -> None:
        if frame.caller != owner and not self.is_approved_for_all(
            frame, owner, frame.caller
        ):
            raise Unauthorized(frame.caller, "not owner nor approved")

    def _move(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_id: U256,
        amount: U256,
    ) -> None:
        held = self.balance_of(frame, sender, token_id)
        if held < amount:
            raise InsufficientHolding(sender, amount, held)
        self.store(frame, ("balances", token_id, sender), held - amount)
        self._credit(frame, recipient, token_id, amount)

    def _credit(
        self, frame: Frame, recipient: Address, token_id: U256, amount: U256
    ) -> None:
        held = self.balance_of(frame, recipient, token_id)
        if amount > U256.MAX_VALUE - held:
            raise SupplyOverflow(f"balance of {token_id} would overflow")
        self.store(frame, ("balances", token_id, recipient), held + amount)

    def _check_on_received(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_id: U256,
        amount: U256,
        data: Bytes,
    ) -> None:
        if not self.is_contract(frame, recipient):
            return
        reply = self.try_call(
            frame,
            recipient,
            ON_ERC1155_RECEIVED,
            frame.caller,
            sender,
            token_id,
            amount,
            data,
        )
        if reply.error or reply.output != ERC1155_RECEIVED:
            raise InvalidRecipient(recipient, "recipient rejected the tokens")

    def _check_on_batch_received(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_ids: Tuple[U256, ...],
        amounts: Tuple[U256, ...],
        data: Bytes,
    ) -> None:
        if not self.is_contract(frame, recipient):
            return
        reply = self.try_call(
            frame,
            recipient,
            ON_ERC1155_BATCH_RECEIVED,
            frame.caller,
            sender,
            list(token_ids),
            list(amounts),
            data,
        )
        if reply.error or reply.output != ERC1155_BATCH_RECEIVED:
            raise InvalidRecipient(recipient, "recipient rejected the tokens")

    def _mint(
        self,
        frame: Frame,
        recipient: Address,
        token_id: U256,
        amount: U256,
        data: Bytes = Bytes(b""),
    ) -> None:
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "mint to the zero address")
        supply = self.total_supply(frame, token_id)
        if amount > U256.MAX_VALUE - supply:
            raise SupplyOverflow(f"supply of {token_id} would overflow")
        self.store(frame, ("totalSupply", token_id), supply + amount)
        self._credit(frame, recipient, token_id, amount)
        self.emit(
            frame,
            TRANSFER_SINGLE,
            frame.caller,
            ZERO_ADDRESS,
            recipient,
            token_id,
            amount,
            indexed=3,
        )
        self._check_on_received(
            frame, ZERO_ADDRESS, recipient, token_id, amount, data
        )

    def _burn(
        self, frame: Frame, holder: Address, token_id: U256, amount: U256
    ) -> None:
        held = self.balance_of(frame, holder, token_id)
        if held < amount:
            raise InsufficientHolding(holder, amount, held)
        self.store(frame, ("balances", token_id, holder), held - amount)
        self.store(
            frame,
            ("totalSupply", token_id),
            self.total_supply(frame, token_id) - amount,
        )
        self.emit(
            frame,
            TRANSFER_SINGLE,
            frame.caller,
            holder,
            ZERO_ADDRESS,
            token_id,
            amount,
            indexed=3,
        )
