"""
Unique Token
^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Ownership bookkeeping for non-fungible items ([ERC-721]). Every item is
identified by a `uint256` and owned by exactly one account. Owners may
approve one address per item, or operators for all of their items.

[ERC-721]: https://eips.ethereum.org/EIPS/eip-721
"""

from typing import Optional

from ethereum_types.bytes import Bytes, Bytes4
from ethereum_types.numeric import U256

from ..contracts import Contract, external
from ..fork_types import ZERO_ADDRESS, Address
from ..introspection import ERC165, ERC721, function_selector
from ..vm import Frame
from .exceptions import (
    InvalidRecipient,
    NonexistentToken,
    TokenAlreadyMinted,
    Unauthorized,
)

TRANSFER = "Transfer(address,address,uint256)"
APPROVAL = "Approval(address,address,uint256)"
APPROVAL_FOR_ALL = "ApprovalForAll(address,address,bool)"

ON_ERC721_RECEIVED = "onERC721Received(address,address,uint256,bytes)"
ERC721_RECEIVED: Bytes4 = function_selector(ON_ERC721_RECEIVED)
"""
Value a receiving contract must return to accept an item.
"""


class UniqueToken(Contract):
    """
    A token whose units are distinct, identified items.
    """

    INTERFACES = (ERC165, ERC721)

    def __init__(self, name: str, symbol: str):
        self.token_name = name
        self.token_symbol = symbol

    @external("name()", view=True)
    def name(self, frame: Frame) -> str:
        """
        Human readable name of the collection.
        """
        return self.token_name

    @external("symbol()", view=True)
    def symbol(self, frame: Frame) -> str:
        """
        Ticker symbol of the collection.
        """
        return self.token_symbol

    @external("balanceOf(address)", view=True)
    def balance_of(self, frame: Frame, owner: Address) -> U256:
        """
        Number of items owned by `owner`.
        """
        if owner == ZERO_ADDRESS:
            raise InvalidRecipient(owner, "the zero address owns nothing")
        return self.load_u256(frame, ("balances", owner))

    @external("ownerOf(uint256)", view=True)
    def owner_of(self, frame: Frame, token_id: U256) -> Address:
        """
        Current owner of `token_id`.
        """
        owner = self._owner(frame, token_id)
        if owner is None:
            raise NonexistentToken(token_id)
        return owner

    @external("getApproved(uint256)", view=True)
    def get_approved(self, frame: Frame, token_id: U256) -> Address:
        """
        Address approved to move `token_id`, or the zero address.
        """
        self.owner_of(frame, token_id)
        approved = self.load_address(frame, ("tokenApprovals", token_id))
        return ZERO_ADDRESS if approved is None else approved

    @external("isApprovedForAll(address,address)", view=True)
    def is_approved_for_all(
        self, frame: Frame, owner: Address, operator: Address
    ) -> bool:
        """
        Whether `operator` may move every item of `owner`.
        """
        return self.load_bool(frame, ("operatorApprovals", owner, operator))

    @external("approve(address,uint256)")
    def approve(self, frame: Frame, approved: Address, token_id: U256) -> None:
        """
        Allow `approved` to move `token_id`. Only the owner or one of its
        operators may approve.
        """
        owner = self.owner_of(frame, token_id)
        if frame.caller != owner and not self.is_approved_for_all(
            frame, owner, frame.caller
        ):
            raise Unauthorized(frame.caller, "cannot approve for this token")
        self.store(frame, ("tokenApprovals", token_id), approved)
        self.emit(frame, APPROVAL, owner, approved, token_id, indexed=3)

    @external("setApprovalForAll(address,bool)")
    def set_approval_for_all(
        self, frame: Frame, operator: Address, approved: bool
    ) -> None:
        """
        Allow or forbid `operator` to move all of the caller's items.
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

    @external("transferFrom(address,address,uint256)")
    def transfer_from(
        self, frame: Frame, sender: Address, recipient: Address, token_id: U256
    ) -> None:
        """
        Move `token_id` from `sender` to `recipient` without checking that a
        receiving contract can handle it.
        """
        if not self._is_approved_or_owner(frame, frame.caller, token_id):
            raise Unauthorized(frame.caller, "cannot move this token")
        if self.owner_of(frame, token_id) != sender:
            raise Unauthorized(sender, "does not own this token")
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "transfer to the zero address")

        self.store(frame, ("tokenApprovals", token_id), None)
        self.store(
            frame,
            ("balances", sender),
            self.load_u256(frame, ("balances", sender)) - U256(1),
        )
        self.store(
            frame,
            ("balances", recipient),
            self.load_u256(frame, ("balances", recipient)) + U256(1),
        )
        self.store(frame, ("owners", token_id), recipient)
        self.emit(frame, TRANSFER, sender, recipient, token_id, indexed=3)

    @external("safeTransferFrom(address,address,uint256)")
    def safe_transfer_from(
        self, frame: Frame, sender: Address, recipient: Address, token_id: U256
    ) -> None:
        """
        Move `token_id`, requiring contract recipients to accept it.
        """
        self.safe_transfer_from_with_data(
            frame, sender, recipient, token_id, Bytes(b"")
        )

    @external("safeTransferFrom(address,address,uint256,bytes)")
    def safe_transfer_from_with_data(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_id: U256,
        data: Bytes,
    ) -> None:
        """
        Move `token_id`, passing `data` to the recipient's acceptance hook.
        """
        self.transfer_from(frame, sender, recipient, token_id)
        self._check_on_received(frame, sender, recipient, token_id, data)

    def _owner(self, frame: Frame, token_id: U256) -> Optional[Address]:
        return self.load_address(frame, ("owners", token_id))

    def _is_approved_or_owner(
        self, frame: Frame, spender: Address, token_id: U256
    ) -> bool:
        owner = self.owner_of(frame, token_id)
        return (
            spender == owner
            or self.is_approved_for_all(frame, owner, spender)
            or self.get_approved(frame, token_id) == spender
        )

    def _check_on_received(
        self,
        frame: Frame,
        sender: Address,
        recipient: Address,
        token_id: U256,
        data: Bytes,
    ) -> None:
        if not self.is_contract(frame, recipient):
            return
        reply = self.try_call(
            frame,
            recipient,
            ON_ERC721_RECEIVED,
            frame.caller,
            sender,
            token_id,
            data,
        )
        if reply.error or reply.output != ERC721_RECEIVED:
            raise InvalidRecipient(recipient, "recipient rejected the token")

    def _mint(self, frame: Frame, recipient: Address, token_id: U256) -> None:
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "mint to the zero address")
        if self._owner(frame, token_id) is not None:
            raise TokenAlreadyMinted(token_id)
        self.store(
            frame,
            ("balances", recipient),
            self.load_u256(frame, ("balances", recipient)) + U256(1),
        )
        self.store(frame, ("owners", token_id), recipient)
        self.emit(
            frame, TRANSFER, ZERO_ADDRESS, recipient, token_id, indexed=3
        )

    def _burn(self, frame: Frame, token_id: U256) -> None:
        owner = self.owner_of(frame, token_id)
        self.store(frame, ("tokenApprovals", token_id), None)
        self.store(
            frame,
            ("balances", owner),
            self.load_u256(frame, ("balances", owner)) - U256(1),
        )
        self.store(frame, ("owners", token_id), None)
        self.emit(frame, TRANSFER, owner, ZERO_ADDRESS, token_id, indexed=3)
