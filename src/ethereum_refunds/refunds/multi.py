"""
Refundable Multi Token
^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A multi token whose identifiers are created by the issuer with a unit price
and a refund deadline. Holders buy units of an identifier at its price and
may return any quantity they hold until its deadline, receiving the unit
price for each. Escrow is kept per identifier.
"""

from ethereum_types.bytes import Bytes
from ethereum_types.numeric import U256, Uint

from ..contracts import external
from ..contracts.guard import nonreentrant
from ..contracts.issuer import Issued
from ..introspection import ERC165, ERC1155, ERC1155_REFUND
from ..tokens.exceptions import (
    NonexistentToken,
    TokenAlreadyMinted,
)
from ..tokens.multi import MultiToken
from ..vm import Frame
from .exceptions import (
    IncorrectPayment,
    RefundWindowClosed,
    RefundWindowOpen,
    SaleClosed,
)

REFUND = "Refund(address,uint256,uint256)"
ESCROW_CLAIMED = "EscrowClaimed(address,uint256)"
TOKEN_CREATED = "TokenCreated(uint256,uint256,uint256)"


class MultiRefund(Issued, MultiToken):
    """
    Multi token with refund terms per identifier.
    """

    INTERFACES = (ERC165, ERC1155, ERC1155_REFUND)

    def __init__(self, uri: str, reentrancy_guard: bool = False):
        super().__init__(uri)
        self.reentrancy_guard = reentrancy_guard

    @external("refundOf(uint256)", view=True)
    def refund_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Wei refunded per unit of `token_id`.
        """
        self.refund_deadline_of(frame, token_id)
        return self.load_u256(frame, ("price", token_id))

    @external("refundDeadlineOf(uint256)", view=True)
    def refund_deadline_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Block number from which refunds of `token_id` are rejected.
        """
        deadline = self.load_u256(frame, ("deadline", token_id))
        if deadline == 0:
            raise NonexistentToken(token_id)
        return deadline

    @external("escrowOf(uint256)", view=True)
    def escrow_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Wei held in escrow for units of `token_id`.
        """
        return self.load_u256(frame, ("escrow", token_id))

    @external("createToken(uint256,uint256,uint256)")
    def create_token(
        self,
        frame: Frame,
        token_id: U256,
        price: U256,
        refund_deadline: U256,
    ) -> None:
        """
        Set the terms of `token_id`. Terms are set once and never change.
        """
        self.only_issuer(frame, "create")
        if self.load_u256(frame, ("deadline", token_id)) != 0:
            raise TokenAlreadyMinted(token_id)
        if U256(frame.block_number) >= refund_deadline:
            raise SaleClosed(f"deadline {refund_deadline} has passed")
        self.store(frame, ("price", token_id), price)
        self.store(frame, ("deadline", token_id), refund_deadline)
        self.emit(
            frame, TOKEN_CREATED, token_id, price, refund_deadline, indexed=1
        )

    @external("mint(uint256,uint256)", payable=True)
    def mint(self, frame: Frame, token_id: U256, amount: U256) -> None:
        """
        Buy `amount` units of `token_id`, paying the unit price for each.
        """
        deadline = self.refund_deadline_of(frame, token_id)
        if U256(frame.block_number) >= deadline:
            raise SaleClosed(f"sale of {token_id} ended at block {deadline}")
        cost = Uint(amount) * Uint(self.refund_of(frame, token_id))
        if Uint(frame.message.value) != cost:
            raise IncorrectPayment(cost, frame.message.value)

        self.store(
            frame,
            ("escrow", token_id),
            self.escrow_of(frame, token_id) + frame.message.value,
        )
        self._mint(frame, frame.caller, token_id, amount, Bytes(b""))

    @external("refund(uint256,uint256)")
    @nonreentrant
    def refund(self, frame: Frame, token_id: U256, amount: U256) -> None:
        """
        Return `amount` units of `token_id` for the unit price each.
        """
        deadline = self.refund_deadline_of(frame, token_id)
        if U256(frame.block_number) >= deadline:
            raise RefundWindowClosed(deadline, frame.block_number)

        self._burn(frame, frame.caller, token_id, amount)
        payout = U256(Uint(amount) * Uint(self.refund_of(frame, token_id)))
        self.store(
            frame,
            ("escrow", token_id),
            self.escrow_of(frame, token_id) - payout,
        )
        self.emit(frame, REFUND, frame.caller, token_id, amount, indexed=3)

        self.send_value(frame, frame.caller, payout)

    @external("claimEscrow(uint256)")
    @nonreentrant
    def claim_escrow(self, frame: Frame, token_id: U256) -> None:
        """
        Pay the escrow of `token_id` to the issuer once its refunds closed.
        """
        issuer = self.only_issuer(frame, "claim")
        deadline = self.refund_deadline_of(frame, token_id)
        if U256(frame.block_number) < deadline:
            raise RefundWindowOpen(deadline, frame.block_number)

        amount = self.escrow_of(frame, token_id)
        self.store(frame, ("escrow", token_id), None)
        self.emit(frame, ESCROW_CLAIMED, issuer, amount, indexed=1)

        self.send_value(frame, issuer, amount)
