"""
Refundable Unique Token
^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A non-fungible token sold in phases. The issuer opens a sale phase with a
price and a refund deadline; every item bought during that phase keeps
those terms, so items sold at different times may be refunded at different
prices and until different blocks.

The price paid for an item is escrowed against that item. A refund burns the
item, clears its escrow entry and pays the price back to the caller. Once an
item's deadline is reached its escrow may be claimed by the issuer.

The terms of an item stay readable after it has been refunded, and an
identifier can never be issued twice.
"""

from typing import Tuple

from ethereum_types.numeric import U256, Uint

from ..contracts import external
from ..contracts.guard import nonreentrant
from ..contracts.issuer import Issued
from ..introspection import ERC165, ERC721, ERC721_REFUND
from ..tokens.exceptions import (
    InsufficientHolding,
    NonexistentToken,
    TokenAlreadyMinted,
    Unauthorized,
)
from ..tokens.unique import UniqueToken
from ..vm import Frame
from .exceptions import (
    DeadlineNotMonotonic,
    IncorrectPayment,
    RefundWindowClosed,
    RefundWindowOpen,
    SaleClosed,
)

REFUND = "Refund(address,uint256)"
ESCROW_CLAIMED = "EscrowClaimed(address,uint256)"
SALE_PHASE = "SalePhase(uint256,uint256)"

SALE_PRICE = ("salePrice",)
SALE_DEADLINE = ("saleDeadline",)


class UniqueRefund(Issued, UniqueToken):
    """
    Non-fungible token whose items carry their own refund terms.
    """

    INTERFACES = (ERC165, ERC721, ERC721_REFUND)

    def __init__(self, name: str, symbol: str, reentrancy_guard: bool = False):
        super().__init__(name, symbol)
        self.reentrancy_guard = reentrancy_guard

    @external("refundOf(uint256)", view=True)
    def refund_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Wei refunded for `token_id`, the price it was bought for.
        """
        self.refund_deadline_of(frame, token_id)
        return self.load_u256(frame, ("price", token_id))

    @external("refundDeadlineOf(uint256)", view=True)
    def refund_deadline_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Block number from which refunds of `token_id` are rejected.
        """
        # Non-zero for every issued item, since minting requires the
        # deadline to be ahead of the current block.
        deadline = self.load_u256(frame, ("deadline", token_id))
        if deadline == 0:
            raise NonexistentToken(token_id)
        return deadline

    @external("escrowOf(uint256)", view=True)
    def escrow_of(self, frame: Frame, token_id: U256) -> U256:
        """
        Wei held in escrow for `token_id`.
        """
        return self.load_u256(frame, ("escrow", token_id))

    @external("salePhase()", view=True)
    def sale_phase(self, frame: Frame) -> Tuple[U256, U256]:
        """
        Price and refund deadline applied to items minted now.
        """
        return (
            self.load_u256(frame, SALE_PRICE),
            self.load_u256(frame, SALE_DEADLINE),
        )

    @external("setSalePhase(uint256,uint256)")
    def set_sale_phase(
        self, frame: Frame, price: U256, refund_deadline: U256
    ) -> None:
        """
        Open a new sale phase. A phase may not end before the previous one.
        """
        self.only_issuer(frame, "set sales")
        previous = self.load_u256(frame, SALE_DEADLINE)
        if refund_deadline < previous:
            raise DeadlineNotMonotonic(
                f"deadline {refund_deadline} is before {previous}"
            )
        self.store(frame, SALE_PRICE, price)
        self.store(frame, SALE_DEADLINE, refund_deadline)
        self.emit(frame, SALE_PHASE, price, refund_deadline, indexed=0)

    @external("mint(uint256)", payable=True)
    def mint(self, frame: Frame, token_id: U256) -> None:
        """
        Buy `token_id` at the price of the current phase.
        """
        price, deadline = self.sale_phase(frame)
        if U256(frame.block_number) >= deadline:
            raise SaleClosed("no sale phase is open")
        if frame.message.value != price:
            raise IncorrectPayment(Uint(price), frame.message.value)
        if self.load_u256(frame, ("deadline", token_id)) != 0:
            raise TokenAlreadyMinted(token_id)

        self._mint(frame, frame.caller, token_id)
        self.store(frame, ("price", token_id), price)
        self.store(frame, ("deadline", token_id), deadline)
        self.store(frame, ("escrow", token_id), frame.message.value)

    @external("refund(uint256)")
    @nonreentrant
    def refund(self, frame: Frame, token_id: U256) -> None:
        """
        Return `token_id` to the contract for its price. The owner, the
        approved address and operators may refund; the caller is paid.
        """
        deadline = self.refund_deadline_of(frame, token_id)
        if U256(frame.block_number) >= deadline:
            raise RefundWindowClosed(deadline, frame.block_number)
        if self._owner(frame, token_id) is None:
            raise InsufficientHolding(frame.caller, U256(1), U256(0))
        if not self._is_approved_or_owner(frame, frame.caller, token_id):
            raise Unauthorized(frame.caller, "cannot refund this token")

        payout = self.refund_of(frame, token_id)
        self._burn(frame, token_id)
        self.store(frame, ("escrow", token_id), None)
        self.emit(frame, REFUND, frame.caller, token_id, indexed=2)

        self.send_value(frame, frame.caller, payout)

    @external("claimEscrow(uint256[])")
    @nonreentrant
    def claim_escrow(self, frame: Frame, token_ids: Tuple[U256, ...]) -> None:
        """
        Pay the escrow of the listed items to the issuer. Every item must be
        past its refund deadline.
        """
        issuer = self.only_issuer(frame, "claim")

        amount = U256(0)
        for token_id in token_ids:
            deadline = self.refund_deadline_of(frame, token_id)
            if U256(frame.block_number) < deadline:
                raise RefundWindowOpen(deadline, frame.block_number)
            amount += self.escrow_of(frame, token_id)
            self.store(frame, ("escrow", token_id), None)
        self.emit(frame, ESCROW_CLAIMED, issuer, amount, indexed=1)

        self.send_value(frame, issuer, amount)
