"""
Refundable Fungible Token
^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A fungible token sold against native currency at a fixed price, which
holders may sell back to the contract at the same price until a global
deadline. Purchases are paid into an escrow held by the contract; once the
deadline is reached refunds stop and the issuer may claim what is left.

The price is quoted per whole token, that is per `10**decimals` of the
smallest units balances are counted in. Purchases round the cost up and
refunds round the payout down, so the escrow always covers every refund that
can still be made.
"""

from ethereum_types.numeric import U256, Uint

from ..contracts import external
from ..contracts.guard import nonreentrant
from ..contracts.issuer import Issued
from ..introspection import ERC20, ERC20_REFUND, ERC165
from ..tokens.fungible import FungibleToken
from ..vm import Frame
from .exceptions import (
    IncorrectPayment,
    RefundWindowClosed,
    RefundWindowOpen,
    SaleClosed,
)

REFUND = "Refund(address,uint256)"
ESCROW_CLAIMED = "EscrowClaimed(address,uint256)"

ESCROW = ("escrow",)


class FungibleRefund(Issued, FungibleToken):
    """
    Fungible token with a global refund price and deadline.

    Parameters
    ----------
    name :
        Name of the token.
    symbol :
        Ticker symbol of the token.
    refund_price :
        Wei paid for, and refunded for, one whole token.
    refund_deadline :
        First block in which refunds are rejected.
    decimals :
        Number of decimal places of one whole token.
    reentrancy_guard :
        Whether `refund` and `claimEscrow` hold a re-entrancy lock.
    """

    INTERFACES = (ERC165, ERC20, ERC20_REFUND)

    def __init__(
        self,
        name: str,
        symbol: str,
        refund_price: U256,
        refund_deadline: U256,
        decimals: Uint = Uint(18),
        reentrancy_guard: bool = False,
    ):
        super().__init__(name, symbol, decimals)
        self.refund_price = refund_price
        self.refund_deadline = refund_deadline
        self.reentrancy_guard = reentrancy_guard

    @external("refundOf()", view=True)
    def refund_of(self, frame: Frame) -> U256:
        """
        Wei refunded per whole token.
        """
        return self.refund_price

    @external("refundDeadlineOf()", view=True)
    def refund_deadline_of(self, frame: Frame) -> U256:
        """
        Block number from which refunds are rejected.
        """
        return self.refund_deadline

    @external("escrowOf()", view=True)
    def escrow_of(self, frame: Frame) -> U256:
        """
        Wei held in escrow for outstanding tokens.
        """
        return self.load_u256(frame, ESCROW)

    @external("mint(uint256)", payable=True)
    def mint(self, frame: Frame, amount: U256) -> None:
        """
        Buy `amount` smallest units. The value sent must be the exact cost,
        rounded up to the next wei.
        """
        if U256(frame.block_number) >= self.refund_deadline:
            raise SaleClosed(f"sale ended at block {self.refund_deadline}")
        cost = self.cost_of(amount)
        if Uint(frame.message.value) != cost:
            raise IncorrectPayment(cost, frame.message.value)
        self._mint(frame, frame.caller, amount)
        self.store(frame, ESCROW, self.escrow_of(frame) + frame.message.value)

    @external("refund(uint256)")
    @nonreentrant
    def refund(self, frame: Frame, amount: U256) -> None:
        """
        Sell `amount` smallest units back to the contract.
        """
        if U256(frame.block_number) >= self.refund_deadline:
            raise RefundWindowClosed(self.refund_deadline, frame.block_number)

        self._burn(frame, frame.caller, amount)
        payout = U256(self.payout_of(amount))
        self.store(frame, ESCROW, self.escrow_of(frame) - payout)
        self.emit(frame, REFUND, frame.caller, amount, indexed=2)

        self.send_value(frame, frame.caller, payout)

    @external("claimEscrow()")
    @nonreentrant
    def claim_escrow(self, frame: Frame) -> None:
        """
        Pay the remaining escrow to the issuer once refunds have closed.
        """
        issuer = self.only_issuer(frame, "claim")
        if U256(frame.block_number) < self.refund_deadline:
            raise RefundWindowOpen(self.refund_deadline, frame.block_number)

        amount = self.escrow_of(frame)
        self.store(frame, ESCROW, None)
        self.emit(frame, ESCROW_CLAIMED, issuer, amount, indexed=1)

        self.send_value(frame, issuer, amount)

    def cost_of(self, amount: U256) -> Uint:
        """
        Wei charged for `amount` smallest units.
        """
        unit = Uint(10) ** self.token_decimals
        value = Uint(amount) * Uint(self.refund_price)
        return (value + unit - Uint(1)) // unit

    def payout_of(self, amount: U256) -> Uint:
        """
        Wei refunded for `amount` smallest units.
        """
        unit = Uint(10) ** self.token_decimals
        return Uint(amount) * Uint(self.refund_price) // unit
