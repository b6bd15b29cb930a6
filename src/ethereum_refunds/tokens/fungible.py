"""
Fungible Token
^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Balance bookkeeping for a divisible token ([ERC-20]). Balances are counted
in the smallest unit; `decimals` only tells user interfaces how many of those
units make up one whole token.

[ERC-20]: https://eips.ethereum.org/EIPS/eip-20
"""

from ethereum_types.numeric import U256, Uint

from ..contracts import Contract, external
from ..fork_types import ZERO_ADDRESS, Address
from ..introspection import ERC20, ERC165
from ..vm import Frame
from .exceptions import (
    InsufficientAllowance,
    InsufficientHolding,
    InvalidRecipient,
    SupplyOverflow,
)

TRANSFER = "Transfer(address,address,uint256)"
APPROVAL = "Approval(address,address,uint256)"


class FungibleToken(Contract):
    """
    A token whose units are interchangeable.
    """

    INTERFACES = (ERC165, ERC20)

    def __init__(self, name: str, symbol: str, decimals: Uint = Uint(18)):
        self.token_name = name
        self.token_symbol = symbol
        self.token_decimals = decimals

    @external("name()", view=True)
    def name(self, frame: Frame) -> str:
        """
        Human readable name of the token.
        """
        return self.token_name

    @external("symbol()", view=True)
    def symbol(self, frame: Frame) -> str:
        """
        Ticker symbol of the token.
        """
        return self.token_symbol

    @external("decimals()", view=True)
    def decimals(self, frame: Frame) -> Uint:
        """
        Number of decimal places of one whole token.
        """
        return self.token_decimals

    @external("totalSupply()", view=True)
    def total_supply(self, frame: Frame) -> U256:
        """
        Number of units in existence.
        """
        return self.load_u256(frame, ("totalSupply",))

    @external("balanceOf(address)", view=True)
    def balance_of(self, frame: Frame, holder: Address) -> U256:
        """
        Number of units held by `holder`.
        """
        return self.load_u256(frame, ("balances", holder))

    @external("allowance(address,address)", view=True)
    def allowance(
        self, frame: Frame, owner: Address, spender: Address
    ) -> U256:
        """
        Number of units `spender` may still move on behalf of `owner`.
        """
        return self.load_u256(frame, ("allowances", owner, spender))

    @external("transfer(address,uint256)")
    def transfer(self, frame: Frame, recipient: Address, amount: U256) -> bool:
        """
        Move `amount` units from the caller to `recipient`.
        """
        self._transfer(frame, frame.caller, recipient, amount)
        return True

    @external("transferFrom(address,address,uint256)")
    def transfer_from(
        self, frame: Frame, sender: Address, recipient: Address, amount: U256
    ) -> bool:
        """
        Move `amount` units from `sender` to `recipient`, using the allowance
        `sender` granted the caller.
        """
        self._spend_allowance(frame, sender, frame.caller, amount)
        self._transfer(frame, sender, recipient, amount)
        return True

    @external("approve(address,uint256)")
    def approve(self, frame: Frame, spender: Address, amount: U256) -> bool:
        """
        Allow `spender` to move up to `amount` of the caller's units.
        """
        if spender == ZERO_ADDRESS:
            raise InvalidRecipient(spender, "cannot approve the zero address")
        self.store(frame, ("allowances", frame.caller, spender), amount)
        self.emit(frame, APPROVAL, frame.caller, spender, amount, indexed=2)
        return True

    def _transfer(
        self, frame: Frame, sender: Address, recipient: Address, amount: U256
    ) -> None:
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "transfer to the zero address")
        held = self.balance_of(frame, sender)
        if held < amount:
            raise InsufficientHolding(sender, amount, held)
        self.store(frame, ("balances", sender), held - amount)
        self.store(
            frame,
            ("balances", recipient),
            self.balance_of(frame, recipient) + amount,
        )
        self.emit(frame, TRANSFER, sender, recipient, amount, indexed=2)

    def _spend_allowance(
        self, frame: Frame, owner: Address, spender: Address, amount: U256
    ) -> None:
        allowed = self.allowance(frame, owner, spender)
        if allowed == U256.MAX_VALUE:
            return
        if allowed < amount:
            raise InsufficientAllowance(
                f"allowance {allowed} is below {amount}"
            )
        self.store(frame, ("allowances", owner, spender), allowed - amount)

    def _mint(self, frame: Frame, recipient: Address, amount: U256) -> None:
        if recipient == ZERO_ADDRESS:
            raise InvalidRecipient(recipient, "mint to the zero address")
        supply = self.total_supply(frame)
        if amount > U256.MAX_VALUE - supply:
            raise SupplyOverflow(f"cannot mint {amount} on top of {supply}")
        self.store(frame, ("totalSupply",), supply + amount)
        self.store(
            frame,
            ("balances", recipient),
            self.balance_of(frame, recipient) + amount,
        )
        self.emit(frame, TRANSFER, ZERO_ADDRESS, recipient, amount, indexed=2)

    def _burn(self, frame: Frame, holder: Address, amount: U256) -> None:
        held = self.balance_of(frame, holder)
        if held < amount:
            raise InsufficientHolding(holder, amount, held)
        self.store(frame, ("balances", holder), held - amount)
        self.store(
            frame, ("totalSupply",), self.total_supply(frame) - amount
        )
        self.emit(frame, TRANSFER, holder, ZERO_ADDRESS, amount, indexed=2)
