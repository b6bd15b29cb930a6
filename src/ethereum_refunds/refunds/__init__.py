"""
Refund Extensions
^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Token contracts that escrow the purchase price of their units until a
refund deadline. Each contract extends one of the base tokens in
`ethereum_refunds.tokens` and reports the matching refund interface through
`supportsInterface(bytes4)`:

- `FungibleRefund`: one price and one deadline for the whole supply.
- `UniqueRefund`: a price and deadline per item, set by sale phases.
- `MultiRefund`: a price and deadline per identifier.
"""

from .fungible import FungibleRefund
from .multi import MultiRefund
from .unique import UniqueRefund

__all__ = ("FungibleRefund", "UniqueRefund", "MultiRefund")
