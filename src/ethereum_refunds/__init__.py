"""
Refundable Token Extensions
^^^^^^^^^^^^^^^^^^^^^^^^^^^
Token sales are usually final: once a buyer has paid, the issuer holds the
funds and nothing in the token contract obliges it to give them back. The
refundable token extensions change that by keeping the purchase price in
escrow inside the token contract until a refund deadline, expressed as a
block number, has passed. Until then any holder may hand their tokens back
and receive the escrowed price.

This package contains a reference implementation of those extensions for
fungible, non-fungible and multi-token contracts, together with the small
deterministic ledger they execute on. Like the rest of the specification
family it is written as simply as possible, to aid in defining behaviour
rather than to be fast.
"""

import sys

__version__ = "0.1.0"

#
#  Ensure we can reach 1024 frames of recursion
#
EVM_RECURSION_LIMIT = 1024 * 12
sys.setrecursionlimit(max(EVM_RECURSION_LIMIT, sys.getrecursionlimit()))
