"""
Base token contracts the refund extensions are built on.
"""

from .fungible import FungibleToken
from .multi import MultiToken
from .unique import UniqueToken

__all__ = ("FungibleToken", "UniqueToken", "MultiToken")
