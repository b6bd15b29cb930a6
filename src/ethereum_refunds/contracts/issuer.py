"""
Issued Contracts
^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Contracts with a privileged issuer: the account that deployed them. The
issuer is recorded by the constructor and never changes.
"""

from ..fork_types import Address
from ..state import StorageKey
from ..tokens.exceptions import Unauthorized
from ..vm import Frame
from . import Contract, external

ISSUER: StorageKey = ("issuer",)


class Issued(Contract):
    """
    Mixin recording the deployer as the issuer of a contract.
    """

    def constructor(self, frame: Frame) -> None:
        """
        Record the deployer as the issuer.
        """
        self.store(frame, ISSUER, frame.caller)

    @external("issuer()", view=True)
    def issuer(self, frame: Frame) -> Address:
        """
        Account that deployed the contract.
        """
        issuer = self.load_address(frame, ISSUER)
        assert issuer is not None
        return issuer

    def only_issuer(self, frame: Frame, action: str) -> Address:
        """
        Return the issuer, raising `Unauthorized` unless it is the caller.
        """
        issuer = self.issuer(frame)
        if frame.caller != issuer:
            raise Unauthorized(frame.caller, f"only the issuer may {action}")
        return issuer
