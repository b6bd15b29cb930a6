"""
Interface Introspection
^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Optional behaviour is negotiated at runtime: before calling an optional
function, a caller asks the contract whether it supports the interface that
function belongs to ([ERC-165]).

An interface is identified by four bytes: the exclusive or of the selectors
of all functions in the interface, where a function's selector is the first
four bytes of the keccak256 hash of its canonical signature. Events are
identified by the full keccak256 hash of their signature, which becomes the
first topic of every log they produce.

[ERC-165]: https://eips.ethereum.org/EIPS/eip-165
"""

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Tuple

from ethereum_types.bytes import Bytes4

from .crypto.hash import Hash32, keccak256

INVALID_INTERFACE_ID = Bytes4(b"\xff\xff\xff\xff")
"""
Identifier that no contract may claim to support. Part of the detection
procedure that tells ERC-165 contracts apart from contracts that answer
`true` to everything.
"""


def function_selector(signature: str) -> Bytes4:
    """
    Compute the four byte selector of a function.

    Parameters
    ----------
    signature :
        Canonical signature, for example `"refund(uint256)"`.

    Returns
    -------
    selector : `Bytes4`
        First four bytes of the keccak256 hash of `signature`.
    """
    return Bytes4(keccak256(signature.encode())[:4])


def event_topic(signature: str) -> Hash32:
    """
    Compute the topic that identifies an event in a log.
    """
    return keccak256(signature.encode())


def interface_id(signatures: Iterable[str]) -> Bytes4:
    """
    Compute the identifier of the interface made up of the functions with
    the given `signatures`.
    """
    value = reduce(
        lambda acc, sig: acc ^ int.from_bytes(function_selector(sig), "big"),
        signatures,
        0,
    )
    return Bytes4(value.to_bytes(4, "big"))


@dataclass(frozen=True)
class InterfaceDescriptor:
    """
    Functions and events that make up an interface.

    Only `functions` contribute to the identifier; `events` document what an
    implementation emits.
    """

    name: str
    functions: Tuple[str, ...]
    events: Tuple[str, ...] = ()

    @property
    def interface_id(self) -> Bytes4:
        """
        Identifier callers query with `supportsInterface(bytes4)`.
        """
        return interface_id(self.functions)

    @property
    def selectors(self) -> Tuple[Bytes4, ...]:
        """
        Selectors of the functions in the interface.
        """
        return tuple(function_selector(f) for f in self.functions)


ERC165 = InterfaceDescriptor(
    name="ERC165",
    functions=("supportsInterface(bytes4)",),
)

ERC20 = InterfaceDescriptor(
    name="ERC20",
    functions=(
        "totalSupply()",
        "balanceOf(address)",
        "transfer(address,uint256)",
        "transferFrom(address,address,uint256)",
        "approve(address,uint256)",
        "allowance(address,address)",
    ),
    events=(
        "Transfer(address,address,uint256)",
        "Approval(address,address,uint256)",
    ),
)

ERC721 = InterfaceDescriptor(
    name="ERC721",
    functions=(
        "balanceOf(address)",
        "ownerOf(uint256)",
        "safeTransferFrom(address,address,uint256,bytes)",
        "safeTransferFrom(address,address,uint256)",
        "transferFrom(address,address,uint256)",
        "approve(address,uint256)",
        "setApprovalForAll(address,bool)",
        "getApproved(uint256)",
        "isApprovedForAll(address,address)",
    ),
    events=(
        "Transfer(address,address,uint256)",
        "Approval(address,address,uint256)",
        "ApprovalForAll(address,address,bool)",
    ),
)

ERC1155 = InterfaceDescriptor(
    name="ERC1155",
    functions=(
        "safeTransferFrom(address,address,uint256,uint256,bytes)",
        "safeBatchTransferFrom(address,address,uint256[],uint256[],bytes)",
        "balanceOf(address,uint256)",
        "balanceOfBatch(address[],uint256[])",
        "setApprovalForAll(address,bool)",
        "isApprovedForAll(address,address)",
    ),
    events=(
        "TransferSingle(address,address,address,uint256,uint256)",
        "TransferBatch(address,address,address,uint256[],uint256[])",
        "ApprovalForAll(address,address,bool)",
    ),
)

ERC20_REFUND = InterfaceDescriptor(
    name="ERC20Refund",
    functions=(
        "refund(uint256)",
        "refundOf()",
        "refundDeadlineOf()",
    ),
    events=("Refund(address,uint256)",),
)

ERC721_REFUND = InterfaceDescriptor(
    name="ERC721Refund",
    functions=(
        "refund(uint256)",
        "refundOf(uint256)",
        "refundDeadlineOf(uint256)",
    ),
    events=("Refund(address,uint256)",),
)

ERC1155_REFUND = InterfaceDescriptor(
    name="ERC1155Refund",
    functions=(
        "refund(uint256,uint256)",
        "refundOf(uint256)",
        "refundDeadlineOf(uint256)",
    ),
    events=("Refund(address,uint256,uint256)",),
)


def parse_signature(signature: str) -> Tuple[str, Tuple[str, ...]]:
    """
    Split a canonical signature into its name and parameter types.

    Parameters
    ----------
    signature :
        Canonical signature, for example `"Refund(address,uint256)"`.

    Returns
    -------
    name : `str`
        Name of the function or event.
    types : `Tuple[str, ...]`
        ABI types of the parameters, in order.
    """
    name, _, rest = signature.partition("(")
    if not name or not rest.endswith(")"):
        raise ValueError(f"malformed signature `{signature}`")
    parameters = rest[:-1]
    if not parameters:
        return name, ()
    return name, tuple(parameters.split(","))
