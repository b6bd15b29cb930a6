"""
Utility Functions For Hexadecimal Strings
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Hexadecimal strings specific utility functions, used when loading accounts
and values from JSON fixtures.
"""
from ethereum_types.bytes import Bytes

from ..fork_types import Address


def has_hex_prefix(hex_string: str) -> bool:
    """
    Check if a hex string starts with hex prefix (0x).
    """
    return hex_string.startswith("0x")


def remove_hex_prefix(hex_string: str) -> str:
    """
    Remove 0x prefix from a hex string if present. This function returns the
    passed hex string if it isn't prefixed with 0x.

    Parameters
    ----------
    hex_string :
        The hexadecimal string whose prefix is to be removed.

    Returns
    -------
    modified_hex_string : `str`
        The hexadecimal string with the 0x prefix removed if present.
    """
    if has_hex_prefix(hex_string):
        return hex_string[len("0x") :]

    return hex_string


def hex_to_bytes(hex_string: str) -> Bytes:
    """
    Convert hex string to bytes.
    """
    return Bytes.fromhex(remove_hex_prefix(hex_string))


def hex_to_address(hex_string: str) -> Address:
    """
    Convert hex string to an address, left padding short strings with zeros.

    Parameters
    ----------
    hex_string :
        The hexadecimal string to be converted.

    Returns
    -------
    address : `Address`
        20 byte address obtained from `hex_string`.
    """
    return Address(bytes.fromhex(remove_hex_prefix(hex_string).rjust(40, "0")))


def address_to_hex(address: Address) -> str:
    """
    Render an address as a 0x prefixed, lower case hex string.
    """
    return "0x" + address.hex()
