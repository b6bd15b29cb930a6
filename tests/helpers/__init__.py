from decimal import Decimal
from pathlib import Path
from typing import Any, Union

from eth_utils import to_wei
from ethereum_types.numeric import U256

from ethereum_refunds.chain import BlockChain, call
from ethereum_refunds.fork_types import Address
from ethereum_refunds.utils.hexadecimal import hex_to_address

ISSUER = hex_to_address("0x00000000000000000000000000000000000000a1")
ALICE = hex_to_address("0x00000000000000000000000000000000000000a2")
BOB = hex_to_address("0x00000000000000000000000000000000000000a3")

SCENARIO_FIXTURES = Path(__file__).parent.parent / "fixtures" / "scenarios"


def ether(amount: Union[int, str, Decimal]) -> U256:
    return U256(to_wei(Decimal(amount), "ether"))


def view(
    chain: BlockChain, target: Address, function: str, *args: Any
) -> Any:
    """
    Read-only call made from `ALICE`.
    """
    return call(chain, target, function, *args, caller=ALICE)
