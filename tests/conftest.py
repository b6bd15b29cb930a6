from typing import Iterator

import pytest

from ethereum_refunds.chain import BlockChain, create_account
from ethereum_refunds.trace import discard_evm_trace, set_evm_trace
from tests.helpers import ALICE, BOB, ISSUER, ether


@pytest.fixture
def chain() -> BlockChain:
    """
    A ledger at block zero where the issuer, Alice and Bob each hold 1000
    ether.
    """
    chain = BlockChain()
    for address in (ISSUER, ALICE, BOB):
        create_account(chain, address, ether(1000))
    return chain


@pytest.fixture(autouse=True)
def restore_tracer() -> Iterator[None]:
    yield
    set_evm_trace(discard_evm_trace)
