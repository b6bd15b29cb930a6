from typing import Tuple, Type

import pytest
from ethereum_types.numeric import U256, Uint

from ethereum_refunds.chain import BlockChain, deploy, get_balance, transact
from ethereum_refunds.contracts.guard import (
    REENTRANCY_LOCK,
    ReentrancyViolation,
)
from ethereum_refunds.exceptions import EthereumException
from ethereum_refunds.fork_types import Address
from ethereum_refunds.refunds import FungibleRefund, MultiRefund, UniqueRefund
from ethereum_refunds.state import get_storage
from ethereum_refunds.tokens.exceptions import InsufficientHolding
from ethereum_refunds.vm import Frame
from ethereum_refunds.vm.exceptions import Revert, TransferFailed
from tests.helpers import ALICE, ISSUER, ether, view
from tests.helpers.contracts import RefundAttacker

# The attacker buys 5 ether worth of units and refunds all of them.
CASES = {
    "fungible": (
        ("mint(uint256)", (5,)),
        ("refund(uint256)", (5,)),
        InsufficientHolding,
    ),
    "unique": (
        ("mint(uint256)", (7,)),
        ("refund(uint256)", (7,)),
        InsufficientHolding,
    ),
    "multi": (
        ("mint(uint256,uint256)", (3, 5)),
        ("refund(uint256,uint256)", (3, 5)),
        InsufficientHolding,
    ),
}


class StubbornBuyer(RefundAttacker):
    """
    Refuses the refund payout.
    """

    def receive(self, frame: Frame) -> None:
        raise Revert("payout refused")


def deploy_token(chain: BlockChain, kind: str, guard: bool) -> Address:
    """
    Deploy a token of `kind` selling at 1 ether per unit (5 ether per item
    for unique tokens) until block 100.
    """
    if kind == "fungible":
        return deploy(
            chain,
            ISSUER,
            FungibleRefund(
                "Refundable",
                "RFD",
                refund_price=ether(1),
                refund_deadline=U256(100),
                decimals=Uint(0),
                reentrancy_guard=guard,
            ),
        )

    if kind == "unique":
        token = deploy(
            chain, ISSUER, UniqueRefund("Items", "ITM", reentrancy_guard=guard)
        )
        receipt = transact(
            chain,
            ISSUER,
            token,
            "setSalePhase(uint256,uint256)",
            ether(5),
            100,
        )
    else:
        token = deploy(
            chain, ISSUER, MultiRefund("uri", reentrancy_guard=guard)
        )
        receipt = transact(
            chain,
            ISSUER,
            token,
            "createToken(uint256,uint256,uint256)",
            3,
            ether(1),
            100,
        )
    assert receipt.succeeded
    return token


def deploy_attacker(
    chain: BlockChain,
    token: Address,
    kind: str,
    attacker_class: Type[RefundAttacker] = RefundAttacker,
) -> Tuple[Address, RefundAttacker]:
    mint, refund, _ = CASES[kind]
    attacker = attacker_class(token, mint, refund)
    address = deploy(chain, ALICE, attacker)
    assert transact(chain, ALICE, address, "buy()", value=ether(5)).succeeded
    return address, attacker


@pytest.mark.parametrize("kind", list(CASES))
def test_reentrant_refund_finds_nothing_left(
    chain: BlockChain, kind: str
) -> None:
    token = deploy_token(chain, kind, guard=False)
    address, attacker = deploy_attacker(chain, token, kind)

    receipt = transact(chain, ALICE, address, "attack()")

    assert receipt.succeeded
    (error,) = attacker.reentry_errors
    assert isinstance(error, CASES[kind][2])
    assert get_balance(chain, address) == ether(5)
    assert get_balance(chain, token) == 0


@pytest.mark.parametrize("kind", list(CASES))
def test_guarded_refund_rejects_reentry(chain: BlockChain, kind: str) -> None:
    token = deploy_token(chain, kind, guard=True)
    address, attacker = deploy_attacker(chain, token, kind)

    receipt = transact(chain, ALICE, address, "attack()")

    assert receipt.succeeded
    (error,) = attacker.reentry_errors
    assert isinstance(error, ReentrancyViolation)
    assert get_balance(chain, address) == ether(5)


@pytest.mark.parametrize("kind", list(CASES))
def test_guard_is_released_after_refund(
    chain: BlockChain, kind: str
) -> None:
    token = deploy_token(chain, kind, guard=True)
    address, _ = deploy_attacker(chain, token, kind)
    assert transact(chain, ALICE, address, "attack()").succeeded
    assert get_storage(chain.state, token, REENTRANCY_LOCK) is None


@pytest.mark.parametrize("kind", list(CASES))
def test_refused_payout_reverts_refund(chain: BlockChain, kind: str) -> None:
    token = deploy_token(chain, kind, guard=False)
    address, _ = deploy_attacker(chain, token, kind, StubbornBuyer)

    receipt = transact(chain, ALICE, address, "attack()")

    assert isinstance(receipt.error, TransferFailed)
    assert isinstance(receipt.error.cause, EthereumException)
    assert receipt.logs == ()
    assert get_balance(chain, token) == ether(5)
    assert get_balance(chain, address) == 0
    if kind == "fungible":
        assert view(chain, token, "balanceOf(address)", address) == 5
    elif kind == "unique":
        assert view(chain, token, "ownerOf(uint256)", 7) == address
    else:
        assert (
            view(chain, token, "balanceOf(address,uint256)", address, 3) == 5
        )
