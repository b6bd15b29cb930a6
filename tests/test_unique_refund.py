import pytest
from ethereum_types.numeric import Uint

from ethereum_refunds.chain import (
    BlockChain,
    advance_to,
    deploy,
    get_balance,
    supports_interface,
    transact,
)
from ethereum_refunds.fork_types import Address
from ethereum_refunds.introspection import (
    ERC20_REFUND,
    ERC165,
    ERC721,
    ERC721_REFUND,
    event_topic,
)
from ethereum_refunds.refunds import UniqueRefund
from ethereum_refunds.refunds.exceptions import (
    DeadlineNotMonotonic,
    IncorrectPayment,
    RefundWindowClosed,
    RefundWindowOpen,
    SaleClosed,
)
from ethereum_refunds.tokens.exceptions import (
    InsufficientHolding,
    NonexistentToken,
    TokenAlreadyMinted,
    Unauthorized,
)
from tests.helpers import ALICE, BOB, ISSUER, ether, view

SET_SALE_PHASE = "setSalePhase(uint256,uint256)"
DEADLINE = 1000


@pytest.fixture
def token(chain: BlockChain) -> Address:
    """
    Item 7 bought by Alice for 1 ether, refundable until block 1000.
    """
    token = deploy(chain, ISSUER, UniqueRefund("Items", "ITM"))
    assert transact(
        chain, ISSUER, token, SET_SALE_PHASE, ether(1), DEADLINE
    ).succeeded
    assert transact(
        chain, ALICE, token, "mint(uint256)", 7, value=ether(1)
    ).succeeded
    return token


def test_views(chain: BlockChain, token: Address) -> None:
    assert view(chain, token, "ownerOf(uint256)", 7) == ALICE
    assert view(chain, token, "refundOf(uint256)", 7) == ether(1)
    assert view(chain, token, "refundDeadlineOf(uint256)", 7) == DEADLINE
    assert view(chain, token, "escrowOf(uint256)", 7) == ether(1)
    assert view(chain, token, "salePhase()") == (ether(1), DEADLINE)


def test_supports_interfaces(chain: BlockChain, token: Address) -> None:
    for descriptor in (ERC165, ERC721, ERC721_REFUND):
        assert supports_interface(chain, token, descriptor.interface_id)
    assert not supports_interface(chain, token, ERC20_REFUND.interface_id)


def test_never_issued_item(chain: BlockChain, token: Address) -> None:
    with pytest.raises(NonexistentToken):
        view(chain, token, "refundOf(uint256)", 8)
    with pytest.raises(NonexistentToken):
        view(chain, token, "refundDeadlineOf(uint256)", 8)
    receipt = transact(chain, ALICE, token, "refund(uint256)", 8)
    assert isinstance(receipt.error, NonexistentToken)


def test_refund_on_last_block(chain: BlockChain, token: Address) -> None:
    advance_to(chain, Uint(DEADLINE - 1))
    before = get_balance(chain, ALICE)

    receipt = transact(chain, ALICE, token, "refund(uint256)", 7)

    assert receipt.succeeded
    assert get_balance(chain, ALICE) == before + ether(1)
    assert view(chain, token, "balanceOf(address)", ALICE) == 0
    with pytest.raises(NonexistentToken):
        view(chain, token, "ownerOf(uint256)", 7)
    refund_log = receipt.logs[-1]
    assert refund_log.topics[0] == event_topic("Refund(address,uint256)")
    assert refund_log.topics[1][12:] == ALICE
    assert int.from_bytes(refund_log.topics[2], "big") == 7


def test_second_refund_in_window(chain: BlockChain, token: Address) -> None:
    advance_to(chain, Uint(DEADLINE - 1))
    assert transact(chain, ALICE, token, "refund(uint256)", 7).succeeded
    before = get_balance(chain, ALICE)

    receipt = transact(chain, ALICE, token, "refund(uint256)", 7)

    assert isinstance(receipt.error, InsufficientHolding)
    assert receipt.error.held == 0
    assert get_balance(chain, ALICE) == before
    assert get_balance(chain, token) == 0


def test_refund_on_deadline(chain: BlockChain, token: Address) -> None:
    advance_to(chain, Uint(DEADLINE))
    receipt = transact(chain, ALICE, token, "refund(uint256)", 7)
    assert isinstance(receipt.error, RefundWindowClosed)
    assert view(chain, token, "ownerOf(uint256)", 7) == ALICE


def test_refunded_item_keeps_terms(chain: BlockChain, token: Address) -> None:
    transact(chain, ALICE, token, "refund(uint256)", 7)

    assert view(chain, token, "refundOf(uint256)", 7) == ether(1)
    assert view(chain, token, "refundDeadlineOf(uint256)", 7) == DEADLINE
    assert view(chain, token, "escrowOf(uint256)", 7) == 0

    receipt = transact(chain, ALICE, token, "refund(uint256)", 7)
    assert isinstance(receipt.error, InsufficientHolding)
    receipt = transact(chain, BOB, token, "mint(uint256)", 7, value=ether(1))
    assert isinstance(receipt.error, TokenAlreadyMinted)


def test_refund_by_stranger(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, BOB, token, "refund(uint256)", 7)
    assert isinstance(receipt.error, Unauthorized)
    assert view(chain, token, "ownerOf(uint256)", 7) == ALICE


def test_refund_by_approved_pays_caller(
    chain: BlockChain, token: Address
) -> None:
    transact(chain, ALICE, token, "approve(address,uint256)", BOB, 7)
    alice_before = get_balance(chain, ALICE)
    bob_before = get_balance(chain, BOB)

    assert transact(chain, BOB, token, "refund(uint256)", 7).succeeded

    assert get_balance(chain, ALICE) == alice_before
    assert get_balance(chain, BOB) == bob_before + ether(1)


def test_refund_after_transfer(chain: BlockChain, token: Address) -> None:
    transact(
        chain,
        ALICE,
        token,
        "transferFrom(address,address,uint256)",
        ALICE,
        BOB,
        7,
    )
    before = get_balance(chain, BOB)
    assert transact(chain, BOB, token, "refund(uint256)", 7).succeeded
    assert get_balance(chain, BOB) == before + ether(1)


def test_sale_phases(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, ALICE, token, SET_SALE_PHASE, ether(2), 2000)
    assert isinstance(receipt.error, Unauthorized)

    receipt = transact(chain, ISSUER, token, SET_SALE_PHASE, ether(2), 999)
    assert isinstance(receipt.error, DeadlineNotMonotonic)

    receipt = transact(chain, ISSUER, token, SET_SALE_PHASE, ether(2), 2000)
    assert receipt.succeeded
    (log,) = receipt.logs
    assert log.topics == (event_topic("SalePhase(uint256,uint256)"),)

    advance_to(chain, Uint(DEADLINE))
    assert transact(
        chain, BOB, token, "mint(uint256)", 8, value=ether(2)
    ).succeeded
    assert view(chain, token, "refundOf(uint256)", 8) == ether(2)
    assert view(chain, token, "refundDeadlineOf(uint256)", 8) == 2000

    receipt = transact(chain, ALICE, token, "refund(uint256)", 7)
    assert isinstance(receipt.error, RefundWindowClosed)
    assert transact(chain, BOB, token, "refund(uint256)", 8).succeeded


def test_mint_requires_phase_price(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, BOB, token, "mint(uint256)", 8, value=ether(2))
    assert isinstance(receipt.error, IncorrectPayment)
    assert get_balance(chain, BOB) == ether(1000)


def test_mint_without_open_phase(chain: BlockChain) -> None:
    token = deploy(chain, ISSUER, UniqueRefund("Items", "ITM"))
    receipt = transact(chain, ALICE, token, "mint(uint256)", 1)
    assert isinstance(receipt.error, SaleClosed)

    transact(chain, ISSUER, token, SET_SALE_PHASE, ether(1), 10)
    advance_to(chain, Uint(10))
    receipt = transact(chain, ALICE, token, "mint(uint256)", 1, value=ether(1))
    assert isinstance(receipt.error, SaleClosed)


def test_claim_escrow(chain: BlockChain, token: Address) -> None:
    transact(chain, ISSUER, token, SET_SALE_PHASE, ether(2), 2000)
    transact(chain, BOB, token, "mint(uint256)", 8, value=ether(2))

    receipt = transact(chain, ISSUER, token, "claimEscrow(uint256[])", [7])
    assert isinstance(receipt.error, RefundWindowOpen)

    advance_to(chain, Uint(DEADLINE))
    receipt = transact(chain, ALICE, token, "claimEscrow(uint256[])", [7])
    assert isinstance(receipt.error, Unauthorized)
    receipt = transact(chain, ISSUER, token, "claimEscrow(uint256[])", [7, 8])
    assert isinstance(receipt.error, RefundWindowOpen)

    before = get_balance(chain, ISSUER)
    receipt = transact(chain, ISSUER, token, "claimEscrow(uint256[])", [7])
    assert receipt.succeeded
    assert get_balance(chain, ISSUER) == before + ether(1)
    assert view(chain, token, "escrowOf(uint256)", 7) == 0
    assert view(chain, token, "escrowOf(uint256)", 8) == ether(2)
    assert get_balance(chain, token) == ether(2)
