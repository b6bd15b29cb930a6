import pytest

from ethereum_refunds.chain import BlockChain, deploy, transact
from ethereum_refunds.fork_types import ZERO_ADDRESS, Address
from ethereum_refunds.tokens.exceptions import (
    InvalidRecipient,
    NonexistentToken,
    TokenAlreadyMinted,
    Unauthorized,
)
from tests.helpers import ALICE, BOB, ISSUER, view
from tests.helpers.contracts import MintableUnique, Receiver, Rejecter

TRANSFER_FROM = "transferFrom(address,address,uint256)"
SAFE_TRANSFER_FROM = "safeTransferFrom(address,address,uint256)"


@pytest.fixture
def token(chain: BlockChain) -> Address:
    token = deploy(chain, ISSUER, MintableUnique("Items", "ITM"))
    transact(chain, ISSUER, token, "mint(address,uint256)", ALICE, 7)
    return token


def test_owner_and_balance(chain: BlockChain, token: Address) -> None:
    assert view(chain, token, "ownerOf(uint256)", 7) == ALICE
    assert view(chain, token, "balanceOf(address)", ALICE) == 1
    assert view(chain, token, "balanceOf(address)", BOB) == 0


def test_unknown_token(chain: BlockChain, token: Address) -> None:
    with pytest.raises(NonexistentToken):
        view(chain, token, "ownerOf(uint256)", 8)


def test_balance_of_zero_address(chain: BlockChain, token: Address) -> None:
    with pytest.raises(InvalidRecipient):
        view(chain, token, "balanceOf(address)", ZERO_ADDRESS)


def test_mint_twice(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, ISSUER, token, "mint(address,uint256)", BOB, 7)
    assert isinstance(receipt.error, TokenAlreadyMinted)


def test_transfer_by_owner(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, ALICE, token, TRANSFER_FROM, ALICE, BOB, 7)
    assert receipt.succeeded
    assert view(chain, token, "ownerOf(uint256)", 7) == BOB
    assert view(chain, token, "balanceOf(address)", ALICE) == 0


def test_transfer_by_stranger(chain: BlockChain, token: Address) -> None:
    receipt = transact(chain, BOB, token, TRANSFER_FROM, ALICE, BOB, 7)
    assert isinstance(receipt.error, Unauthorized)


def test_approval_is_cleared_on_transfer(
    chain: BlockChain, token: Address
) -> None:
    transact(chain, ALICE, token, "approve(address,uint256)", BOB, 7)
    assert view(chain, token, "getApproved(uint256)", 7) == BOB

    assert transact(chain, BOB, token, TRANSFER_FROM, ALICE, BOB, 7).succeeded
    assert view(chain, token, "getApproved(uint256)", 7) == ZERO_ADDRESS


def test_operator_may_transfer(chain: BlockChain, token: Address) -> None:
    transact(chain, ALICE, token, "setApprovalForAll(address,bool)", BOB, True)
    assert view(chain, token, "isApprovedForAll(address,address)", ALICE, BOB)
    receipt = transact(chain, BOB, token, TRANSFER_FROM, ALICE, ISSUER, 7)
    assert receipt.succeeded
    assert view(chain, token, "ownerOf(uint256)", 7) == ISSUER


def test_safe_transfer_to_receiver(chain: BlockChain, token: Address) -> None:
    receiver = deploy(chain, ISSUER, Receiver())
    receipt = transact(
        chain, ALICE, token, SAFE_TRANSFER_FROM, ALICE, receiver, 7
    )
    assert receipt.succeeded
    assert view(chain, token, "ownerOf(uint256)", 7) == receiver


def test_safe_transfer_to_rejecter(chain: BlockChain, token: Address) -> None:
    rejecter = deploy(chain, ISSUER, Rejecter())
    receipt = transact(
        chain, ALICE, token, SAFE_TRANSFER_FROM, ALICE, rejecter, 7
    )
    assert isinstance(receipt.error, InvalidRecipient)
    assert view(chain, token, "ownerOf(uint256)", 7) == ALICE


def test_burn(chain: BlockChain, token: Address) -> None:
    transact(chain, ISSUER, token, "burn(uint256)", 7)
    assert view(chain, token, "balanceOf(address)", ALICE) == 0
    with pytest.raises(NonexistentToken):
        view(chain, token, "ownerOf(uint256)", 7)
