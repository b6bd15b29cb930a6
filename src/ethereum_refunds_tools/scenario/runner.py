"""
Run scenarios against a fresh ledger.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ethereum_types.numeric import U256, Uint, Unsigned
from pydantic import Field

from ethereum_refunds.chain import (
    BlockChain,
    Receipt,
    advance_to,
    call,
    create_account,
    deploy,
    get_balance,
    transact,
)
from ethereum_refunds.contracts import Contract
from ethereum_refunds.exceptions import EthereumException
from ethereum_refunds.fork_types import Address
from ethereum_refunds.introspection import event_topic
from ethereum_refunds.refunds import FungibleRefund, MultiRefund, UniqueRefund
from ethereum_refunds.utils.hexadecimal import (
    address_to_hex,
    hex_to_address,
    hex_to_bytes,
)

from .models import (
    TOKEN_LABEL,
    CamelModel,
    ContractSpec,
    Expectation,
    Scenario,
)

logger = logging.getLogger(__name__)


class FixtureError(Exception):
    """
    A fixture refers to something the scenario does not define.
    """


class CaseResult(CamelModel):
    """Outcome of one scenario."""

    name: str
    passed: bool
    failures: List[str] = Field(default_factory=list)


def build_contract(spec: ContractSpec) -> Contract:
    """
    Create the contract object described by `spec`.
    """
    if spec.type == "FungibleRefund":
        return FungibleRefund(
            spec.name,
            spec.symbol,
            refund_price=U256(spec.refund_price),
            refund_deadline=U256(spec.refund_deadline),
            decimals=Uint(spec.decimals),
            reentrancy_guard=spec.reentrancy_guard,
        )
    elif spec.type == "UniqueRefund":
        return UniqueRefund(
            spec.name, spec.symbol, reentrancy_guard=spec.reentrancy_guard
        )
    elif spec.type == "MultiRefund":
        return MultiRefund(spec.uri, reentrancy_guard=spec.reentrancy_guard)
    else:
        raise ValueError(f"unknown contract type {spec.type!r}")


def error_matches(error: Optional[EthereumException], name: str) -> bool:
    """
    Whether `error` is an instance of the exception class called `name`.
    """
    if error is None:
        return False
    return any(klass.__name__ == name for klass in type(error).__mro__)


def normalize(value: Any) -> Any:
    """
    Convert ledger values into the plain values fixtures are written in.
    """
    if isinstance(value, Unsigned):
        return int(value)
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [normalize(v) for v in value]
    return value


class ScenarioRun:
    """
    The ledger and named addresses of one running scenario.
    """

    def __init__(self, name: str, scenario: Scenario) -> None:
        self.name = name
        self.scenario = scenario
        self.chain = BlockChain()
        self.labels: Dict[str, Address] = {}
        self.failures: List[str] = []

    def lookup(self, label: str) -> Address:
        """
        Address of the account or token called `label`.
        """
        try:
            return self.labels[label]
        except KeyError:
            raise FixtureError(f"unknown label {label!r}") from None

    def resolve(self, value: Any) -> Any:
        """
        Replace `"@name"` references and hex strings in a fixture value.
        """
        if isinstance(value, str):
            if value.startswith("@"):
                return self.lookup(value[1:])
            if value.startswith("0x"):
                return hex_to_bytes(value)
            return value
        if isinstance(value, list):
            return [self.resolve(v) for v in value]
        return value

    def expected(self, value: Any) -> Any:
        """
        Resolve references in an expected output into comparable values.
        """
        if isinstance(value, str) and value.startswith("@"):
            return address_to_hex(self.lookup(value[1:]))
        if isinstance(value, str) and value.startswith("0x"):
            return value.lower()
        if isinstance(value, list):
            return [self.expected(v) for v in value]
        return value

    def target(self, label: Optional[str]) -> Address:
        """
        Address a step or check is sent to, the token by default.
        """
        if label is None:
            return self.labels[TOKEN_LABEL]
        if label.startswith("@"):
            return self.lookup(label[1:])
        return hex_to_address(label)

    def setup(self) -> None:
        """
        Fund the accounts and deploy the token.
        """
        for label, account in self.scenario.accounts.items():
            address = hex_to_address(account.address)
            create_account(self.chain, address, U256(account.balance))
            self.labels[label] = address

        spec = self.scenario.contract
        self.labels[TOKEN_LABEL] = deploy(
            self.chain, self.labels[spec.deployer], build_contract(spec)
        )

    def check_receipt(
        self, where: str, expect: Expectation, receipt: Receipt
    ) -> None:
        """
        Compare a receipt against the expectation of its step.
        """
        if expect.error is not None:
            if not error_matches(receipt.error, expect.error):
                self.failures.append(
                    f"{where}: expected {expect.error}, got {receipt.error!r}"
                )
            return

        if receipt.error is not None:
            self.failures.append(f"{where}: failed with {receipt.error!r}")
            return

        if expect.output is not None:
            actual = normalize(receipt.output)
            if actual != self.expected(expect.output):
                self.failures.append(
                    f"{where}: output {actual!r}, expected {expect.output!r}"
                )

        if expect.events is not None:
            topics = [log.topics[0] for log in receipt.logs]
            wanted = [event_topic(e) for e in expect.events]
            if topics != wanted:
                self.failures.append(
                    f"{where}: emitted {len(topics)} event(s) not matching "
                    f"{expect.events}"
                )

    def run_steps(self) -> None:
        """
        Apply every step in order.
        """
        for index, step in enumerate(self.scenario.steps):
            where = f"step {index}"
            if step.block is not None:
                advance_to(self.chain, Uint(step.block))
            receipt = transact(
                self.chain,
                self.labels[step.sender],
                self.target(step.to),
                step.function,
                *self.resolve(step.args),
                value=U256(step.value),
            )
            logger.debug("%s %s: %r", self.name, where, receipt.error)
            self.check_receipt(where, step.expect, receipt)

    def check_post(self) -> None:
        """
        Check balances and read-only calls once every step has run.
        """
        post = self.scenario.post
        for label, balance in post.balances.items():
            actual = get_balance(self.chain, self.lookup(label))
            if actual != balance:
                self.failures.append(
                    f"post: balance of {label} is {actual}, expected {balance}"
                )

        for index, check in enumerate(post.calls):
            where = f"post call {index} ({check.function})"
            try:
                output = call(
                    self.chain,
                    self.target(check.to),
                    check.function,
                    *self.resolve(check.args),
                )
            except EthereumException as error:
                if check.error is None or not error_matches(
                    error, check.error
                ):
                    self.failures.append(f"{where}: failed with {error!r}")
                continue
            if check.error is not None:
                self.failures.append(f"{where}: expected {check.error}")
            elif normalize(output) != self.expected(check.output):
                self.failures.append(
                    f"{where}: output {normalize(output)!r}, "
                    f"expected {check.output!r}"
                )

    def run(self) -> CaseResult:
        """
        Run the scenario and report its failures.
        """
        try:
            self.setup()
            self.run_steps()
            self.check_post()
        except (EthereumException, FixtureError) as error:
            self.failures.append(f"aborted: {error!r}")
        return CaseResult(
            name=self.name,
            passed=not self.failures,
            failures=self.failures,
        )


def run_scenarios(scenarios: Dict[str, Scenario]) -> Iterator[CaseResult]:
    """
    Run each scenario on its own ledger.
    """
    for name, scenario in scenarios.items():
        logger.info("running %s", name)
        yield ScenarioRun(name, scenario).run()
