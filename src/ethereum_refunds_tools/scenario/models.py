"""
Models of the JSON scenario fixtures.

A fixture file maps case names to scenarios. Each scenario funds a set of
named accounts, deploys one refundable token and applies a list of steps,
checking the outcome of each, then checks balances and view calls at the
end. Arguments and expected outputs may refer to accounts as `"@name"` and
to the deployed token as `"@token"`.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    RootModel,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..utils import parse_amount

TOKEN_LABEL = "token"

Amount = Annotated[int, BeforeValidator(parse_amount)]


class CamelModel(BaseModel):
    """
    A base model that reads and writes field names in camel case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
    )


class AccountSpec(CamelModel):
    """An externally owned account funded before the scenario starts."""

    address: str
    balance: Amount = 0

    @field_validator("address")
    @classmethod
    def validate_address(cls, value: str) -> str:
        """Addresses are 20 bytes of hex with a `0x` prefix."""
        if not value.startswith("0x") or len(value) != 42:
            raise ValueError(f"malformed address {value!r}")
        int(value[2:], 16)
        return value.lower()


class ContractSpec(CamelModel):
    """The refundable token deployed by the scenario."""

    type: Literal["FungibleRefund", "UniqueRefund", "MultiRefund"]
    deployer: str
    name: str = ""
    symbol: str = ""
    uri: str = ""
    refund_price: Amount = 0
    refund_deadline: int = 0
    decimals: int = 18
    reentrancy_guard: bool = False


class Expectation(CamelModel):
    """
    Expected outcome of a step. A step is expected to succeed unless an
    `error` is named, which must be the class of the error or one of its
    bases.
    """

    error: Optional[str] = None
    output: Any = None
    events: Optional[List[str]] = None


class Step(CamelModel):
    """A transaction sent in the course of the scenario."""

    sender: str
    to: Optional[str] = None
    block: Optional[int] = None
    function: Optional[str] = None
    args: List[Any] = Field(default_factory=list)
    value: Amount = 0
    expect: Expectation = Field(default_factory=Expectation)


class ViewCheck(CamelModel):
    """A read-only call made once all steps have run."""

    function: str
    to: Optional[str] = None
    args: List[Any] = Field(default_factory=list)
    output: Any = None
    error: Optional[str] = None


class PostState(CamelModel):
    """Checks made once all steps have run."""

    balances: Dict[str, Amount] = Field(default_factory=dict)
    calls: List[ViewCheck] = Field(default_factory=list)


class Scenario(CamelModel):
    """A single test case."""

    description: str = ""
    accounts: Dict[str, AccountSpec]
    contract: ContractSpec
    steps: List[Step] = Field(default_factory=list)
    post: PostState = Field(default_factory=PostState)

    @model_validator(mode="after")
    def check_labels(self) -> "Scenario":
        """Every referenced sender must be a declared account."""
        if TOKEN_LABEL in self.accounts:
            raise ValueError(f"{TOKEN_LABEL!r} names the deployed token")
        if self.contract.deployer not in self.accounts:
            raise ValueError(f"unknown deployer {self.contract.deployer!r}")
        for step in self.steps:
            if step.sender not in self.accounts:
                raise ValueError(f"unknown sender {step.sender!r}")
        return self


class ScenarioFile(RootModel[Dict[str, Scenario]]):
    """The contents of a fixture file: scenarios keyed by case name."""
