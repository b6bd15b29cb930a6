"""
Contracts
^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Contract code on this ledger is a Python object installed in an account.
The object holds only what is fixed at deployment (the counterpart of
immutables); everything that changes lives in the account's storage, so that
the state snapshots taken around every message cover it.

Functions callable from outside are registered with the `external`
decorator under their canonical signature. A message names the signature,
the contract looks the function up by selector and calls it with the
executing `Frame` followed by the message arguments.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from eth_abi import encode
from ethereum_types.bytes import Bytes, Bytes4
from ethereum_types.numeric import U256, Uint, Unsigned

from ..crypto.hash import Hash32
from ..fork_types import Address, Log
from ..introspection import (
    ERC165,
    INVALID_INTERFACE_ID,
    InterfaceDescriptor,
    event_topic,
    function_selector,
    parse_signature,
)
from ..state import (
    StorageKey,
    StorageValue,
    account_has_code,
    get_account,
    get_storage,
    set_storage,
)
from ..trace import LogEmitted, evm_trace
from ..vm import Frame, Message, incorporate_child_on_success
from ..vm.exceptions import (
    InvalidArguments,
    InvalidFunction,
    NonPayableFunction,
    TransferFailed,
    WriteInStaticContext,
)
from ..vm.interpreter import process_message

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ExternalFunction:
    """
    A function a contract exposes to messages.
    """

    signature: str
    name: str
    payable: bool
    view: bool

    @property
    def selector(self) -> Bytes4:
        """
        Four byte selector messages are dispatched on.
        """
        return function_selector(self.signature)


def external(
    signature: str, *, payable: bool = False, view: bool = False
) -> Callable[[F], F]:
    """
    Register the decorated method as the implementation of `signature`.
    """

    def decorator(method: F) -> F:
        method.__external__ = ExternalFunction(  # type: ignore[attr-defined]
            signature=signature,
            name=method.__name__,
            payable=payable,
            view=view,
        )
        return method

    return decorator


def to_abi_value(value: Any) -> Any:
    """
    Convert ledger values into the plain Python values `eth_abi` encodes.
    """
    if isinstance(value, Unsigned):
        return int(value)
    if isinstance(value, (list, tuple)):
        return [to_abi_value(v) for v in value]
    return value


def coerce_argument(abi_type: str, value: Any) -> Any:
    """
    Convert a message argument into the ledger type for `abi_type`.

    Raises `TypeError`, `ValueError` or `OverflowError` when `value` cannot
    represent an `abi_type`.
    """
    if abi_type.endswith("[]"):
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected a sequence for `{abi_type}`")
        return tuple(coerce_argument(abi_type[:-2], v) for v in value)
    if abi_type.startswith("uint"):
        if isinstance(value, bool):
            raise TypeError(f"expected an integer for `{abi_type}`")
        return U256(value)
    if abi_type == "address":
        return Address(value)
    if abi_type == "bool":
        if not isinstance(value, bool):
            raise TypeError("expected a bool")
        return value
    if abi_type == "bytes4":
        return Bytes4(value)
    if abi_type == "bytes":
        return Bytes(value)
    if abi_type == "string":
        if not isinstance(value, str):
            raise TypeError("expected a string")
        return value
    raise TypeError(f"unsupported ABI type `{abi_type}`")


def coerce_arguments(signature: str, arguments: Tuple[Any, ...]) -> List[Any]:
    """
    Convert the arguments of a message calling `signature`.
    """
    _, types = parse_signature(signature)
    if len(arguments) != len(types):
        raise InvalidArguments(
            f"`{signature}` takes {len(types)} argument(s), "
            f"got {len(arguments)}"
        )
    try:
        return [coerce_argument(t, a) for t, a in zip(types, arguments)]
    except (TypeError, ValueError, OverflowError) as error:
        raise InvalidArguments(f"bad arguments for `{signature}`") from error


class Contract:
    """
    Base class of all contract code.
    """

    INTERFACES: ClassVar[Tuple[InterfaceDescriptor, ...]] = (ERC165,)
    """
    Interfaces reported through `supportsInterface(bytes4)`.
    """

    EXTERNAL_FUNCTIONS: ClassVar[Dict[Bytes4, ExternalFunction]] = {}
    """
    External functions of the class, keyed by selector. Filled in when the
    class is defined.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        functions: Dict[Bytes4, ExternalFunction] = {}
        for klass in reversed(cls.__mro__):
            for attribute in vars(klass).values():
                function = getattr(attribute, "__external__", None)
                if isinstance(function, ExternalFunction):
                    functions[function.selector] = function
        cls.EXTERNAL_FUNCTIONS = functions

    #
    # Entry points used by the interpreter
    #

    def construct(self, frame: Frame) -> None:
        """
        Run the constructor with the arguments of the creation message.
        """
        self.constructor(frame, *frame.message.arguments)

    def constructor(self, frame: Frame) -> None:
        """
        Initialise storage when the contract is created.
        """

    def receive(self, frame: Frame) -> None:
        """
        Handle a plain value transfer. Contracts reject them unless they
        override this hook.
        """
        raise InvalidFunction(None)

    def dispatch(self, frame: Frame) -> Any:
        """
        Run the external function named by `frame.message`.
        """
        message = frame.message
        assert message.function is not None
        function = self.EXTERNAL_FUNCTIONS.get(
            function_selector(message.function)
        )
        if function is None:
            raise InvalidFunction(message.function)
        if message.value != 0 and not function.payable:
            raise NonPayableFunction(f"`{function.signature}` is not payable")
        arguments = coerce_arguments(function.signature, message.arguments)
        return getattr(self, function.name)(frame, *arguments)

    #
    # ERC-165
    #

    @external("supportsInterface(bytes4)", view=True)
    def supports_interface(self, frame: Frame, interface_id: Bytes4) -> bool:
        """
        Whether the contract implements the interface `interface_id`.
        """
        if interface_id == INVALID_INTERFACE_ID:
            return False
        return any(i.interface_id == interface_id for i in self.INTERFACES)

    #
    # Storage
    #

    def load_u256(self, frame: Frame, key: StorageKey) -> U256:
        """
        Read an integer from storage, defaulting to zero.
        """
        value = get_storage(frame.state, frame.address, key)
        if value is None:
            return U256(0)
        assert isinstance(value, U256)
        return value

    def load_address(self, frame: Frame, key: StorageKey) -> Optional[Address]:
        """
        Read an address from storage, `None` when unset.
        """
        value = get_storage(frame.state, frame.address, key)
        assert value is None or isinstance(value, Address)
        return value

    def load_bool(self, frame: Frame, key: StorageKey) -> bool:
        """
        Read a flag from storage, defaulting to `False`.
        """
        return get_storage(frame.state, frame.address, key) is True

    def store(
        self, frame: Frame, key: StorageKey, value: Optional[StorageValue]
    ) -> None:
        """
        Write to storage. Zero values and `None` delete the key.
        """
        if frame.message.is_static:
            raise WriteInStaticContext("storage write in static context")
        if value is False or (isinstance(value, U256) and value == 0):
            value = None
        set_storage(frame.state, frame.address, key, value)

    #
    # Logs
    #

    def emit(
        self, frame: Frame, signature: str, *values: Any, indexed: int
    ) -> None:
        """
        Emit the event `signature`. The first `indexed` values become topics,
        the rest are ABI encoded into the log data.
        """
        if frame.message.is_static:
            raise WriteInStaticContext("log emitted in static context")
        _, types = parse_signature(signature)
        if len(values) != len(types):
            raise ValueError(f"`{signature}` expects {len(types)} values")
        topics = (event_topic(signature),) + tuple(
            Hash32(encode([t], [to_abi_value(v)]))
            for t, v in zip(types[:indexed], values[:indexed])
        )
        data = encode(list(types[indexed:]), to_abi_value(values[indexed:]))
        log = Log(address=frame.address, topics=topics, data=Bytes(data))
        frame.logs += (log,)
        evm_trace(frame, LogEmitted(log))

    #
    # Calls to other accounts
    #

    def try_call(
        self,
        frame: Frame,
        target: Address,
        function: Optional[str],
        *arguments: Any,
        value: U256 = U256(0),
        is_static: bool = False,
    ) -> Frame:
        """
        Send a message to `target` and return its frame without raising when
        it fails.
        """
        parent = frame.message
        child_message = Message(
            block_env=parent.block_env,
            tx_env=parent.tx_env,
            caller=frame.address,
            target=target,
            current_target=target,
            value=value,
            function=function,
            arguments=tuple(arguments),
            code=get_account(frame.state, target).code,
            depth=parent.depth + Uint(1),
            should_transfer_value=True,
            is_static=parent.is_static or is_static,
            parent_frame=frame,
        )
        child_frame = process_message(child_message)
        if not child_frame.error:
            incorporate_child_on_success(frame, child_frame)
        return child_frame

    def call_contract(
        self,
        frame: Frame,
        target: Address,
        function: str,
        *arguments: Any,
        value: U256 = U256(0),
    ) -> Any:
        """
        Call `function` on `target`, re-raising the error if the call fails.
        """
        child_frame = self.try_call(
            frame, target, function, *arguments, value=value
        )
        if child_frame.error:
            raise child_frame.error
        return child_frame.output

    def send_value(
        self, frame: Frame, recipient: Address, amount: U256
    ) -> None:
        """
        Transfer `amount` of native currency to `recipient`, running its
        `receive` hook if it is a contract. Raises `TransferFailed` when the
        transfer does not go through.
        """
        child_frame = self.try_call(frame, recipient, None, value=amount)
        if child_frame.error:
            raise TransferFailed(child_frame.error)

    #
    # Helpers
    #

    def is_contract(self, frame: Frame, address: Address) -> bool:
        """
        Whether `address` holds contract code.
        """
        return account_has_code(frame.state, address)
