"""
Defines the functions required for creating traces during execution.

A _trace_ is a log of operations that took place during an event or period of
time. Here the log is built from a series of [`TraceEvent`]s emitted while a
transaction executes: the transaction boundaries, every message call
(including the nested ones a value transfer can trigger) and every log a
contract emits.

Note that this module _does not_ contain a trace implementation. Instead, it
defines only the events that can be collected into a trace by some other
package, and the hook through which they are delivered. See [`EvmTracer`].

[`EvmTracer`]: ref:ethereum_refunds.trace.EvmTracer
[`TraceEvent`]: ref:ethereum_refunds.trace.TraceEvent
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from ethereum_types.numeric import U256, Uint

from .exceptions import EthereumException
from .fork_types import Address, Log


@dataclass
class TransactionStart:
    """
    Trace event that is triggered at the start of a transaction.
    """

    sender: Address
    """
    Account that signed the transaction.
    """

    function: Optional[str]
    """
    Signature of the function the transaction calls, if any.
    """


@dataclass
class TransactionEnd:
    """
    Trace event that is triggered at the end of a transaction.
    """

    output: Any
    """
    Return value of the outermost frame of execution.
    """

    error: Optional[EthereumException]
    """
    The exception, if any, that caused the transaction to fail.

    See [`ethereum_refunds.exceptions`] as well as
    [`ethereum_refunds.vm.exceptions`][vm] for details.

    [`ethereum_refunds.exceptions`]: ref:ethereum_refunds.exceptions
    [vm]: ref:ethereum_refunds.vm.exceptions
    """


@dataclass
class MessageStart:
    """
    Trace event that is triggered before a message is executed.
    """

    depth: Uint
    caller: Address
    target: Address
    function: Optional[str]
    value: U256


@dataclass
class MessageEnd:
    """
    Trace event that is triggered after a message has been executed.
    """

    depth: Uint
    error: Optional[EthereumException]


@dataclass
class LogEmitted:
    """
    Trace event that is triggered when a contract emits a log.
    """

    log: Log


TraceEvent = Union[
    TransactionStart,
    TransactionEnd,
    MessageStart,
    MessageEnd,
    LogEmitted,
]
"""
All possible types of events that an [`EvmTracer`] is expected to handle.

[`EvmTracer`]: ref:ethereum_refunds.trace.EvmTracer
"""


def discard_evm_trace(frame: object, event: TraceEvent) -> None:
    """
    An [`EvmTracer`] that discards all events.

    [`EvmTracer`]: ref:ethereum_refunds.trace.EvmTracer
    """


class EvmTracer(Protocol):
    """
    [`Protocol`] that describes tracer functions.

    [`Protocol`]: https://docs.python.org/3/library/typing.html#typing.Protocol
    """

    def __call__(self, frame: object, event: TraceEvent, /) -> None:
        """
        Call `self` as a function, recording a trace event.

        `frame` is the live execution frame, an
        [`ethereum_refunds.vm.Frame`][frame], or `None` for events emitted
        outside of any frame.

        `event`, a [`TraceEvent`], is the reason why the tracer was triggered.

        [frame]: ref:ethereum_refunds.vm.Frame
        [`TraceEvent`]: ref:ethereum_refunds.trace.TraceEvent
        """


_evm_trace: EvmTracer = discard_evm_trace


def set_evm_trace(tracer: EvmTracer) -> EvmTracer:
    """
    Install `tracer` as the active tracer and return the previous one.
    """
    global _evm_trace
    previous = _evm_trace
    _evm_trace = tracer
    return previous


def evm_trace(frame: object, event: TraceEvent) -> None:
    """
    Deliver `event` to the active tracer.
    """
    _evm_trace(frame, event)
