"""
Re-entrancy Guard
^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

A per-contract lock held for the duration of a guarded function. The lock
lives in contract storage, so it is visible to any message nested inside the
guarded call and is discarded with everything else if the call fails.

The guard does not replace ordering state changes before external calls; it
turns a nested entry into an explicit error instead of relying on the state
having already been updated.
"""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

from ..state import StorageKey
from ..vm import Frame
from ..vm.exceptions import Revert

F = TypeVar("F", bound=Callable[..., Any])

REENTRANCY_LOCK: StorageKey = ("reentrancyLock",)


class ReentrancyViolation(Revert):
    """
    Raised when a guarded function is entered while a guarded function of
    the same contract is still running.
    """


def nonreentrant(method: F) -> F:
    """
    Hold the contract's re-entrancy lock while `method` runs.

    The lock is only taken when the contract's `reentrancy_guard` attribute
    is true, so contracts can make the guard a deployment choice.
    """

    @wraps(method)
    def wrapper(self: Any, frame: Frame, *args: Any) -> Any:
        if not getattr(self, "reentrancy_guard", True):
            return method(self, frame, *args)
        if self.load_bool(frame, REENTRANCY_LOCK):
            raise ReentrancyViolation(f"re-entered `{method.__name__}`")
        self.store(frame, REENTRANCY_LOCK, True)
        result = method(self, frame, *args)
        self.store(frame, REENTRANCY_LOCK, None)
        return result

    return cast(F, wrapper)
