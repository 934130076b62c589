# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Design by contract utilities for :mod:`drivefs`.

Checks are off by default. Set ``DRIVEFS_DBC=1`` or call :func:`enable_dbc`
to evaluate ``@require``/``@ensure`` predicates and class ``@invariant``s.
Failed contracts raise :class:`AssertionError`.

Predicates return a truthy value, or a tuple whose first item is the verdict
and whose second item is a detail included in the failure message.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import ParamSpec, TypeAlias, TypeVar

P = ParamSpec("P")
R = TypeVar("R")
C = TypeVar("C", bound=type)

ContractResult: TypeAlias = bool | tuple[bool, *tuple[object, ...]] | None
Predicate: TypeAlias = Callable[..., object]

_ENV_FLAG = "DRIVEFS_DBC"
_FALSE_VALUES = frozenset({"", "0", "false", "off", "no"})
_forced_state: bool | None = None


def dbc_active() -> bool:
    """Return ``True`` when DbC checks should run."""

    if _forced_state is None:
        raw = os.getenv(_ENV_FLAG)
        return raw is not None and raw.strip().lower() not in _FALSE_VALUES
    return _forced_state


def enable_dbc() -> None:
    global _forced_state
    _forced_state = True


def disable_dbc() -> None:
    global _forced_state
    _forced_state = False


@contextmanager
def dbc_enabled(active: bool = True) -> Iterator[None]:  # noqa: FBT001, FBT002
    """Force the DbC flag to ``active`` for the duration of the block."""

    global _forced_state
    saved = _forced_state
    _forced_state = active
    try:
        yield
    finally:
        _forced_state = saved


def _split_verdict(outcome: object) -> tuple[bool, object | None]:
    if outcome is None:
        return False, None
    if not isinstance(outcome, tuple):
        return bool(outcome), None
    if len(outcome) == 0:
        raise TypeError("Contract predicates must not return an empty tuple.")
    return bool(outcome[0]), outcome[1] if len(outcome) > 1 else None


@dataclass(frozen=True, slots=True)
class _Contract:
    kind: str
    predicate: Predicate

    def check(
        self,
        target: Callable[..., object],
        args: tuple[object, ...],
        kwargs: Mapping[str, object],
    ) -> None:
        where = getattr(target, "__qualname__", repr(target))
        try:
            outcome = self.predicate(*args, **kwargs)
        except AssertionError:
            raise
        except Exception as error:
            msg = (
                f"{self.kind} contract for {where} raised "
                f"{type(error).__name__}: {error}"
            )
            raise AssertionError(msg) from error

        passed, detail = _split_verdict(outcome)
        if passed:
            return
        label = getattr(self.predicate, "__name__", repr(self.predicate))
        msg = f"{self.kind} contract for {where} failed via {label}."
        if detail is not None and str(detail):
            msg += f" Details: {detail}"
        raise AssertionError(msg)


def _contracts(kind: str, predicates: tuple[Predicate, ...]) -> tuple[_Contract, ...]:
    if not predicates:
        raise ValueError(f"@{kind} expects at least one predicate")
    return tuple(_Contract(kind, predicate) for predicate in predicates)


def require(*predicates: Predicate) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Check preconditions against the call arguments before running."""

    contracts = _contracts("require", predicates)

    def decorate(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def checked(*args: P.args, **kwargs: P.kwargs) -> R:
            if dbc_active():
                for contract in contracts:
                    contract.check(func, args, kwargs)
            return func(*args, **kwargs)

        return checked

    return decorate


def ensure(*predicates: Predicate) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Check postconditions once the wrapped callable has returned.

    Predicates receive the call arguments plus ``result=``. They are not
    evaluated when the callable raises.
    """

    contracts = _contracts("ensure", predicates)

    def decorate(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def checked(*args: P.args, **kwargs: P.kwargs) -> R:
            value = func(*args, **kwargs)
            if dbc_active():
                for contract in contracts:
                    contract.check(func, args, {**kwargs, "result": value})
            return value

        return checked

    return decorate


def invariant(
    *predicates: Predicate, force_attr: str | None = None
) -> Callable[[C], C]:
    """Enforce class invariants after ``__init__`` and around public methods.

    Private names, static methods, and class methods are left unwrapped.
    ``force_attr`` names an instance attribute that, when truthy, turns the
    checks on for that instance even while DbC is globally inactive.
    """

    contracts = _contracts("invariant", predicates)

    def enabled_for(instance: object) -> bool:
        if dbc_active():
            return True
        return force_attr is not None and bool(getattr(instance, force_attr, False))

    def verify(instance: object, method: Callable[..., object]) -> None:
        for contract in contracts:
            contract.check(method, (instance,), {})

    def guard(method: Callable[..., object]) -> Callable[..., object]:
        @wraps(method)
        def guarded(self: object, *args: object, **kwargs: object) -> object:
            if not enabled_for(self):
                return method(self, *args, **kwargs)
            verify(self, method)
            try:
                return method(self, *args, **kwargs)
            finally:
                verify(self, method)

        return guarded

    def decorate(cls: C) -> C:
        init = cls.__init__

        @wraps(init)
        def checked_init(self: object, *args: object, **kwargs: object) -> None:
            init(self, *args, **kwargs)
            if enabled_for(self):
                verify(self, init)

        cls.__init__ = checked_init  # type: ignore[misc]

        for name, member in list(vars(cls).items()):
            if name.startswith("_") or not callable(member):
                continue
            if isinstance(member, staticmethod | classmethod):
                continue
            setattr(cls, name, guard(member))
        return cls

    return decorate


__all__ = [
    "ContractResult",
    "dbc_active",
    "dbc_enabled",
    "disable_dbc",
    "enable_dbc",
    "ensure",
    "invariant",
    "require",
]
