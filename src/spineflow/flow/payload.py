"""
Payload variants for flow containers.

A container's mode is not a flag threaded through every signature; it is the
variant of the payload it holds:

    ┌─────────────────────────┬──────────────────────────────┐
    │     Immediate[T]        │        Deferred[T]           │
    ├─────────────────────────┼──────────────────────────────┤
    │ • value: T              │ • pending: Pending[T]        │
    │ • resolve() -> T        │ • resolve() -> coroutine     │
    │ • settle() (async)      │ • settle() (async)           │
    └─────────────────────────┴──────────────────────────────┘

``resolve()`` is the uniform accessor used by ``Flow.get()``: it hands back
the raw value for immediate payloads and a fresh coroutine over the shared
``Pending`` for deferred ones, so ``asyncio.run(chain.get())`` works and every
call observes the same outcome.
``settle()`` is the async view used inside deferred stages: it always yields
the settled value.

``Pending`` wraps a zero-argument factory producing an awaitable. The factory
runs at most once, on the first ``await``; the resulting task is cached, so
awaiting a Pending repeatedly yields the same value (or re-raises the same
exception) without redoing the work.

Examples:
    >>> import asyncio
    >>> calls = []
    >>> async def work():
    ...     calls.append(1)
    ...     return 42
    >>> pending = Pending(work)
    >>> async def twice():
    ...     return await pending, await pending
    >>> asyncio.run(twice())
    (42, 42)
    >>> len(calls)
    1
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Coroutine, Generator, Generic, TypeVar


T = TypeVar("T")


class FlowMode(str, Enum):
    """Execution mode of a container, fixed when the container is built."""

    IMMEDIATE = "immediate"
    DEFERRED = "deferred"


async def settle_value(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class Pending(Generic[T]):
    """Memoized awaitable. The underlying work starts on first await."""

    __slots__ = ("_factory", "_future")

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._future: asyncio.Future[T] | None = None

    @classmethod
    def of(cls, source: Any) -> Pending[Any]:
        """Wrap an awaitable (or a plain value, which settles as-is)."""
        if isinstance(source, Pending):
            return source
        return cls(lambda: settle_value(source))

    @property
    def started(self) -> bool:
        return self._future is not None

    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def __await__(self) -> Generator[Any, None, T]:
        if self._future is None:
            self._future = asyncio.ensure_future(self._factory())
        return self._future.__await__()

    def __repr__(self) -> str:
        if self._future is None:
            state = "not started"
        elif not self._future.done():
            state = "running"
        elif self._future.cancelled():
            state = "cancelled"
        elif self._future.exception() is not None:
            state = f"failed: {self._future.exception()!r}"
        else:
            state = f"settled: {self._future.result()!r}"
        return f"Pending({state})"


@dataclass(frozen=True, slots=True)
class Immediate(Generic[T]):
    """A payload that is already a plain value."""

    value: T

    @property
    def mode(self) -> FlowMode:
        return FlowMode.IMMEDIATE

    def resolve(self) -> T:
        return self.value

    async def settle(self) -> Any:
        return await settle_value(self.value)

    def to_deferred(self) -> Deferred[Any]:
        return Deferred(Pending.of(self.value))

    def __repr__(self) -> str:
        return f"Immediate({self.value!r})"


@dataclass(frozen=True, slots=True)
class Deferred(Generic[T]):
    """A payload whose value is produced by a pending computation."""

    pending: Pending[T]

    @property
    def mode(self) -> FlowMode:
        return FlowMode.DEFERRED

    def resolve(self) -> Coroutine[Any, Any, T]:
        return self.settle()

    async def settle(self) -> T:
        return await self.pending

    def to_deferred(self) -> Deferred[T]:
        return self

    def __repr__(self) -> str:
        return f"Deferred({self.pending!r})"


Payload = Immediate[T] | Deferred[T]


def is_pending_seed(seed: Any) -> bool:
    """True for awaitables and coroutine functions."""
    return inspect.isawaitable(seed) or inspect.iscoroutinefunction(seed)


__all__ = [
    "FlowMode",
    "Pending",
    "Immediate",
    "Deferred",
    "Payload",
    "settle_value",
    "is_pending_seed",
]
