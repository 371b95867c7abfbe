"""Entry points that build the first container of a chain."""

from __future__ import annotations

from typing import Any, Awaitable, TypeVar

from spineflow.core.logging import get_logger
from spineflow.core.settings import get_settings
from spineflow.flow.container import ErrorHandler, Flow, Observer
from spineflow.flow.payload import Deferred, Immediate, Pending, is_pending_seed


logger = get_logger(__name__)

T = TypeVar("T")


def _trace_stage(value: Any) -> None:
    logger.debug("flow.stage", value=repr(value))


def _default_observer(observer: Observer | None) -> Observer | None:
    if observer is not None:
        return observer
    if get_settings().trace_stages:
        return _trace_stage
    return None


def from_value(
    value: T,
    *,
    observer: Observer | None = None,
    on_error: ErrorHandler | None = None,
) -> Flow[T]:
    """Start an immediate-mode chain. ``value`` is stored as-is."""
    return Flow(Immediate(value), on_error=on_error, observer=_default_observer(observer))


def from_pending(
    pending: Awaitable[T] | Any,
    *,
    observer: Observer | None = None,
    on_error: ErrorHandler | None = None,
) -> Flow[T]:
    """Start a deferred-mode chain.

    ``pending`` is usually a coroutine, task or future; a plain value is
    accepted and settles as itself.
    """
    return Flow(Deferred(Pending.of(pending)), on_error=on_error, observer=_default_observer(observer))


def flow(
    seed: Any,
    *,
    observer: Observer | None = None,
    on_error: ErrorHandler | None = None,
) -> Flow[Any]:
    """Start a chain, inferring the mode from ``seed`` once.

    Awaitables and coroutine functions start a deferred chain; anything else
    starts an immediate one.

    Examples:
        >>> flow(3).map(lambda v: v + 1).get()
        4
        >>> flow(3).is_deferred
        False
    """
    if is_pending_seed(seed):
        return from_pending(seed, observer=observer, on_error=on_error)
    return from_value(seed, observer=observer, on_error=on_error)


__all__ = ["flow", "from_value", "from_pending"]
