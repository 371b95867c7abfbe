"""
Result-shaping markers.

Two unique tokens a caller can pass as the *trailing* extra argument of any
stage to change what the stage produces:

- ``KEEP_ORIGINAL``: discard the transformed result, keep the pre-transform value
- ``RETURN_BOTH``: produce the tuple ``(transformed, pre-transform)``

Examples:
    >>> from spineflow import flow, KEEP_ORIGINAL, RETURN_BOTH
    >>> flow(5).pipe(lambda v: v * 2, KEEP_ORIGINAL).get()
    5
    >>> flow(5).pipe(lambda v: v * 2, RETURN_BOTH).get()
    (10, 5)

The marker is removed from the transformer's call arguments; it never reaches
user code.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ResultShaping(str, Enum):
    """How a stage turns its computed result into the next payload."""

    RESULT = "result"        # computed result stands
    ORIGINAL = "original"    # pre-transform value replaces the result
    BOTH = "both"            # (result, pre-transform value)

    def shape(self, result: Any, original: Any) -> Any:
        if self is ResultShaping.ORIGINAL:
            return original
        if self is ResultShaping.BOTH:
            return (result, original)
        return result


class Marker:
    """A unique, identity-compared token selecting a :class:`ResultShaping`."""

    __slots__ = ("name", "shaping")

    def __init__(self, name: str, shaping: ResultShaping):
        self.name = name
        self.shaping = shaping

    def __repr__(self) -> str:
        return f"<{self.name}>"


KEEP_ORIGINAL = Marker("KEEP_ORIGINAL", ResultShaping.ORIGINAL)
RETURN_BOTH = Marker("RETURN_BOTH", ResultShaping.BOTH)

# Captured once at import time. Not live: it never reflects any chain's state.
# Use Flow.observe() for per-chain diagnostics.
SNAPSHOT: Any = None


def trailing_shaping(extra: tuple[Any, ...]) -> tuple[ResultShaping, tuple[Any, ...]]:
    """Split a trailing marker off ``extra``.

    Returns the selected shaping and the remaining arguments.
    """
    if extra and isinstance(extra[-1], Marker):
        return extra[-1].shaping, extra[:-1]
    return ResultShaping.RESULT, extra


__all__ = [
    "ResultShaping",
    "Marker",
    "KEEP_ORIGINAL",
    "RETURN_BOTH",
    "SNAPSHOT",
    "trailing_shaping",
]
