"""
Stage configuration: how a transformer is called and how its result is shaped.

Every ``pipe`` call is described by a :class:`StageSpec`. Callers can build
one explicitly (``pipe(fn, stage=StageSpec(...))``) or use the positional
convention, which is parsed into the same structure:

    pipe(fn)                                   fn(value)
    pipe(fn, a, b)                             fn(value, a, b)
    pipe(fn, a, KEEP_ORIGINAL)                 fn(value, a)        -> value
    pipe(fn, Invocation(args=[1, 2]))          fn(1, 2)
    pipe(fn, Invocation(context=obj, args=[1]))  fn bound to obj, called with (1,)
    pipe(fn, {"args": [1, 2]}, RETURN_BOTH)    fn(1, 2)            -> (result, value)

An invocation override is recognised structurally in the first extra
argument: an :class:`Invocation`, or a mapping that has a ``"context"`` key or
a list/tuple ``"args"`` value. When present the wrapped value is NOT passed to
the transformer and any further positional extras are ignored.

A non-callable transformer is a constant: the stage result is the transformer
itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MethodType
from typing import Any

from spineflow.core.errors import FlowValidationError
from spineflow.flow.markers import Marker, ResultShaping, trailing_shaping


@dataclass(frozen=True, slots=True)
class Invocation:
    """Explicit call binding for one stage.

    Attributes:
        context: Object the transformer is bound to (like a method receiver),
            or None for a plain call
        args: Positional arguments; the wrapped value is not prepended
    """

    context: Any = None
    args: tuple[Any, ...] | list[Any] | None = None


def as_invocation(candidate: Any) -> Invocation | None:
    """Return the override described by ``candidate``, or None if it is not one."""
    if isinstance(candidate, Invocation):
        return candidate
    if isinstance(candidate, Mapping):
        args = candidate.get("args")
        if "context" in candidate or isinstance(args, (list, tuple)):
            return Invocation(
                context=candidate.get("context"),
                args=args if isinstance(args, (list, tuple)) else None,
            )
    return None


@dataclass(frozen=True, slots=True)
class StageSpec:
    """Explicit configuration of a single stage.

    Attributes:
        invocation_context: Receiver the transformer is bound to (override mode)
        positional_arguments: Full argument list in override mode; None selects
            the default convention ``(value, *extra_arguments)``
        extra_arguments: Arguments passed after the value in default mode
        result_shaping: How the result becomes the next payload
    """

    invocation_context: Any = None
    positional_arguments: tuple[Any, ...] | None = None
    extra_arguments: tuple[Any, ...] = field(default=())
    result_shaping: ResultShaping = ResultShaping.RESULT

    def __post_init__(self) -> None:
        if self.positional_arguments is not None and self.extra_arguments:
            raise FlowValidationError(
                "extra_arguments only apply when positional_arguments is None",
                field="extra_arguments",
                value=self.extra_arguments,
            )
        if not isinstance(self.result_shaping, ResultShaping):
            raise FlowValidationError(
                "result_shaping must be a ResultShaping",
                field="result_shaping",
                value=self.result_shaping,
            )

    @property
    def overrides_invocation(self) -> bool:
        return self.positional_arguments is not None or self.invocation_context is not None

    @classmethod
    def from_extra(cls, extra: tuple[Any, ...]) -> StageSpec:
        """Parse the positional ``pipe(transformer, *extra)`` convention."""
        shaping, rest = trailing_shaping(extra)
        override = as_invocation(rest[0]) if rest else None
        if override is not None:
            return cls(
                invocation_context=override.context,
                positional_arguments=tuple(override.args or ()),
                result_shaping=shaping,
            )
        return cls(extra_arguments=tuple(rest), result_shaping=shaping)

    def call_arguments(self, value: Any) -> tuple[Any, tuple[Any, ...]]:
        """Return ``(binding, args)`` for calling a transformer on ``value``."""
        if self.overrides_invocation:
            return self.invocation_context, tuple(self.positional_arguments or ())
        return None, (value, *self.extra_arguments)

    def invoke(self, transformer: Any, value: Any) -> Any:
        """Run the transformer (or propagate the constant) for ``value``."""
        if not callable(transformer):
            return transformer
        binding, args = self.call_arguments(value)
        if binding is not None:
            transformer = MethodType(transformer, binding)
        return transformer(*args)

    def shape(self, result: Any, original: Any) -> Any:
        return self.result_shaping.shape(result, original)

    def apply(self, transformer: Any, value: Any) -> Any:
        """invoke + shape, synchronously."""
        return self.shape(self.invoke(transformer, value), value)


def build_stage(extra: tuple[Any, ...], stage: StageSpec | None) -> StageSpec:
    """Resolve the StageSpec for one ``pipe`` call."""
    if stage is None:
        return StageSpec.from_extra(extra)
    if extra and not (len(extra) == 1 and isinstance(extra[0], Marker)):
        raise FlowValidationError(
            "pass either positional extras or stage=, not both",
            field="stage",
            value=extra,
        )
    if extra:
        return replace(stage, result_shaping=extra[0].shaping)
    return stage


__all__ = ["Invocation", "StageSpec", "as_invocation", "build_stage"]
