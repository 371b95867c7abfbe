"""
Flow container and transformation engine.

A ``Flow`` wraps one payload (``Immediate`` or ``Deferred``) and exposes a
fluent operation set. Every operation returns a new container; the payload
variant, and therefore the mode, is fixed when a container is built.

Manifesto:
    - **One decision, made once:** The factory picks the mode; stages inherit it
    - **Same code for sync and async callers:** ``pipe`` accepts plain and
      coroutine transformers alike
    - **Chains don't abort:** A synchronous stage failure is handed to the
      error handler and the chain continues with ``None``
    - **Deferred failures are not hidden:** They surface when awaited

Architecture:
    ::

        flow(seed) ──> Flow[Immediate] ──pipe──> Flow[Immediate] ──> get() -> value
                  └──> Flow[Deferred]  ──pipe──> Flow[Deferred]  ──> get() -> awaitable

        pipe(transformer, *extra, stage=None)
          1. observe pre-transform value
          2. binding + arguments      (StageSpec.call_arguments)
          3. execute / constant       (StageSpec.invoke)
          4. shape result             (StageSpec.shape)
          5. wrap in same mode

        Immediate: steps run now; Exceptions go to the source's error handler.
        Deferred:  steps run inside one Pending, after the source settles;
                   Exceptions propagate to whoever awaits.

Examples:
    >>> from spineflow import flow, KEEP_ORIGINAL
    >>> flow(2).when(lambda v: v % 2 == 0, lambda v: v * 10).get()
    20
    >>> flow(5).pipe(lambda v: v * 2, KEEP_ORIGINAL).get()
    5
    >>> errors = []
    >>> flow(1).catch(errors.append).pipe(lambda v: v / 0).get() is None
    True
    >>> type(errors[0]).__name__
    'ZeroDivisionError'

Guardrails:
    ❌ DON'T: Expect catch() handlers to see failures of deferred stages
    ✅ DO: Wrap ``await chain.get()`` in try/except for deferred chains

    ❌ DON'T: Treat retry() as re-running upstream work
    ✅ DO: Retry inside the transformer that performs the work

Tags:
    pipeline, fluent-api, async, error-isolation, spine-flow
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Generic, TypeVar

from spineflow.core.errors import FlowValidationError, categorize_error
from spineflow.core.logging import get_logger
from spineflow.flow.payload import Deferred, FlowMode, Immediate, Payload, Pending, settle_value
from spineflow.flow.stage import StageSpec, build_stage


logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ErrorHandler = Callable[[Exception], Any]
Observer = Callable[[Any], Any]


def _ignore_error(error: Exception) -> None:
    pass


class Flow(Generic[T]):
    """Immutable single-value pipeline container."""

    __slots__ = ("_payload", "_on_error", "_observer")

    def __init__(
        self,
        payload: Payload[T],
        *,
        on_error: ErrorHandler | None = None,
        observer: Observer | None = None,
    ):
        if not isinstance(payload, (Immediate, Deferred)):
            raise FlowValidationError(
                "payload must be Immediate or Deferred",
                field="payload",
                value=payload,
            )
        self._payload = payload
        self._on_error = on_error or _ignore_error
        self._observer = observer

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def payload(self) -> Payload[T]:
        return self._payload

    @property
    def mode(self) -> FlowMode:
        return self._payload.mode

    @property
    def is_deferred(self) -> bool:
        return self._payload.mode is FlowMode.DEFERRED

    def get(self) -> Any:
        """Return the raw value (immediate) or a coroutine settling to it (deferred).

        An immediate container whose stage returned an awaitable holds it as a
        ``Pending``, which may be awaited any number of times.
        """
        return self._payload.resolve()

    def __repr__(self) -> str:
        return f"Flow({self._payload!r})"

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def catch(self, handler: ErrorHandler) -> Flow[T]:
        """Return this container with ``handler`` receiving its stage failures.

        Containers are immutable: ``self`` is left untouched, so the caller must
        continue from the returned container. ``f.catch(h); f.pipe(g)`` does
        not route failures of ``g`` to ``h``.

        The handler sees synchronous failures raised by ``pipe`` calls made on
        the returned container only. It is not inherited by later stages and
        never sees deferred failures.
        """
        return Flow(self._payload, on_error=handler, observer=self._observer)

    def observe(self, observer: Observer | None) -> Flow[T]:
        """Return this container with a per-chain observer.

        The observer is called with every pre-transform value of this chain,
        including later stages. Pass None to detach.
        """
        return Flow(self._payload, on_error=self._on_error, observer=observer)

    def defer(self) -> Flow[Any]:
        """Lift the container into deferred mode (no-op if already deferred)."""
        if self.is_deferred:
            return self
        return Flow(self._payload.to_deferred(), on_error=self._on_error, observer=self._observer)

    def _derive(self, payload: Payload[R]) -> Flow[R]:
        return Flow(payload, observer=self._observer)

    def _notify(self, value: Any) -> None:
        if self._observer is not None:
            self._observer(value)

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------

    def pipe(self, transformer: Any, *extra: Any, stage: StageSpec | None = None) -> Flow[Any]:
        """Apply one stage.

        Args:
            transformer: Callable ``(value, *args)`` returning a value or an
                awaitable, or a constant that becomes the stage result
            *extra: Extra call arguments, an optional leading invocation
                override and an optional trailing result-shaping marker
            stage: Explicit StageSpec instead of the positional convention

        Returns:
            A new Flow of the same mode
        """
        spec = build_stage(extra, stage)
        if self.is_deferred:
            return self._derive(Deferred(Pending(lambda: self._run_deferred(transformer, spec))))

        value = self._payload.value
        try:
            self._notify(value)
            result = spec.apply(transformer, value)
        except Exception as error:
            logger.debug(
                "flow.stage_failed",
                error_type=type(error).__name__,
                category=categorize_error(error).value,
                error=str(error),
            )
            self._on_error(error)
            return self._derive(Immediate(None))
        if inspect.isawaitable(result):
            result = Pending.of(result)
        return self._derive(Immediate(result))

    async def _run_deferred(self, transformer: Any, spec: StageSpec) -> Any:
        value = await self._payload.settle()
        self._notify(value)
        result = await settle_value(spec.invoke(transformer, value))
        return spec.shape(result, value)

    # ------------------------------------------------------------------
    # Derived operators
    # ------------------------------------------------------------------

    def tap(self, fn: Callable[[T], Any]) -> Flow[T]:
        """Call ``fn`` for its side effect and forward the value unchanged."""

        def _tap(value: T) -> T:
            fn(value)
            return value

        return self.pipe(_tap)

    def map(self, fn: Callable[[T], R]) -> Flow[R]:
        return self.pipe(fn)

    def filter(self, predicate: Callable[[T], bool]) -> Flow[T | None]:
        """Keep the value if ``predicate`` holds, otherwise continue with None."""
        return self.pipe(lambda value: value if predicate(value) else None)

    def delay(self, seconds: float) -> Flow[T]:
        """Wait ``seconds`` before forwarding the value. Always deferred."""
        if seconds < 0:
            raise FlowValidationError(
                "delay must be >= 0 seconds",
                field="seconds",
                value=seconds,
            ).with_context(operator="delay", mode=self.mode.value)

        async def _sleep(value: T) -> T:
            await asyncio.sleep(seconds)
            return value

        return self.defer().pipe(_sleep)

    def retry(self, attempts: int) -> Flow[T]:
        """Re-await the current value up to ``attempts`` times.

        The value was produced before this stage runs, so a failed value fails
        identically on every attempt; upstream work is never re-run. The last
        failure is re-raised.
        """
        if attempts < 1:
            raise FlowValidationError(
                "attempts must be >= 1",
                field="attempts",
                value=attempts,
            ).with_context(operator="retry", mode=self.mode.value)

        async def _reobserve(value: Any) -> Any:
            outcome = Pending.of(value)
            for attempt in range(1, attempts + 1):
                try:
                    return await outcome
                except Exception as error:
                    logger.debug(
                        "flow.retry_attempt_failed",
                        attempt=attempt,
                        attempts=attempts,
                        error_type=type(error).__name__,
                    )
                    if attempt == attempts:
                        raise

        return self.pipe(_reobserve)

    def when(
        self,
        condition: bool | Callable[[T], bool],
        then_fn: Callable[[T], Any],
        else_fn: Callable[[T], Any] | None = None,
    ) -> Flow[Any]:
        """Branch on ``condition`` (a bool or a predicate evaluated per run)."""

        def _branch(value: T) -> Any:
            matched = condition(value) if callable(condition) else condition
            if matched:
                return then_fn(value)
            return else_fn(value) if else_fn is not None else value

        return self.pipe(_branch)


__all__ = ["Flow", "ErrorHandler", "Observer"]
