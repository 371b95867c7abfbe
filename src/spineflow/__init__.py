"""spine-flow -- chain transformations over a value, sync or async alike.

    >>> from spineflow import flow
    >>> flow(5).filter(lambda n: n > 0).map(lambda n: n * 2).get()
    10

Deferred chains resolve through an awaitable::

    total = await flow(fetch_rows()).map(len).delay(0.1).get()
"""

from spineflow.flow import (
    KEEP_ORIGINAL,
    RETURN_BOTH,
    SNAPSHOT,
    Deferred,
    Flow,
    FlowMode,
    Immediate,
    Invocation,
    Pending,
    ResultShaping,
    StageSpec,
    flow,
    from_pending,
    from_value,
)

__version__ = "0.1.0"

__all__ = [
    "Flow",
    "FlowMode",
    "flow",
    "from_value",
    "from_pending",
    "Invocation",
    "StageSpec",
    "ResultShaping",
    "KEEP_ORIGINAL",
    "RETURN_BOTH",
    "SNAPSHOT",
    "Immediate",
    "Deferred",
    "Pending",
    "__version__",
]
