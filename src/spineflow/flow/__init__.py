"""Fluent single-value pipelines over plain and awaitable values.

Architecture::

    markers.py     KEEP_ORIGINAL / RETURN_BOTH result-shaping markers
    payload.py     Immediate | Deferred payload variants, memoized Pending
    stage.py       Invocation override and StageSpec (call + shaping rules)
    container.py   Flow: pipe engine, catch/observe, derived operators
    factory.py     flow(), from_value(), from_pending()
"""

from spineflow.flow.container import Flow
from spineflow.flow.factory import flow, from_pending, from_value
from spineflow.flow.markers import KEEP_ORIGINAL, RETURN_BOTH, SNAPSHOT, ResultShaping
from spineflow.flow.payload import Deferred, FlowMode, Immediate, Pending
from spineflow.flow.stage import Invocation, StageSpec

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
]
