"""Tests for spineflow.flow.stage and spineflow.flow.markers."""

import pytest

from spineflow.core.errors import FlowValidationError
from spineflow.flow.markers import (
    KEEP_ORIGINAL,
    RETURN_BOTH,
    SNAPSHOT,
    ResultShaping,
    trailing_shaping,
)
from spineflow.flow.stage import Invocation, StageSpec, as_invocation, build_stage


class TestMarkers:
    def test_markers_are_distinct(self):
        assert KEEP_ORIGINAL is not RETURN_BOTH
        assert KEEP_ORIGINAL.shaping is ResultShaping.ORIGINAL
        assert RETURN_BOTH.shaping is ResultShaping.BOTH

    def test_repr(self):
        assert repr(KEEP_ORIGINAL) == "<KEEP_ORIGINAL>"

    def test_trailing_shaping_strips_marker(self):
        assert trailing_shaping((1, RETURN_BOTH)) == (ResultShaping.BOTH, (1,))

    def test_trailing_shaping_without_marker(self):
        assert trailing_shaping((1, 2)) == (ResultShaping.RESULT, (1, 2))

    def test_shape(self):
        assert ResultShaping.RESULT.shape("r", "o") == "r"
        assert ResultShaping.ORIGINAL.shape("r", "o") == "o"
        assert ResultShaping.BOTH.shape("r", "o") == ("r", "o")

    def test_snapshot_is_not_live(self):
        assert SNAPSHOT is None


class TestAsInvocation:
    def test_instance(self):
        invocation = Invocation(args=[1])
        assert as_invocation(invocation) is invocation

    def test_mapping_with_context_key(self):
        assert as_invocation({"context": None}) == Invocation(context=None, args=None)

    def test_mapping_with_list_args(self):
        assert as_invocation({"args": [1, 2]}).args == [1, 2]

    def test_mapping_with_non_sequence_args(self):
        assert as_invocation({"args": "text"}) is None

    def test_other_values(self):
        assert as_invocation([1, 2]) is None
        assert as_invocation("context") is None


class TestStageSpec:
    def test_default_convention(self):
        spec = StageSpec.from_extra((1, 2))
        assert spec.call_arguments("v") == (None, ("v", 1, 2))
        assert not spec.overrides_invocation

    def test_override_ignores_further_extras(self):
        spec = StageSpec.from_extra((Invocation(args=[9]), "ignored"))
        assert spec.call_arguments("v") == (None, (9,))

    def test_override_with_context_only(self):
        receiver = object()
        spec = StageSpec.from_extra(({"context": receiver},))
        assert spec.call_arguments("v") == (receiver, ())

    def test_constant_transformer(self):
        assert StageSpec().invoke("constant", "v") == "constant"

    def test_apply_shapes(self):
        spec = StageSpec(result_shaping=ResultShaping.BOTH)
        assert spec.apply(lambda v: v + 1, 1) == (2, 1)

    def test_extra_with_positional_rejected(self):
        with pytest.raises(FlowValidationError):
            StageSpec(positional_arguments=(1,), extra_arguments=(2,))

    def test_shaping_type_checked(self):
        with pytest.raises(FlowValidationError):
            StageSpec(result_shaping="both")

    def test_build_stage_passthrough(self):
        spec = StageSpec(extra_arguments=(1,))
        assert build_stage((), spec) is spec

    def test_build_stage_applies_lone_marker(self):
        spec = build_stage((KEEP_ORIGINAL,), StageSpec())
        assert spec.result_shaping is ResultShaping.ORIGINAL
