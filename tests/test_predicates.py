"""
Tests for predicate normalisation and evaluation.

These tests verify:
    - All three predicate forms normalise to a function of (val, lbl)
    - Predicates run once per label entry, in entry order
    - Undefined results are rejected where a definite answer is needed
"""

import math

import pytest
from svylabels.errors import ConfigurationError, ValidationError
from svylabels.lambdas import LambdaParseError
from svylabels.model import LabelMap
from svylabels.predicates import (
    as_labeller,
    as_lbl_function,
    caller_env,
    evaluate_predicate,
    map_entries,
    select_entries,
)


def module_level_predicate(val, lbl):
    return val >= 90


@pytest.fixture
def label_map():
    return LabelMap.from_dict({10: "Yes", 20: "No", 99: "NIU"})


class TestAsLblFunction:
    """Test normalisation of predicate forms."""

    def test_callable_passes_through(self):
        """A two-argument callable is returned unchanged."""
        f = lambda val, lbl: val > 1
        assert as_lbl_function(f) is f

    def test_callable_with_defaults_accepted(self):
        """Extra defaulted parameters are fine."""
        def f(val, lbl, extra=None):
            return True
        assert as_lbl_function(f) is f

    def test_wrong_arity_rejected(self):
        """A callable that cannot take (val, lbl) is a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            as_lbl_function(lambda val: True)
        with pytest.raises(ConfigurationError):
            as_lbl_function(lambda a, b, c: True)

    def test_mini_lambda_compiled(self):
        """Mini-lambda text becomes a callable."""
        f = as_lbl_function(".val >= 90")
        assert f(99, "NIU") is True
        assert f(10, "Yes") is False

    def test_name_from_local_scope(self):
        """A bare name is looked up in the caller's locals."""
        def local_predicate(val, lbl):
            return lbl == "No"
        f = as_lbl_function("local_predicate")
        assert f is local_predicate

    def test_name_from_module_scope(self):
        """A bare name falls back to the caller's globals."""
        assert as_lbl_function("module_level_predicate") is module_level_predicate

    def test_name_from_explicit_env(self):
        """An explicit env takes precedence over the caller's scope."""
        env = {"pick": lambda val, lbl: val == 10}
        f = as_lbl_function("pick", env)
        assert f(10, "Yes") is True

    def test_unknown_name(self):
        """An unknown name is a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            as_lbl_function("no_such_function_here")

    def test_non_callable_name(self):
        """A name bound to a non-callable is a ConfigurationError."""
        not_a_function = 5
        with pytest.raises(ConfigurationError):
            as_lbl_function("not_a_function")

    def test_bad_text(self):
        """Malformed text raises LambdaParseError."""
        with pytest.raises(LambdaParseError):
            as_lbl_function(".val >>> 3")

    def test_unsupported_type(self):
        """Other objects are a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            as_lbl_function(42)

    def test_caller_env_sees_locals(self):
        """caller_env(0) is the calling frame itself."""
        marker = object()
        assert caller_env(0)["marker"] is marker


class TestAsLabeller:
    """Test normalisation of labeller forms."""

    def test_callable_passes_through(self):
        """A one-argument callable is returned unchanged."""
        assert as_labeller(str) is str

    def test_mini_lambda_over_value(self):
        """Mini-lambda text builds a label from .val."""
        f = as_labeller("'$' + str(.val)")
        assert f(105) == "$105"

    def test_name_from_local_scope(self):
        """A bare name is looked up in the caller's locals."""
        def dollar_label(v):
            return f"${v}"
        assert as_labeller("dollar_label") is dollar_label

    def test_two_argument_callable_rejected(self):
        """A labeller takes only the value."""
        with pytest.raises(ConfigurationError):
            as_labeller(lambda val, lbl: lbl)

    def test_unsupported_type(self):
        """Other objects are a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            as_labeller(5)


class TestEvaluation:
    """Test evaluating predicates against a LabelMap."""

    def test_one_result_per_entry(self, label_map):
        """Results follow entry order."""
        results = evaluate_predicate(lambda val, lbl: lbl, label_map)
        assert results == ["Yes", "No", "NIU"]

    def test_select_entries(self, label_map):
        """select_entries returns booleans."""
        f = as_lbl_function(".val >= 90 | .lbl == 'No'")
        assert select_entries(f, label_map, "test") == [False, True, True]

    def test_select_entries_accepts_zero_and_one(self, label_map):
        """Results equal to 0 or 1 count as booleans."""
        assert select_entries(lambda val, lbl: int(val >= 20), label_map, "test") == [False, True, True]

    def test_select_entries_rejects_non_boolean(self, label_map):
        """A truthy string or other number is not a boolean."""
        with pytest.raises(ValidationError) as exc:
            select_entries(lambda val, lbl: "False", label_map, "mark_missing")
        assert "True or False" in str(exc.value)
        with pytest.raises(ValidationError) as exc:
            select_entries(lambda val, lbl: val // 20, label_map, "relabel")
        assert "99" in str(exc.value)
        assert "10" not in str(exc.value)

    def test_select_entries_rejects_none(self, label_map):
        """A None result is a ValidationError."""
        with pytest.raises(ValidationError) as exc:
            select_entries(lambda val, lbl: None if val == 20 else True, label_map, "mark_missing")
        assert "mark_missing" in str(exc.value)
        assert "20" in str(exc.value)

    def test_select_entries_rejects_nan(self, label_map):
        """A NaN result is a ValidationError."""
        with pytest.raises(ValidationError):
            select_entries(lambda val, lbl: math.nan, label_map, "test")

    def test_map_entries(self, label_map):
        """map_entries returns the computed values."""
        assert map_entries(lambda val, lbl: val * 2, label_map, "test") == [20, 40, 198]

    def test_map_entries_rejects_none(self, label_map):
        """An undefined new value is a ValidationError."""
        with pytest.raises(ValidationError):
            map_entries(lambda val, lbl: None, label_map, "collapse")

    def test_empty_map(self):
        """An empty map yields no results."""
        assert select_entries(lambda val, lbl: True, LabelMap(), "test") == []
