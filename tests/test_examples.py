"""
Test the example vectors used by the demo and the docs.
"""

from svylabels.examples import (
    build_example_table,
    build_example_vector,
    build_income_vector,
    build_quarter_vector,
)


def test_example_vector_structure():
    x = build_example_vector()
    assert len(x) == 8
    assert x.label_map.label_for(11) == "Yes - Logically Assigned"
    assert x.label_map.values == (10, 11, 20, 30, 99)


def test_income_vector_has_only_special_codes_labelled():
    x = build_income_vector()
    assert x.label_map.values == (990, 999)
    assert x.var_desc


def test_quarter_vector_has_unused_label():
    x = build_quarter_vector()
    assert 4 in x.label_map
    assert 4 not in x.values


def test_example_table_columns():
    t = build_example_table()
    assert t.names == ["YEAR", "EMPSTAT", "QUARTER"]
    assert len(t["YEAR"].label_map) == 0
    assert t["YEAR"].description == "Survey year"
