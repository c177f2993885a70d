"""
Example labelled data used in the demo and the tests.

Small microdata-style columns: a yes/no item with a logically assigned
code and a not-in-universe code, an income item with only its special
codes labelled, and a quarter item labelled for a quarter that never
occurs in the extract.
"""
from svylabels.model import LabelMap, LabelledTable, LabelledVector


def build_example_vector() -> LabelledVector:
    return LabelledVector(
        values=[10, 10, 11, 20, 30, 99, 30, 10],
        label_map=LabelMap.from_dict({
            10: "Yes",
            11: "Yes - Logically Assigned",
            20: "No",
            30: "Maybe",
            99: "NIU",
        }),
        description="Example yes/no item",
    )


def build_income_vector() -> LabelledVector:
    return LabelledVector(
        values=[100, 200, 105, 990, 999, 230],
        label_map=LabelMap.from_dict({990: "Unknown", 999: "NIU"}),
        description="Income",
        var_desc="Total personal income in the previous month, in dollars.",
    )


def build_quarter_vector() -> LabelledVector:
    return LabelledVector(
        values=[1, 2, 3, 1, 2, 3, 1, 2, 3],
        label_map=LabelMap.from_dict({1: "Q1", 2: "Q2", 3: "Q3", 4: "Q4"}),
        description="Quarter",
    )


def build_example_table() -> LabelledTable:
    """Three-column table; YEAR carries descriptions but no value labels."""
    return LabelledTable({
        "YEAR": LabelledVector(
            values=[1962, 1962, 1962, 1963, 1963, 1963],
            description="Survey year",
            var_desc="YEAR reports the year in which the survey was conducted.",
        ),
        "EMPSTAT": LabelledVector(
            values=[10, 20, 99, 10, 10, 20],
            label_map=LabelMap.from_dict({10: "Employed", 20: "Unemployed", 99: "NIU"}),
            description="Employment status",
        ),
        "QUARTER": LabelledVector(
            values=[1, 2, 3, 1, 2, 3],
            label_map=LabelMap.from_dict({1: "Q1", 2: "Q2", 3: "Q3", 4: "Q4"}),
        ),
    })
