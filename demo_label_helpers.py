#!/usr/bin/env python3
"""
Label Helpers Demo: Example vectors → Transforms → Report → YAML

Shows the full workflow:
1. Build example labelled vectors
2. Apply each label transform
3. Analyze label coverage before and after
4. Export the result to YAML
"""

import logging

from svylabels import (
    ConflictError,
    add_labels,
    add_labels_for_values,
    collapse,
    lbl,
    mark_missing,
    prune_unused,
    relabel,
    strip,
)
from svylabels.examples import build_example_table, build_example_vector, build_income_vector
from svylabels.report import analyze_vector
from svylabels.serialization import vector_to_yaml


def show(title, x):
    print(f"\n   {title}")
    print(f"      values: {list(x.values)}")
    print(f"      labels: {x.label_map.as_dict()}")


def main():
    logging.basicConfig(level=logging.DEBUG, format="      [%(name)s] %(message)s")

    print("=" * 80)
    print("LABEL HELPERS DEMO: Transforms → Report → YAML")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Build examples
    # =========================================================================
    print("\n1. EXAMPLE VECTORS...")
    x = build_example_vector()
    income = build_income_vector()
    show("Yes/No item", x)
    show("Income", income)

    # =========================================================================
    # STEP 2: Transforms
    # =========================================================================
    print("\n2. TRANSFORMS...")
    show("mark_missing(x, '.val >= 90')", mark_missing(x, ".val >= 90"))
    show("collapse(x, '(.val // 10) * 10')", collapse(x, "(.val // 10) * 10"))
    show(
        "relabel(x, ...two steps...)",
        relabel(
            x,
            (lbl(10, "Yes/Yes-ish"), ".val in [10, 11]"),
            (lbl(90, "???"), ".val == 99 | .lbl == 'Maybe'"),
        ),
    )
    show("add_labels(income, lbl(100, '$100'))", add_labels(income, lbl(100, "$100")))
    show("add_labels_for_values(income)", add_labels_for_values(income, lambda v: f"${v}"))
    show("add_labels_for_values(income, text)", add_labels_for_values(income, "'$' + str(.val)"))
    show("prune_unused(mark_missing(x, '.val == 30'))",
         prune_unused(mark_missing(x, ".val == 30")))

    try:
        add_labels(income, lbl(990, "Refused"))
    except ConflictError as e:
        print(f"\n   ✓ Conflict caught: {e}")

    # =========================================================================
    # STEP 3: Report
    # =========================================================================
    print("\n3. ANALYZING LABELS...")
    for name, vec in [("before", income), ("after backfill", add_labels_for_values(income))]:
        report = analyze_vector(vec)
        print(f"   {name}: {report.label_count} labels, "
              f"unlabelled {report.unlabelled_values}, unused {report.unused_labels}")
        for warning in report.warnings:
            print(f"      - {warning}")

    stripped = strip(build_example_table())
    print(f"   ✓ Stripped table columns: {stripped.names}")

    # =========================================================================
    # STEP 4: Export
    # =========================================================================
    print("\n4. EXPORTING...")
    with open("example_vector_output.yaml", "w") as f:
        f.write(vector_to_yaml(collapse(x, "(.val // 10) * 10")))
    print("   ✓ Vector exported to example_vector_output.yaml")


if __name__ == "__main__":
    main()
