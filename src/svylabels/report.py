"""
Label Report: inventory of how a vector's labels line up with its data.

This module provides lightweight analysis of LabelledVector objects:
    - Value counts per labelled value
    - Data values with no label
    - Labels whose value never occurs in the data
    - Warning flags worth looking at before transforming

IMPORTANT: This does NOT modify the vector.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List

from svylabels.model import LabelledTable, LabelledVector


@dataclass
class LabelReport:
    """Analysis report for one labelled vector."""

    length: int = 0
    missing_count: int = 0
    label_count: int = 0

    # occurrences of each labelled value in the data (0 if unused)
    value_counts: Dict[Any, int] = field(default_factory=dict)
    unlabelled_values: List[Any] = field(default_factory=list)
    unused_labels: List[Any] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_vector(x: LabelledVector) -> LabelReport:
    """
    Compare a vector's label map against its data.

    Returns a LabelReport with counts and warnings.
    """
    present = [v for v in x.values if v is not None]
    counts = Counter(present)

    report = LabelReport(
        length=len(x.values),
        missing_count=len(x.values) - len(present),
        label_count=len(x.label_map),
    )

    for entry in x.label_map:
        report.value_counts[entry.value] = counts.get(entry.value, 0)

    report.unused_labels = sorted(v for v, n in report.value_counts.items() if n == 0)
    labelled = set(x.label_map.values)
    report.unlabelled_values = sorted(v for v in counts if v not in labelled)

    if report.unlabelled_values:
        report.add_warning(
            f"Unlabelled values: {', '.join(str(v) for v in report.unlabelled_values)}"
        )
    if report.unused_labels:
        report.add_warning(
            f"Unused labels: {', '.join(str(v) for v in report.unused_labels)}"
        )
    if report.length > 0 and report.missing_count == report.length:
        report.add_warning("All values are missing")

    return report


def analyze_table(t: LabelledTable) -> Dict[str, LabelReport]:
    return {name: analyze_vector(col) for name, col in t.columns.items()}
