"""
Survey Value Labels (svylabels) Package

Label algebra for labelled categorical vectors: numeric survey/census
columns whose codes carry human-readable labels.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Fixed-width, CSV or DDI file parsing
    - Rendering labelled values as categorical factors
    - Statistical estimation or survey weights

It defines the label model and the transforms over it only.
Readers hand a LabelledVector in, writers take a LabelledVector out.
"""

from .errors import (
    LabelError,
    ConfigurationError,
    LabelLookupError,
    ValidationError,
    ConflictError,
)
from .model import (
    LabelEntry,
    LabelMap,
    LabelledVector,
    LabelledTable,
    LabelPlaceholder,
    make_placeholder,
    lbl,
)
from .transforms import (
    mark_missing,
    na_if,
    collapse,
    relabel,
    add_labels,
    add_labels_for_values,
    prune_unused,
    clean,
)
from .attributes import strip

__version__ = "0.1.0"

__all__ = [
    "LabelError",
    "ConfigurationError",
    "LabelLookupError",
    "ValidationError",
    "ConflictError",
    "LabelEntry",
    "LabelMap",
    "LabelledVector",
    "LabelledTable",
    "LabelPlaceholder",
    "make_placeholder",
    "lbl",
    "mark_missing",
    "na_if",
    "collapse",
    "relabel",
    "add_labels",
    "add_labels_for_values",
    "prune_unused",
    "clean",
    "strip",
]
