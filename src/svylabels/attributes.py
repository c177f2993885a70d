"""
Attribute stripping.

Removes value labels and variable descriptions, which can get in the way
of joins and other operations that compare columns.
"""

from typing import Union

from svylabels.model import LabelledTable, LabelledVector

Strippable = Union[LabelledVector, LabelledTable]


def strip(x: Strippable) -> Strippable:
    """
    Remove all label metadata from a vector, or from every column of a table.

    Dispatches to the strip() method that LabelledVector and LabelledTable
    each implement.

    Returns:
        Object of the same kind with an empty label map and no descriptions
    """
    return x.strip()
