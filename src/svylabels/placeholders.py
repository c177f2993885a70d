"""
Placeholder resolution.

Completes a partially specified LabelPlaceholder by looking the missing
half up in an existing LabelMap. A fully specified placeholder passes
through untouched: it is only checked once it has been merged into a
new LabelMap, whose construction enforces the bijection.
"""

from typing import Any

from svylabels.errors import LabelLookupError
from svylabels.model import LabelEntry, LabelMap, LabelPlaceholder, make_placeholder


def as_placeholder(target: Any) -> LabelPlaceholder:
    """Wrap a bare value as a value-only placeholder."""
    if isinstance(target, LabelPlaceholder):
        return target
    return make_placeholder(value=target)


def resolve_placeholder(target: Any, label_map: LabelMap) -> LabelEntry:
    """
    Fill in a placeholder against a LabelMap.

    Args:
        target: LabelPlaceholder, or a bare value
        label_map: LabelMap to look the missing half up in

    Returns:
        Complete LabelEntry

    Raises:
        ConfigurationError: If the placeholder is empty
        LabelLookupError: If the given value or label is not in label_map
    """
    placeholder = as_placeholder(target)

    if placeholder.is_complete:
        return LabelEntry(placeholder.value, placeholder.label)

    if placeholder.label is None:
        label = label_map.label_for(placeholder.value)
        if label is None:
            raise LabelLookupError(
                f"Could not find value {placeholder.value!r} in existing labels."
            )
        return LabelEntry(placeholder.value, label)

    value = label_map.value_for(placeholder.label)
    if value is None:
        raise LabelLookupError(
            f"Could not find label {placeholder.label!r} in existing labels."
        )
    return LabelEntry(value, placeholder.label)
