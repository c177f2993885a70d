"""
Error taxonomy for label operations.

Every error raised by this package derives from LabelError, and also from
the builtin it refines, so callers that only know about ValueError or
LookupError still catch them.
"""

from typing import Iterable, Optional, Tuple


class LabelError(Exception):
    """Base class for all label-algebra errors."""
    pass


class ConfigurationError(LabelError, ValueError):
    """Raised for a malformed call (empty placeholder, bad predicate arity, ...)."""
    pass


class LabelLookupError(LabelError, LookupError):
    """Raised when a placeholder names a value or label missing from the LabelMap."""
    pass


class ValidationError(LabelError, ValueError):
    """Raised when a predicate produces an undefined result."""
    pass


class ConflictError(LabelError, ValueError):
    """
    Raised when an edit would give one value two labels, or one label two values.

    Properties:
        values: values that ended up with more than one label
        labels: labels that ended up with more than one value
    """

    def __init__(
        self,
        values: Optional[Iterable] = None,
        labels: Optional[Iterable[str]] = None,
        message: Optional[str] = None,
    ):
        self.values: Tuple = tuple(values or ())
        self.labels: Tuple[str, ...] = tuple(labels or ())
        if message is None:
            message = _conflict_message(self.values, self.labels)
        super().__init__(message)


def _conflict_message(values: Tuple, labels: Tuple[str, ...]) -> str:
    parts = []
    if values:
        parts.append("Some values have more than 1 label: " + ", ".join(str(v) for v in values))
    if labels:
        parts.append("Some labels have more than 1 value: " + ", ".join(repr(label) for label in labels))
    return "\n".join(parts) or "Conflicting labels"
