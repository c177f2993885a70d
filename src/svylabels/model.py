"""
Core Label Model Objects

Defines the fundamental data structures for labelled survey data.

These are pure data classes representing:
    - Label entries (one value paired with one label)
    - Label maps (the value <-> label table for one variable)
    - Labelled vectors (a data column plus its label map and descriptions)
    - Labelled tables (named columns of labelled vectors)
    - Label placeholders (partially specified value/label requests)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable (every transform returns a new object)
        - Know nothing about file formats
        - Enforce the value <-> label bijection on construction
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError, ConflictError


@dataclass(frozen=True)
class LabelEntry:
    """
    A single value/label pair.

    Example:
        LabelEntry(10, "Yes")

    Properties:
        value: The data code (never None, None marks a missing data element)
        label: Human-readable text for the code
    """

    value: Any
    label: str

    def __post_init__(self):
        if self.value is None:
            raise ConfigurationError("A label entry cannot have a missing value")
        if not isinstance(self.label, str):
            raise ConfigurationError(
                f"Label for value {self.value!r} must be a string, got {type(self.label).__name__}"
            )


EntryLike = Union[LabelEntry, Tuple[Any, str]]


def _as_entry(item: EntryLike) -> LabelEntry:
    if isinstance(item, LabelEntry):
        return item
    try:
        value, label = item
    except (TypeError, ValueError):
        raise ConfigurationError(f"Expected a LabelEntry or (value, label) pair, got {item!r}")
    return LabelEntry(value, label)


def _duplicated(items: Iterable) -> List:
    counts = Counter(items)
    return [item for item, n in counts.items() if n > 1]


@dataclass(frozen=True)
class LabelMap:
    """
    Ordered value <-> label table for one variable.

    INVARIANTS (checked on construction):
        - No two entries share a value
        - No two entries share a label

    Values must be hashable. Entries keep the order they were given in.
    Transforms that rebuild the table emit it in ascending value order
    via sorted().

    A LabelMap does not need to cover every value in its vector, and an
    entry does not need to occur in the data.

    Properties:
        entries: Tuple of LabelEntry objects

    Raises:
        ConflictError: If the entries are not a bijection
    """

    entries: Tuple[LabelEntry, ...] = ()

    def __post_init__(self):
        entries = tuple(_as_entry(e) for e in self.entries)
        object.__setattr__(self, "entries", entries)

        dup_values = _duplicated(e.value for e in entries)
        dup_labels = _duplicated(e.label for e in entries)
        if dup_values or dup_labels:
            raise ConflictError(values=dup_values, labels=dup_labels)

    @classmethod
    def from_dict(cls, mapping: Mapping[Any, str]) -> "LabelMap":
        """Build from a {value: label} mapping, keeping its order."""
        return cls(tuple(mapping.items()))

    def as_dict(self) -> Dict[Any, str]:
        return {e.value: e.label for e in self.entries}

    @property
    def values(self) -> Tuple:
        return tuple(e.value for e in self.entries)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(e.label for e in self.entries)

    def label_for(self, value: Any) -> Optional[str]:
        """
        Retrieve the label attached to a value.

        Returns:
            The label, or None if the value has no entry
        """
        for entry in self.entries:
            if entry.value == value:
                return entry.label
        return None

    def value_for(self, label: str) -> Optional[Any]:
        """
        Retrieve the value carrying a label.

        Returns:
            The value, or None if no entry has this label
        """
        for entry in self.entries:
            if entry.label == label:
                return entry.value
        return None

    def sorted(self) -> "LabelMap":
        return LabelMap(tuple(sorted(self.entries, key=lambda e: e.value)))

    def __iter__(self) -> Iterator[LabelEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, value: Any) -> bool:
        return any(e.value == value for e in self.entries)


@dataclass(frozen=True)
class LabelledVector:
    """
    A data column with value labels and descriptive metadata attached.

    This is the unit every transform consumes and produces.

    Properties:
        values:
            The data, normalised to a tuple. None marks a missing element.

        label_map:
            LabelMap for this column

        description:
            Short variable label (optional)
            Example: "Employment status"

        var_desc:
            Longer free-text variable description (optional)

    Example:
        LabelledVector(
            values=[10, 10, 11, 20, 30, 99, 30, 10],
            label_map=LabelMap.from_dict({10: "Yes", 20: "No", 99: "NIU"}),
        )
    """

    values: Tuple = ()
    label_map: LabelMap = field(default_factory=LabelMap)
    description: Optional[str] = None
    var_desc: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        if isinstance(self.label_map, Mapping):
            object.__setattr__(self, "label_map", LabelMap.from_dict(self.label_map))
        elif not isinstance(self.label_map, LabelMap):
            object.__setattr__(self, "label_map", LabelMap(tuple(self.label_map)))

    def unique_values(self) -> List:
        """Distinct non-missing values, in order of first appearance."""
        return [v for v in dict.fromkeys(self.values) if v is not None]

    def with_changes(self, **changes) -> "LabelledVector":
        return replace(self, **changes)

    def strip(self) -> "LabelledVector":
        """Drop the label map and both descriptions, keeping the values."""
        return LabelledVector(values=self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)


@dataclass(frozen=True)
class LabelledTable:
    """
    Named, equal-length columns of labelled vectors.

    Properties:
        columns: Mapping of column name -> LabelledVector (order preserved)

    Raises:
        ConfigurationError: If columns differ in length
    """

    columns: Dict[str, LabelledVector] = field(default_factory=dict)

    def __post_init__(self):
        columns = dict(self.columns)
        for name, col in columns.items():
            if not isinstance(col, LabelledVector):
                columns[name] = LabelledVector(values=col)
        lengths = {len(col) for col in columns.values()}
        if len(lengths) > 1:
            raise ConfigurationError(f"Table columns differ in length: {sorted(lengths)}")
        object.__setattr__(self, "columns", columns)

    @property
    def names(self) -> List[str]:
        return list(self.columns)

    def with_column(self, name: str, column: LabelledVector) -> "LabelledTable":
        columns = dict(self.columns)
        columns[name] = column
        return LabelledTable(columns)

    def strip(self) -> "LabelledTable":
        return LabelledTable({name: col.strip() for name, col in self.columns.items()})

    def __getitem__(self, name: str) -> LabelledVector:
        return self.columns[name]

    def __len__(self) -> int:
        return len(self.columns)


@dataclass(frozen=True)
class LabelPlaceholder:
    """
    A partially specified value/label pair.

    At least one of value and label is set. The missing half is filled
    in from an existing LabelMap by the placeholder resolver.

    Properties:
        value: Data code (optional)
        label: Label text (optional)
    """

    value: Optional[Any] = None
    label: Optional[str] = None

    def __post_init__(self):
        if self.value is None and self.label is None:
            raise ConfigurationError("A label placeholder needs a value, a label, or both")

    @property
    def is_complete(self) -> bool:
        return self.value is not None and self.label is not None


def make_placeholder(value: Optional[Any] = None, label: Optional[str] = None) -> LabelPlaceholder:
    return LabelPlaceholder(value=value, label=label)


def lbl(*args, value: Optional[Any] = None, label: Optional[str] = None) -> LabelPlaceholder:
    """
    Flexible placeholder constructor.

    A single positional argument is a label, two positional arguments
    are a value and a label. Keywords fill whichever half is not given
    positionally.

    Examples:
        lbl("Yes")            # label only
        lbl(10, "Yes")        # value and label
        lbl(value=10)         # value only
        lbl("Yes", value=10)  # value and label

    Raises:
        ConfigurationError: On too many arguments, or a half given twice
    """
    if len(args) > 2:
        raise ConfigurationError("Expected either 1 or 2 positional arguments")

    if len(args) == 2:
        if value is not None or label is not None:
            raise ConfigurationError("Value and label given both positionally and by keyword")
        value, label = args
    elif len(args) == 1:
        if label is not None:
            if value is not None:
                raise ConfigurationError("Value and label given both positionally and by keyword")
            value = args[0]
        else:
            label = args[0]

    return make_placeholder(value=value, label=label)
