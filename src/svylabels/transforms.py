"""
Label transforms for labelled vectors.

Each transform takes a LabelledVector and returns a new one; the input
is never modified. Edits are computed completely before the result is
built, so a failing call leaves nothing half-applied.

    mark_missing           set labelled values to missing by predicate
    collapse               merge values onto labels that already exist
    relabel                move selected values onto a chosen value/label
    add_labels             add explicit value/label pairs
    add_labels_for_values  backfill labels for unlabelled values
    prune_unused           drop labels whose value is not in the data

Predicates are applied to the label entries, never to the data, and
values without a label pass through every transform untouched.

Example:
    x = LabelledVector(
        [10, 10, 11, 20, 30, 99, 30, 10],
        LabelMap.from_dict({10: "Yes", 11: "Yes - Logically Assigned",
                            20: "No", 30: "Maybe", 99: "NIU"}),
    )
    mark_missing(x, ".val >= 90")
    collapse(x, "(.val // 10) * 10")
    relabel(x, (lbl(10, "Yes/Yes-ish"), ".val in [10, 11]"))
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from svylabels.errors import ConfigurationError, ConflictError
from svylabels.model import LabelEntry, LabelMap, LabelledVector
from svylabels.placeholders import resolve_placeholder
from svylabels.predicates import (
    as_labeller,
    as_lbl_function,
    caller_env,
    map_entries,
    select_entries,
)

logger = logging.getLogger(__name__)


def _ascending_map(entries: Iterable[LabelEntry]) -> LabelMap:
    """Deduplicate identical pairs and build an ascending LabelMap (may raise ConflictError)."""
    return LabelMap(tuple(sorted(dict.fromkeys(entries), key=lambda e: e.value)))


def mark_missing(x: LabelledVector, predicate: Any) -> LabelledVector:
    """
    Set labelled values to missing based on their value and label.

    Entries selected by the predicate are removed from the label map and
    every data element carrying one of their values becomes None.
    Remaining entries keep their order. Unlabelled values are ignored.

    Args:
        x: LabelledVector
        predicate: Function of (val, lbl) returning True for entries to drop

    Returns:
        New LabelledVector

    Raises:
        ValidationError: If the predicate is undefined for any entry
    """
    pred_f = as_lbl_function(predicate, caller_env())
    to_zap = select_entries(pred_f, x.label_map, "mark_missing")

    vals_to_zap = dict.fromkeys(e.value for e, zap in zip(x.label_map, to_zap) if zap)
    new_map = LabelMap(tuple(e for e, zap in zip(x.label_map, to_zap) if not zap))
    new_values = tuple(None if v in vals_to_zap else v for v in x.values)

    logger.debug(f"mark_missing: dropped labels for values {list(vals_to_zap)}")
    return x.with_changes(values=new_values, label_map=new_map)


def collapse(x: LabelledVector, fun: Any) -> LabelledVector:
    """
    Collapse labelled values onto new values, keeping existing labels.

    fun maps each entry to its new value. When several entries land on
    the same new value, the surviving label comes from the entry whose
    value already equals the new value, or else from the smallest value.
    Unlabelled values pass through unchanged.

    Example:
        collapse(x, "(.val // 10) * 10")
        # 90 takes "NIU" from 99, because no original entry had value 90

    Args:
        x: LabelledVector
        fun: Function of (val, lbl) returning the new value

    Returns:
        New LabelledVector whose label map is sorted by value
    """
    func = as_lbl_function(fun, caller_env())
    new_vals = map_entries(func, x.label_map, "collapse")

    groups: Dict[Any, List[LabelEntry]] = {}
    for entry, new_val in zip(x.label_map, new_vals):
        groups.setdefault(new_val, []).append(entry)

    new_entries = []
    for new_val, members in groups.items():
        unchanged = [e for e in members if e.value == new_val]
        source = unchanged[0] if unchanged else min(members, key=lambda e: e.value)
        new_entries.append(LabelEntry(new_val, source.label))
        if len(members) > 1:
            logger.debug(
                f"collapse: merged values {[e.value for e in members]} into "
                f"{new_val!r} ({source.label!r})"
            )

    remap = {e.value: new_val for e, new_val in zip(x.label_map, new_vals)}
    new_values = tuple(remap.get(v, v) if v is not None else None for v in x.values)

    return x.with_changes(values=new_values, label_map=_ascending_map(new_entries))


def _split_step(step: Any) -> Tuple[Any, Any]:
    try:
        target, predicate = step
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Relabel steps must be (target, predicate) pairs, got {step!r}"
        )
    return target, predicate


def relabel(x: LabelledVector, *steps: Any) -> LabelledVector:
    """
    Relabel values selected by predicates.

    Each step is a (target, predicate) pair. The target is a
    LabelPlaceholder or a bare value that already has a label. Steps are
    applied in order and each sees the result of the one before, so a
    later step can select or target entries created by an earlier one.

    Example:
        relabel(
            x,
            (lbl(10, "Yes/Yes-ish"), ".val in [10, 11]"),
            (lbl(90, "???"), ".val == 99 | .lbl == 'Maybe'"),
        )
        relabel(x, (10, ".val == 11"))          # bare value
        relabel(x, (lbl("Yes"), ".val == 11"))  # label only

    Returns:
        New LabelledVector whose label map is sorted by value

    Raises:
        ConflictError: If a step leaves a value with two labels or a label
            with two values; no step's result is returned
        LabelLookupError: If a partial target is not in the current labels
    """
    env = caller_env()
    out = x

    for step_num, step in enumerate(steps, start=1):
        target, predicate = _split_step(step)
        pred_f = as_lbl_function(predicate, env)
        old_map = out.label_map

        to_change = select_entries(pred_f, old_map, "relabel")
        new_entry = resolve_placeholder(target, old_map)

        changed_vals = dict.fromkeys(e.value for e, change in zip(old_map, to_change) if change)
        kept = [e for e, change in zip(old_map, to_change) if not change]

        try:
            new_map = _ascending_map(kept + [new_entry])
        except ConflictError as e:
            raise ConflictError(
                values=e.values,
                labels=e.labels,
                message=f"Relabel step {step_num} ({new_entry.value!r} = {new_entry.label!r}) "
                        f"would create conflicting labels.\n{e}",
            ) from e

        new_values = tuple(new_entry.value if v in changed_vals else v for v in out.values)
        logger.debug(
            f"relabel step {step_num}: values {list(changed_vals)} -> "
            f"{new_entry.value!r} ({new_entry.label!r})"
        )
        out = out.with_changes(values=new_values, label_map=new_map)

    return out


def add_labels(x: LabelledVector, *placeholders: Any) -> LabelledVector:
    """
    Add value/label pairs to the label map.

    Placeholders are resolved in order against the growing label map, so
    a later placeholder can refer to a label added by an earlier one.

    Example:
        add_labels(x, lbl(100, "$100"), lbl(105, "$105"))

    Returns:
        New LabelledVector whose label map is sorted by value

    Raises:
        ConflictError: If a value would get a second label, or a label a
            second value
    """
    label_map = x.label_map
    for placeholder in placeholders:
        entry = resolve_placeholder(placeholder, label_map)
        label_map = _ascending_map(list(label_map) + [entry])
        logger.debug(f"add_labels: {entry.value!r} = {entry.label!r}")

    return x.with_changes(label_map=label_map.sorted())


def _distinct_values(values: Iterable[Any]) -> List[Any]:
    out = list(dict.fromkeys(values))
    if None in out:
        raise ConfigurationError("Cannot label a missing value")
    return out


def add_labels_for_values(
    x: LabelledVector,
    labeller: Any = str,
    values: Optional[Iterable[Any]] = None,
) -> LabelledVector:
    """
    Backfill labels for values that have none.

    Args:
        x: LabelledVector
        labeller: Function from a value to its new label (default: str),
            mini-lambda text over .val, or the name of such a function
        values: Values to label. None labels every distinct value in the
            data that has no label yet.

    Example:
        add_labels_for_values(x)
        add_labels_for_values(x, lambda v: f"${v}")
        add_labels_for_values(x, "'$' + str(.val)")
        add_labels_for_values(x, values=[100, 200])

    Returns:
        New LabelledVector whose label map is sorted by value

    Raises:
        ConfigurationError: If labeller is not a usable one-argument function
        ConflictError: If a value already has a different label, or a
            generated label is already used by another value
    """
    label_f = as_labeller(labeller, caller_env())

    if values is None:
        labelled = set(x.label_map.values)
        values = [v for v in x.unique_values() if v not in labelled]
    else:
        values = _distinct_values(values)

    new_entries = [LabelEntry(v, label_f(v)) for v in values]
    logger.debug(f"add_labels_for_values: labelling {values}")

    return x.with_changes(label_map=_ascending_map(list(x.label_map) + new_entries))


def prune_unused(x: LabelledVector) -> LabelledVector:
    """
    Remove labels whose value does not occur in the data.

    Example:
        x = LabelledVector([1, 2, 3, 1, 2, 3], {1: "Q1", 2: "Q2", 3: "Q3", 4: "Q4"})
        prune_unused(x).label_map.as_dict()
        # {1: "Q1", 2: "Q2", 3: "Q3"}
    """
    present = set(x.values)
    kept = tuple(e for e in x.label_map if e.value in present)
    if len(kept) != len(x.label_map):
        logger.debug(
            f"prune_unused: removed {len(x.label_map) - len(kept)} unused label(s)"
        )
    return x.with_changes(label_map=LabelMap(kept))


na_if = mark_missing
clean = prune_unused
