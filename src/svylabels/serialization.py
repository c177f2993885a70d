"""
Serialization helpers for label objects (LabelMap, LabelledVector, LabelledTable).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This is the boundary where readers hand labelled data in and writers take
it out, so the structure is kept stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from svylabels.model import LabelEntry, LabelMap, LabelledTable, LabelledVector


def label_map_to_list(m: LabelMap) -> List[Dict[str, Any]]:
    return [{"value": e.value, "label": e.label} for e in m]


def label_map_from_list(items: List[Dict[str, Any]] | None) -> LabelMap:
    if items is None:
        return LabelMap()
    if not isinstance(items, list):
        raise TypeError(f"Expected a list of label entries, got {type(items).__name__}")
    return LabelMap(tuple(LabelEntry(d["value"], d["label"]) for d in items))


def vector_to_dict(v: LabelledVector) -> Dict[str, Any]:
    return {
        "values": list(v.values),
        "labels": label_map_to_list(v.label_map),
        "description": v.description,
        "var_desc": v.var_desc,
    }


def vector_from_dict(d: Dict[str, Any]) -> LabelledVector:
    if not isinstance(d, dict):
        raise TypeError(f"Expected a dict for a labelled vector, got {type(d).__name__}")
    return LabelledVector(
        values=d.get("values", []),
        label_map=label_map_from_list(d.get("labels")),
        description=d.get("description"),
        var_desc=d.get("var_desc"),
    )


def table_to_dict(t: LabelledTable) -> Dict[str, Any]:
    return {"columns": {name: vector_to_dict(col) for name, col in t.columns.items()}}


def table_from_dict(d: Dict[str, Any]) -> LabelledTable:
    if not isinstance(d, dict):
        raise TypeError(f"Expected a dict for a labelled table, got {type(d).__name__}")
    columns = d.get("columns", {})
    return LabelledTable({name: vector_from_dict(col) for name, col in columns.items()})


def vector_to_json(v: LabelledVector) -> str:
    return json.dumps(vector_to_dict(v), sort_keys=True)


def vector_from_json(s: str) -> LabelledVector:
    return vector_from_dict(json.loads(s))


def vector_to_yaml(v: LabelledVector) -> str:
    return yaml.safe_dump(vector_to_dict(v))


def vector_from_yaml(s: str) -> LabelledVector:
    return vector_from_dict(yaml.safe_load(s))


def table_to_json(t: LabelledTable) -> str:
    return json.dumps(table_to_dict(t), sort_keys=True)


def table_from_json(s: str) -> LabelledTable:
    return table_from_dict(json.loads(s))


def table_to_yaml(t: LabelledTable) -> str:
    # keep column order
    return yaml.safe_dump(table_to_dict(t), sort_keys=False)


def table_from_yaml(s: str) -> LabelledTable:
    return table_from_dict(yaml.safe_load(s))
