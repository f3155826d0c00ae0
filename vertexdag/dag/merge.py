"""
Fan-in Merge Strategies

Functions combining the results of several parents into the single input
of a shared child. A merge function receives (parent_id, result) pairs in
arrival order and returns the child's input.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Tuple

from pydantic import BaseModel

from .identity import VertexId

ParentResults = List[Tuple[VertexId, Any]]
MergeFunction = Callable[[ParentResults], Any]


def is_record(value: Any) -> bool:
    """
    Check whether a result can take part in a record merge.

    Mappings and pydantic models are records. Everything else
    (scalars, lists, arbitrary objects) is not.
    """
    return isinstance(value, (Mapping, BaseModel))


def _as_fields(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        # Shallow: nested models stay model instances
        return {name: getattr(value, name) for name in type(value).model_fields}
    return dict(value)


def merge_records(ordered: ParentResults) -> Any:
    """
    Default merge.

    Shallow union of record results in arrival order (a later-arriving
    parent's value wins on key collision). If any result is not a record,
    returns the list of raw results in arrival order instead.

    Args:
        ordered: (parent_id, result) pairs in arrival order

    Returns:
        Merged dictionary, or list of raw results
    """
    values = [value for _, value in ordered]

    if not all(is_record(value) for value in values):
        return values

    merged: Dict[str, Any] = {}
    for value in values:
        merged.update(_as_fields(value))
    return merged


def merge_as_list(ordered: ParentResults) -> List[Any]:
    """Raw results in arrival order, never unioned."""
    return [value for _, value in ordered]


def merge_by_parent(ordered: ParentResults) -> Dict[VertexId, Any]:
    """Results keyed by the identity of the parent that produced them."""
    return {parent_id: value for parent_id, value in ordered}
