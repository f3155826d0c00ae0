"""
DAG Module

Vertex graph construction, cycle prevention, fan-in coordination,
and vertex type registration.
"""

from .identity import VertexId, IdentityGenerator
from .errors import (
    VertexError,
    SelfReferenceError,
    DuplicateEdgeError,
    CycleError,
    UnknownVertexError,
    UnknownParentError,
    InputValidationError,
    PipelineConfigError,
)
from .merge import MergeFunction, merge_records, merge_as_list, merge_by_parent
from .validation import Validator, schema_validator
from .fanin import FanInCoordinator, VertexState, Dispatch
from .vertex import Vertex, WorkFunction
from .graph import VertexGraph
from .registry import VertexDef, VertexRegistry

__all__ = [
    "VertexId",
    "IdentityGenerator",
    "VertexError",
    "SelfReferenceError",
    "DuplicateEdgeError",
    "CycleError",
    "UnknownVertexError",
    "UnknownParentError",
    "InputValidationError",
    "PipelineConfigError",
    "MergeFunction",
    "merge_records",
    "merge_as_list",
    "merge_by_parent",
    "Validator",
    "schema_validator",
    "FanInCoordinator",
    "VertexState",
    "Dispatch",
    "Vertex",
    "WorkFunction",
    "VertexGraph",
    "VertexDef",
    "VertexRegistry",
]
