"""
vertexdag

Micro dependency-execution engine: build a DAG of vertices wrapping units
of work and execute them in dependency order, merging parent results into
each child's input.
"""

from .dag import (
    VertexId,
    Vertex,
    VertexGraph,
    VertexState,
    VertexDef,
    VertexRegistry,
    VertexError,
    SelfReferenceError,
    DuplicateEdgeError,
    CycleError,
    UnknownVertexError,
    UnknownParentError,
    InputValidationError,
    PipelineConfigError,
    merge_records,
    merge_as_list,
    merge_by_parent,
    schema_validator,
)
from .scheduler import VertexExecutor

__version__ = "0.1.0"

__all__ = [
    "VertexId",
    "Vertex",
    "VertexGraph",
    "VertexState",
    "VertexDef",
    "VertexRegistry",
    "VertexExecutor",
    "VertexError",
    "SelfReferenceError",
    "DuplicateEdgeError",
    "CycleError",
    "UnknownVertexError",
    "UnknownParentError",
    "InputValidationError",
    "PipelineConfigError",
    "merge_records",
    "merge_as_list",
    "merge_by_parent",
    "schema_validator",
]
