"""
Vertex Errors

Exception hierarchy raised by graph construction, fan-in bookkeeping,
input validation, and pipeline configuration.

Errors raised by a vertex's own work function are never wrapped.
"""

from typing import Any, List, Optional


class VertexError(Exception):
    """Base class for all vertexdag errors"""
    pass


class SelfReferenceError(VertexError):
    """Raised when a vertex is added as its own child."""

    def __init__(self, vertex_name: str):
        super().__init__(f"Cannot add vertex '{vertex_name}' as its own child.")
        self.vertex_name = vertex_name


class DuplicateEdgeError(VertexError):
    """Raised when the same parent -> child edge is inserted twice."""

    def __init__(self, parent_name: str, child_name: str):
        super().__init__(
            f"Vertex '{child_name}' is already a child of '{parent_name}'."
        )
        self.parent_name = parent_name
        self.child_name = child_name


class CycleError(VertexError):
    """Raised when an edge would close a cycle."""

    def __init__(self, parent_name: str, child_name: str, path: Optional[List[str]] = None):
        message = (
            f"Adding edge '{parent_name}' -> '{child_name}' would create a cycle"
        )
        if path:
            message += f": {' -> '.join(path + [child_name])}"
        super().__init__(message)
        self.parent_name = parent_name
        self.child_name = child_name
        self.path = path or []


class UnknownVertexError(VertexError):
    """Raised when a vertex does not belong to the graph it is used with."""
    pass


class UnknownParentError(VertexError):
    """Raised when a result is reported by a vertex that is not a registered parent."""
    pass


class InputValidationError(VertexError):
    """
    Raised when a vertex's validator rejects its input.

    The work function is not run and no child is notified.
    """

    def __init__(self, vertex_name: str, message: str, errors: Optional[List[Any]] = None):
        super().__init__(f"Invalid input for vertex '{vertex_name}': {message}")
        self.vertex_name = vertex_name
        self.errors = errors or []


class PipelineConfigError(VertexError):
    """Raised when a pipeline definition cannot be loaded or built."""
    pass
