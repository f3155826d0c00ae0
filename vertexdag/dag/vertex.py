"""
Vertex Model

A vertex wraps one unit of work plus the identities of the vertices it
is connected to. Vertices are handles: they are created and owned by a
VertexGraph, and all edge mutation goes through the graph.
"""

from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Union
import inspect

from .fanin import FanInCoordinator, VertexState
from .identity import VertexId
from .merge import MergeFunction
from .validation import Validator

WorkFunction = Callable[..., Union[Any, Awaitable[Any]]]


def accepts_input(work: WorkFunction) -> bool:
    """
    Check whether a work function takes an input argument.

    Source vertices may wrap zero-argument callables; those are invoked
    without the caller-supplied input.
    """
    try:
        signature = inspect.signature(work)
    except (TypeError, ValueError):
        return True

    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            return True
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            return True
    return False


class Vertex:
    """
    Handle for a single unit of work in a VertexGraph.

    Attributes:
        id: Unique identity, assigned at creation
        name: Human-readable label used in logs and errors
        work: Function (input) -> output, or () -> output; may be async
        validator: Optional validator applied to input before work runs
        coordinator: Fan-in state for the current wave

    Equality and hashing go through the identity only; two vertices wrapping
    the same function are different vertices.
    """

    def __init__(
        self,
        vertex_id: VertexId,
        work: WorkFunction,
        name: Optional[str] = None,
        validator: Optional[Validator] = None,
        merge: Optional[MergeFunction] = None,
    ):
        if not callable(work):
            raise TypeError(f"Vertex work must be callable, got {type(work).__name__}")

        self.id = vertex_id
        self.name = name or f"vertex-{vertex_id.value}"
        self.work = work
        self.validator = validator
        self.takes_input = accepts_input(work)
        self.coordinator = FanInCoordinator(self.name, merge)

        # Insertion-ordered set of child identities
        self._child_ids: Dict[VertexId, None] = {}

        # Outcome of the most recent firing
        self.result: Any = None
        self.error: Optional[BaseException] = None

    @property
    def child_ids(self) -> List[VertexId]:
        return list(self._child_ids)

    @property
    def parent_ids(self) -> FrozenSet[VertexId]:
        return self.coordinator.parents

    @property
    def state(self) -> VertexState:
        return self.coordinator.state

    def has_child(self, child_id: VertexId) -> bool:
        return child_id in self._child_ids

    def _link_child(self, child: "Vertex") -> None:
        # Only VertexGraph.add_child calls this, after all guards passed
        self._child_ids[child.id] = None
        child.coordinator.register_parent(self.id)

    def reset(self) -> None:
        self.coordinator.reset()
        self.result = None
        self.error = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Vertex(id={self.id!r}, name={self.name!r}, state={self.state.value})"
