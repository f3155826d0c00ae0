"""
Fan-in Coordinator

Per-vertex readiness tracking. Collects parent results for the current
wave and decides when the vertex may fire.

State machine:
    IDLE ──> AWAITING ──> FIRING ──> DONE
      │                      └────> FAILED
      └──────────────────> FIRING   (zero or one parent, or caller-driven)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple
import threading
import logging

from .errors import UnknownParentError
from .identity import VertexId
from .merge import MergeFunction, merge_records

logger = logging.getLogger(__name__)


class VertexState(Enum):
    """Lifecycle of a vertex within one execution wave"""
    IDLE = "idle"
    AWAITING = "awaiting"
    FIRING = "firing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Dispatch:
    """Input computed for a vertex that is ready to fire"""
    value: Any


class FanInCoordinator:
    """
    Tracks which parents have reported and merges their results.

    The coordinator is owned by a single vertex. All bookkeeping (record,
    readiness check, state transition) happens under one lock and never
    awaits, so concurrent reports from two parents cannot both skip firing
    or both fire.

    Example usage:
        coordinator = FanInCoordinator("join")
        coordinator.register_parent(a_id)
        coordinator.register_parent(b_id)

        coordinator.report(a_id, {"x": 1})            # None, still awaiting
        dispatch = coordinator.report(b_id, {"y": 2})
        dispatch.value                                # {"x": 1, "y": 2}
    """

    def __init__(self, vertex_name: str, merge: Optional[MergeFunction] = None):
        """
        Initialize coordinator with no parents.

        Args:
            vertex_name: Name of the owning vertex (for logs and errors)
            merge: Merge function used when more than one parent is registered
        """
        self.vertex_name = vertex_name
        self.merge = merge or merge_records
        self._parents: Set[VertexId] = set()
        self._results: Dict[VertexId, Any] = {}
        self._state = VertexState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> VertexState:
        return self._state

    @property
    def parents(self) -> FrozenSet[VertexId]:
        """Snapshot of registered parent identities"""
        with self._lock:
            return frozenset(self._parents)

    @property
    def reported(self) -> List[Tuple[VertexId, Any]]:
        """Snapshot of (parent_id, result) pairs received so far, in arrival order"""
        with self._lock:
            return list(self._results.items())

    def register_parent(self, parent_id: VertexId) -> None:
        """
        Register a parent whose result this vertex must wait for.

        Args:
            parent_id: Identity of the parent vertex
        """
        with self._lock:
            if self._state is not VertexState.IDLE:
                logger.warning(
                    f"Vertex '{self.vertex_name}' gained parent {parent_id} "
                    f"while {self._state.value}; readiness for this wave is undefined"
                )
            self._parents.add(parent_id)

    def report(self, parent_id: VertexId, result: Any) -> Optional[Dispatch]:
        """
        Record a parent's result for the current wave.

        Args:
            parent_id: Identity of the reporting parent
            result: Result the parent produced

        Returns:
            Dispatch holding the merged input when this report completes the
            set of parents, otherwise None

        Raises:
            UnknownParentError: If parent_id is not a registered parent
        """
        with self._lock:
            if parent_id not in self._parents:
                raise UnknownParentError(
                    f"{parent_id} is not a parent of vertex '{self.vertex_name}'"
                )

            if self._state not in (VertexState.IDLE, VertexState.AWAITING):
                logger.warning(
                    f"Ignoring report from {parent_id}: vertex '{self.vertex_name}' "
                    f"is already {self._state.value} in this wave"
                )
                return None

            if parent_id in self._results:
                logger.debug(
                    f"Vertex '{self.vertex_name}': duplicate report from {parent_id}, "
                    f"replacing previous result"
                )
            self._results[parent_id] = result

            if len(self._results) < len(self._parents):
                self._state = VertexState.AWAITING
                logger.debug(
                    f"Vertex '{self.vertex_name}' awaiting parents: "
                    f"{len(self._results)}/{len(self._parents)} reported"
                )
                return None

            self._state = VertexState.FIRING
            return Dispatch(self._merged_input())

    def _merged_input(self) -> Any:
        ordered = list(self._results.items())
        if len(ordered) == 1:
            return ordered[0][1]
        return self.merge(ordered)

    def begin_firing(self) -> None:
        """Mark the vertex as firing (caller-driven execution)"""
        with self._lock:
            self._state = VertexState.FIRING

    def mark_done(self) -> None:
        with self._lock:
            self._state = VertexState.DONE

    def mark_failed(self) -> None:
        with self._lock:
            self._state = VertexState.FAILED

    def reset(self) -> None:
        """Forget all reports and return to IDLE for a new wave"""
        with self._lock:
            self._results.clear()
            self._state = VertexState.IDLE
