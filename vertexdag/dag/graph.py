"""
Vertex Graph

Owns vertices and their edges. Performs cycle prevention on every edge
insertion and exposes graph queries (roots, depth, topological order)
plus the execution entry point.
"""

from collections import deque
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Set
import logging

from .errors import CycleError, DuplicateEdgeError, SelfReferenceError, UnknownVertexError
from .fanin import VertexState
from .identity import IdentityGenerator, VertexId, DEFAULT_GENERATOR
from .merge import MergeFunction
from .validation import Validator
from .vertex import Vertex, WorkFunction
from ..scheduler.executor import VertexExecutor

logger = logging.getLogger(__name__)


class VertexGraph:
    """
    Arena of vertices connected by dependency edges.

    The graph:
    1. Creates vertices and indexes them by identity
    2. Inserts edges, refusing self-loops, duplicates, and cycles
    3. Answers structural queries (children, parents, reachability, depth)
    4. Executes a vertex and propagates the wave to its descendants

    Example usage:
        graph = VertexGraph()

        fetch = graph.create_vertex(lambda: {"x": 1}, name="fetch")
        scale = graph.create_vertex(lambda inp: {"y": inp["x"] * 2}, name="scale")
        report = graph.create_vertex(print_report, name="report")

        graph.add_child(fetch, scale)
        graph.add_child(scale, report)
        graph.add_child(fetch, report)

        await graph.execute(fetch)
        # report receives {"x": 1, "y": 2}
    """

    def __init__(self, identities: Optional[IdentityGenerator] = None):
        """
        Initialize an empty graph.

        Args:
            identities: Identity generator (defaults to the process-wide one)
        """
        self._identities = identities or DEFAULT_GENERATOR
        self._vertices: Dict[VertexId, Vertex] = {}
        self._executor = VertexExecutor(self)

        logger.debug("Initialized VertexGraph")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def create_vertex(
        self,
        work: WorkFunction,
        validator: Optional[Validator] = None,
        merge: Optional[MergeFunction] = None,
        name: Optional[str] = None,
    ) -> Vertex:
        """
        Create a vertex owned by this graph.

        Args:
            work: Function run when the vertex fires; may be async
            validator: Optional validator consulted before each run of work
            merge: Fan-in merge used when the vertex has more than one parent
            name: Optional label for logs and errors

        Returns:
            Vertex handle with no edges
        """
        vertex = Vertex(
            self._identities.next_id(),
            work,
            name=name,
            validator=validator,
            merge=merge,
        )
        self._vertices[vertex.id] = vertex

        logger.debug(f"Created vertex '{vertex.name}' ({vertex.id})")
        return vertex

    def add_child(self, parent: Vertex, child: Vertex) -> None:
        """
        Add a dependency edge parent -> child.

        Guards are checked in order; a failing guard leaves the graph unchanged.

        Args:
            parent: Vertex that must complete first
            child: Vertex that consumes the parent's result

        Raises:
            UnknownVertexError: If either vertex belongs to another graph
            SelfReferenceError: If parent and child are the same vertex
            DuplicateEdgeError: If the edge already exists
            CycleError: If child can already reach parent
        """
        self._require(parent)
        self._require(child)

        if parent is child or parent.id == child.id:
            raise SelfReferenceError(parent.name)

        if parent.has_child(child.id):
            raise DuplicateEdgeError(parent.name, child.name)

        path = self._find_path(child, parent)
        if path is not None:
            raise CycleError(parent.name, child.name, [v.name for v in path])

        parent._link_child(child)
        logger.debug(f"Added edge '{parent.name}' -> '{child.name}'")

    # ------------------------------------------------------------------
    # Structural queries
    # ------------------------------------------------------------------

    def get_children(self, vertex: Vertex) -> Set[Vertex]:
        """
        Snapshot of a vertex's children.

        Later edge insertions are not visible through the returned set.
        """
        self._require(vertex)
        return {self._vertices[child_id] for child_id in vertex.child_ids}

    def parents(self, vertex: Vertex) -> FrozenSet[VertexId]:
        """Snapshot of the identities registered as parents of a vertex"""
        self._require(vertex)
        return vertex.parent_ids

    def get_parents(self, vertex: Vertex) -> Set[Vertex]:
        """Parent vertices (resolved from parent identities)"""
        return {self._vertices[parent_id] for parent_id in self.parents(vertex)}

    def has_path_to(self, source: Vertex, target: Vertex) -> bool:
        """
        Check reachability from source to target.

        A vertex always reaches itself (zero-length path).

        Returns:
            True if target is reachable from source via child edges
        """
        self._require(source)
        self._require(target)
        return self._find_path(source, target) is not None

    def _find_path(self, source: Vertex, target: Vertex) -> Optional[List[Vertex]]:
        """
        Depth-first search over child edges with an explicit stack.

        The visited set bounds work on diamond-shaped subgraphs.

        Returns:
            Vertices on a path from source to target, or None
        """
        if source.id == target.id:
            return [source]

        came_from: Dict[VertexId, Optional[VertexId]] = {source.id: None}
        stack: List[VertexId] = [source.id]

        while stack:
            current_id = stack.pop()
            for child_id in self._vertices[current_id].child_ids:
                if child_id in came_from:
                    continue
                came_from[child_id] = current_id

                if child_id == target.id:
                    path = []
                    step: Optional[VertexId] = child_id
                    while step is not None:
                        path.append(self._vertices[step])
                        step = came_from[step]
                    return list(reversed(path))

                stack.append(child_id)

        return None

    def descendants(self, vertex: Vertex) -> Set[Vertex]:
        """
        Get all transitive children of a vertex (downstream vertices).

        Returns:
            Set of vertices reachable from vertex, excluding vertex itself
        """
        self._require(vertex)
        seen: Set[VertexId] = set()
        queue = deque(vertex.child_ids)

        while queue:
            vid = queue.popleft()
            if vid in seen:
                continue
            seen.add(vid)
            queue.extend(self._vertices[vid].child_ids)

        return {self._vertices[vid] for vid in seen}

    def roots(self) -> List[Vertex]:
        """Vertices without parents, in creation order"""
        return [v for v in self._vertices.values() if not v.parent_ids]

    def topological_order(self) -> List[Vertex]:
        """
        Compute topological order using Kahn's algorithm.

        Every parent appears before each of its children. Independent
        vertices keep their creation order.
        """
        in_degree = {vid: len(v.parent_ids) for vid, v in self._vertices.items()}
        queue = deque(vid for vid, degree in in_degree.items() if degree == 0)
        order: List[Vertex] = []

        while queue:
            vid = queue.popleft()
            vertex = self._vertices[vid]
            order.append(vertex)

            for child_id in vertex.child_ids:
                in_degree[child_id] -= 1
                if in_degree[child_id] == 0:
                    queue.append(child_id)

        # Edge insertion refuses cycles, so every vertex is reached
        return order

    def depths(self) -> Dict[VertexId, int]:
        """
        Depth of every vertex: roots are 1, others are one more than their
        deepest parent (longest path from a root).
        """
        depth: Dict[VertexId, int] = {}
        for vertex in self.topological_order():
            parent_depths = [depth[pid] for pid in vertex.parent_ids]
            depth[vertex.id] = 1 + max(parent_depths, default=0)
        return depth

    def depth(self, vertex: Vertex) -> int:
        """Depth of a single vertex (see depths())"""
        self._require(vertex)
        return self.depths()[vertex.id]

    def levels(self) -> List[List[Vertex]]:
        """
        Group vertices by depth.

        Vertices in the same level have no path between them and may run
        concurrently.
        """
        depth = self.depths()
        levels: List[List[Vertex]] = [[] for _ in range(max(depth.values(), default=0))]
        for vertex in self._vertices.values():
            levels[depth[vertex.id] - 1].append(vertex)
        return levels

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self, vertex: Vertex, input: Any = None) -> Any:
        """
        Run a vertex and propagate results to its descendants.

        Args:
            vertex: Vertex to run
            input: Input passed to the vertex's work

        Returns:
            The vertex's result, once the downstream wave it triggered settled

        Raises:
            InputValidationError: If the vertex's validator rejects input
            Exception: Whatever the work of this vertex or a descendant raised
        """
        self._require(vertex)
        return await self._executor.execute(vertex, input)

    def reset(self) -> None:
        """Clear fan-in state and results of every vertex to start a new wave"""
        for vertex in self._vertices.values():
            vertex.reset()
        logger.debug(f"Reset {len(self._vertices)} vertices for a new wave")

    def state_of(self, vertex: Vertex) -> VertexState:
        self._require(vertex)
        return vertex.state

    def result_of(self, vertex: Vertex) -> Any:
        """Result of the vertex's most recent successful firing, or None"""
        self._require(vertex)
        return vertex.result

    # ------------------------------------------------------------------
    # Arena access
    # ------------------------------------------------------------------

    def get(self, vertex_id: VertexId) -> Vertex:
        """
        Resolve an identity to its vertex.

        Raises:
            UnknownVertexError: If the identity is not in this graph
        """
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise UnknownVertexError(f"No vertex with identity {vertex_id} in this graph")

    @property
    def vertices(self) -> List[Vertex]:
        return list(self._vertices.values())

    def _require(self, vertex: Vertex) -> None:
        if self._vertices.get(vertex.id) is not vertex:
            raise UnknownVertexError(
                f"Vertex '{vertex.name}' ({vertex.id}) does not belong to this graph"
            )

    def __contains__(self, vertex: object) -> bool:
        return isinstance(vertex, Vertex) and self._vertices.get(vertex.id) is vertex

    def __iter__(self) -> Iterator[Vertex]:
        return iter(list(self._vertices.values()))

    def __len__(self) -> int:
        return len(self._vertices)
