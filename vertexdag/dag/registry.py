"""
Vertex Registry

Maps pipeline type names to work factories. A pipeline config names a
type for each vertex; the registry turns that name and its params into
the callable the vertex runs.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from .errors import PipelineConfigError
from .vertex import WorkFunction

logger = logging.getLogger(__name__)


@dataclass
class VertexDef:
    """
    Declarative definition of a vertex, as loaded from a pipeline config.

    Attributes:
        id: Unique name of the vertex within its pipeline (e.g., "fetch_orders")
        type: Registered vertex type (e.g., "Constant", "Pick")
        params: Type-specific parameters (e.g., {"keys": ["total"]} for Pick)
        children: Names of vertices that consume this vertex's result
        input_schema: Optional schema type name used to validate input
    """
    id: str
    type: str
    params: Dict[str, Any] = field(default_factory=dict)
    children: List[str] = field(default_factory=list)
    input_schema: Optional[str] = None


WorkFactory = Callable[[VertexDef], WorkFunction]


class VertexRegistry:
    """
    Work factories keyed by vertex type name.

    A factory receives the whole VertexDef and returns the work callable,
    sync or async, that the graph will run for that vertex. Factories read
    their settings from vertex_def.params and should fail with
    PipelineConfigError when a required param is missing.

    Example usage:
        registry = VertexRegistry()

        def create_scale(vertex_def: VertexDef) -> WorkFunction:
            factor = vertex_def.params.get("factor", 2)
            return lambda inp: {"value": inp["value"] * factor}

        registry.register("Scale", create_scale)

        work = registry.create(VertexDef(id="double", type="Scale", params={"factor": 2}))
    """

    def __init__(self):
        """Initialize empty registry"""
        self._factories: Dict[str, WorkFactory] = {}
        logger.debug("Initialized VertexRegistry")

    def register(self, vertex_type: str, factory: WorkFactory) -> None:
        """
        Bind a type name to the factory that builds its work.

        Re-registering a name replaces the earlier factory.

        Args:
            vertex_type: Name used in the `type` field of pipeline configs
            factory: Builds a work callable from a VertexDef
        """
        if vertex_type in self._factories:
            logger.warning(f"Overwriting existing registration for vertex type: {vertex_type}")

        self._factories[vertex_type] = factory
        logger.info(f"Registered vertex type: {vertex_type}")

    def create(self, vertex_def: VertexDef) -> WorkFunction:
        """
        Build the work callable for one vertex definition.

        Args:
            vertex_def: Definition whose type selects the factory

        Returns:
            Callable to pass to VertexGraph.create_vertex

        Raises:
            PipelineConfigError: If no factory is bound to vertex_def.type
        """
        if vertex_def.type not in self._factories:
            available = ", ".join(self._factories.keys())
            raise PipelineConfigError(
                f"Unknown vertex type: {vertex_def.type}. "
                f"Available types: {available if available else 'none'}"
            )

        factory = self._factories[vertex_def.type]
        work = factory(vertex_def)

        logger.debug(
            f"Created work: id={vertex_def.id}, type={vertex_def.type}, "
            f"params={vertex_def.params}"
        )

        return work

    def list_types(self) -> List[str]:
        """Type names in registration order"""
        return list(self._factories.keys())

    def is_registered(self, vertex_type: str) -> bool:
        """Whether a factory is bound to vertex_type"""
        return vertex_type in self._factories
