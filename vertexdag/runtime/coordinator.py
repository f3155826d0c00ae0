"""
Pipeline Coordinator

Coordinates execution of a pipeline loaded from YAML.
Builds the graph, fires every root vertex, and collects results.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.loader import ConfigLoader, build_graph
from ..dag.fanin import VertexState
from ..dag.registry import VertexRegistry

logger = logging.getLogger(__name__)


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


@dataclass
class RunSummary:
    """Outcome of one pipeline wave"""
    results: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    states: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class PipelineCoordinator:
    """
    Coordinates execution of one pipeline.

    The coordinator:
    1. Loads pipeline configuration from YAML
    2. Builds the graph and creates work functions through the registry
    3. Executes every root vertex concurrently with its configured input
    4. Collects per-vertex results, errors, and states

    Example usage:
        registry = register_builtins(VertexRegistry())

        coordinator = PipelineCoordinator(
            pipeline_path=Path("pipelines/orders.yaml"),
            registry=registry,
        )

        summary = await coordinator.run()
    """

    def __init__(self, pipeline_path: Path, registry: VertexRegistry):
        """
        Initialize coordinator for a pipeline.

        Args:
            pipeline_path: YAML file or directory of YAML files
            registry: Vertex registry with registered vertex types
        """
        self.pipeline_path = pipeline_path
        self.registry = registry

        logger.info(f"Loading pipeline config from {pipeline_path}...")
        loader = ConfigLoader()
        self.config = loader.load(pipeline_path)

        logger.info(f"Building graph for pipeline '{self.config.name}'...")
        self.graph, self.vertices = build_graph(loader.to_vertex_defs(self.config), registry)

        logger.info(
            f"Coordinator initialized for '{self.config.name}': "
            f"{len(self.graph)} vertices, "
            f"{len(self.graph.roots())} roots"
        )

    async def run(self, inputs: Optional[Dict[str, Any]] = None) -> RunSummary:
        """
        Execute one wave: every root vertex is fired concurrently.

        Args:
            inputs: Per-root inputs overriding those from the config

        Returns:
            RunSummary with results of every vertex that completed and the
            error of every vertex that failed, keyed by vertex name
        """
        root_inputs = dict(self.config.inputs)
        root_inputs.update(inputs or {})

        self.graph.reset()
        roots = self.graph.roots()

        logger.info(f"Running pipeline '{self.config.name}' from roots: {[r.name for r in roots]}")

        outcomes = await asyncio.gather(
            *(self.graph.execute(root, root_inputs.get(root.name)) for root in roots),
            return_exceptions=True,
        )

        summary = RunSummary()
        for name, vertex in self.vertices.items():
            summary.states[name] = vertex.state.value
            if vertex.state is VertexState.DONE:
                summary.results[name] = vertex.result
            elif vertex.state is VertexState.FAILED and vertex.error is not None:
                summary.errors[name] = _describe(vertex.error)

        vertex_errors = {id(vertex.error) for vertex in self.vertices.values()}
        for root, outcome in zip(roots, outcomes):
            if not isinstance(outcome, BaseException):
                continue
            if not isinstance(outcome, Exception):
                raise outcome
            # Errors not raised by any vertex's work (e.g. bookkeeping errors)
            if id(outcome) not in vertex_errors:
                summary.errors.setdefault(root.name, _describe(outcome))

        if summary.ok:
            logger.info(f"Pipeline '{self.config.name}' completed: {len(summary.results)} vertices done")
        else:
            logger.error(
                f"Pipeline '{self.config.name}' failed: "
                f"{len(summary.errors)} vertex error(s): {sorted(summary.errors)}"
            )

        return summary

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get coordinator metrics.

        Returns:
            Dictionary with pipeline statistics
        """
        states: Dict[str, int] = {}
        for vertex in self.graph:
            states[vertex.state.value] = states.get(vertex.state.value, 0) + 1

        return {
            "pipeline": self.config.name,
            "vertices": len(self.graph),
            "roots": [v.name for v in self.graph.roots()],
            "levels": [[v.name for v in level] for level in self.graph.levels()],
            "states": states,
        }
