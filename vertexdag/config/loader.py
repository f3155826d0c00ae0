"""
Config Loader

Loads and merges pipeline configurations from YAML files.
Converts YAML specifications to VertexDef objects and builds the graph.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError
import logging

from ..dag.errors import PipelineConfigError
from ..dag.graph import VertexGraph
from ..dag.registry import VertexDef, VertexRegistry
from ..dag.validation import schema_from_name
from ..dag.vertex import Vertex

logger = logging.getLogger(__name__)


class VertexConfig(BaseModel):
    """Configuration for a single vertex"""
    id: str
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)
    children: List[str] = Field(default_factory=list)
    input_schema: Optional[str] = None


class PipelineConfig(BaseModel):
    """Complete pipeline configuration"""
    name: str
    vertices: List[VertexConfig] = Field(default_factory=list)
    # Inputs for root vertices, keyed by vertex id
    inputs: Dict[str, Any] = Field(default_factory=dict)


class ConfigLoader:
    """
    Loads and merges pipeline configs from YAML.

    The loader:
    1. Reads a single YAML file, or every YAML file in a directory
    2. Validates each file against PipelineConfig
    3. Merges vertices and inputs (validating uniqueness)
    4. Converts to VertexDef objects

    Example usage:
        loader = ConfigLoader()
        config = loader.load(Path("pipelines/orders"))

        vertex_defs = loader.to_vertex_defs(config)
    """

    def load(self, path: Path) -> PipelineConfig:
        """
        Load a pipeline from a YAML file or a directory of YAML files.

        Args:
            path: YAML file, or directory containing *.yaml / *.yml files

        Returns:
            Merged PipelineConfig

        Raises:
            PipelineConfigError: If nothing is found, a file is invalid, or
                                 definitions conflict
        """
        path = Path(path)

        if path.is_dir():
            yaml_files = sorted(list(path.glob("*.yaml")) + list(path.glob("*.yml")))
            if not yaml_files:
                raise PipelineConfigError(f"No YAML files found in {path}")
        elif path.exists():
            yaml_files = [path]
        else:
            raise PipelineConfigError(f"Pipeline config not found: {path}")

        logger.info(f"Loading {len(yaml_files)} YAML file(s) from {path}")

        configs = [self._load_file(yaml_file) for yaml_file in yaml_files]
        config = self._merge_configs(configs)

        logger.info(
            f"Loaded pipeline '{config.name}': {len(config.vertices)} vertices"
        )
        return config

    def _load_file(self, yaml_file: Path) -> PipelineConfig:
        try:
            with open(yaml_file) as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load {yaml_file}: {e}")
            raise PipelineConfigError(f"Failed to load {yaml_file}: {e}") from e

        if not isinstance(raw, dict):
            raise PipelineConfigError(f"{yaml_file} does not contain a mapping")

        try:
            config = PipelineConfig(**raw)
        except ValidationError as e:
            logger.error(f"Invalid pipeline config {yaml_file}: {e}")
            raise PipelineConfigError(f"Invalid pipeline config {yaml_file}: {e}") from e

        logger.debug(f"Loaded {yaml_file.name}: {len(config.vertices)} vertices")
        return config

    def _merge_configs(self, configs: List[PipelineConfig]) -> PipelineConfig:
        """
        Merge multiple configs, validating uniqueness.

        Identical duplicate vertices are accepted once; conflicting
        definitions for the same id are rejected.

        Raises:
            PipelineConfigError: If conflicts exist
        """
        names = {config.name for config in configs}
        if len(names) > 1:
            logger.warning(f"Merging configs with different names: {sorted(names)}")

        vertices: Dict[str, VertexConfig] = {}
        inputs: Dict[str, Any] = {}

        for config in configs:
            for vertex in config.vertices:
                if vertex.id in vertices:
                    existing = vertices[vertex.id]
                    if existing != vertex:
                        raise PipelineConfigError(
                            f"Conflicting definitions for vertex: {vertex.id}\n"
                            f"First: {existing}\n"
                            f"Second: {vertex}"
                        )
                    logger.debug(f"Vertex {vertex.id} already defined (identical), skipping")
                else:
                    vertices[vertex.id] = vertex

            for vertex_id, value in config.inputs.items():
                if vertex_id in inputs and inputs[vertex_id] != value:
                    raise PipelineConfigError(f"Conflicting inputs for vertex: {vertex_id}")
                inputs[vertex_id] = value

        return PipelineConfig(
            name=configs[0].name,
            vertices=list(vertices.values()),
            inputs=inputs,
        )

    def to_vertex_defs(self, config: PipelineConfig) -> List[VertexDef]:
        """
        Convert a pipeline config to VertexDef objects.

        Raises:
            PipelineConfigError: If a child or input references an unknown vertex
        """
        known = {vertex.id for vertex in config.vertices}

        for vertex in config.vertices:
            unknown = [child for child in vertex.children if child not in known]
            if unknown:
                raise PipelineConfigError(
                    f"Vertex '{vertex.id}' has unknown children: {unknown}"
                )

        unknown_inputs = [vertex_id for vertex_id in config.inputs if vertex_id not in known]
        if unknown_inputs:
            raise PipelineConfigError(f"Inputs given for unknown vertices: {unknown_inputs}")

        return [
            VertexDef(
                id=vertex.id,
                type=vertex.type,
                params=vertex.params,
                children=list(vertex.children),
                input_schema=vertex.input_schema,
            )
            for vertex in config.vertices
        ]


def build_graph(
    vertex_defs: List[VertexDef], registry: VertexRegistry
) -> Tuple[VertexGraph, Dict[str, Vertex]]:
    """
    Build a VertexGraph from vertex definitions.

    Vertices are created first, then edges are added in definition order,
    so structural errors (duplicates, cycles) surface from add_child.

    Args:
        vertex_defs: Definitions, e.g. from ConfigLoader.to_vertex_defs()
        registry: Registry used to create each vertex's work function

    Returns:
        The graph and a mapping from vertex id to vertex handle

    Raises:
        PipelineConfigError: If a type is unknown or an id is duplicated
        DuplicateEdgeError: If a child is listed twice for one vertex
        CycleError: If the children form a cycle
    """
    graph = VertexGraph()
    by_id: Dict[str, Vertex] = {}

    for vertex_def in vertex_defs:
        if vertex_def.id in by_id:
            raise PipelineConfigError(f"Duplicate vertex id: {vertex_def.id}")

        validator = None
        if vertex_def.input_schema:
            validator = schema_from_name(vertex_def.input_schema)

        by_id[vertex_def.id] = graph.create_vertex(
            registry.create(vertex_def),
            validator=validator,
            name=vertex_def.id,
        )

    for vertex_def in vertex_defs:
        for child_name in vertex_def.children:
            if child_name not in by_id:
                raise PipelineConfigError(
                    f"Vertex '{vertex_def.id}' has unknown child: '{child_name}'"
                )
            graph.add_child(by_id[vertex_def.id], by_id[child_name])

    logger.info(
        f"Built graph: {len(graph)} vertices, "
        f"topological order: {[v.name for v in graph.topological_order()]}"
    )
    return graph, by_id
