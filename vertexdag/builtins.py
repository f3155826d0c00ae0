"""
Built-in Vertex Types

Small general-purpose work factories available to every pipeline config.
"""

from collections.abc import Mapping
from typing import Any, Dict
import logging

from .dag.errors import PipelineConfigError
from .dag.registry import VertexDef, VertexRegistry
from .dag.vertex import WorkFunction

logger = logging.getLogger(__name__)


def create_constant(vertex_def: VertexDef) -> WorkFunction:
    """Returns params["value"], ignoring its input."""
    if "value" not in vertex_def.params:
        raise PipelineConfigError(f"Constant vertex '{vertex_def.id}' requires a 'value' param")
    value = vertex_def.params["value"]

    def constant(_input: Any = None) -> Any:
        return value

    return constant


def create_passthrough(vertex_def: VertexDef) -> WorkFunction:
    """Returns its input unchanged."""

    def passthrough(input: Any) -> Any:
        return input

    return passthrough


def create_pick(vertex_def: VertexDef) -> WorkFunction:
    """Selects params["keys"] from a mapping input; missing keys are skipped."""
    keys = vertex_def.params.get("keys")
    if not isinstance(keys, list) or not keys:
        raise PipelineConfigError(f"Pick vertex '{vertex_def.id}' requires a non-empty 'keys' list")

    def pick(input: Any) -> Dict[str, Any]:
        if not isinstance(input, Mapping):
            raise TypeError(
                f"Pick vertex '{vertex_def.id}' expects a mapping, got {type(input).__name__}"
            )
        missing = [k for k in keys if k not in input]
        if missing:
            logger.warning(f"Pick vertex '{vertex_def.id}': missing keys {missing}")
        return {k: input[k] for k in keys if k in input}

    return pick


def register_builtins(registry: VertexRegistry) -> VertexRegistry:
    """Register all built-in vertex types on a registry"""
    registry.register("Constant", create_constant)
    registry.register("Passthrough", create_passthrough)
    registry.register("Pick", create_pick)
    return registry
