"""
Config Module

YAML pipeline configuration loading and runtime settings.
"""

from .loader import ConfigLoader, PipelineConfig, VertexConfig, build_graph
from .settings import RuntimeSettings

__all__ = [
    "ConfigLoader",
    "PipelineConfig",
    "VertexConfig",
    "build_graph",
    "RuntimeSettings",
]
