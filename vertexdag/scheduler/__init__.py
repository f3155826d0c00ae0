"""
Scheduler Module

Vertex execution and fan-out of results to children.
"""

from .executor import VertexExecutor

__all__ = [
    "VertexExecutor",
]
