"""
Runtime Module

Pipeline coordinator and runner entry point.
"""

from .coordinator import PipelineCoordinator, RunSummary

__all__ = [
    "PipelineCoordinator",
    "RunSummary",
]
