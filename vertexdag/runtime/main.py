"""
vertexdag Runner - Main Entry Point

Loads a YAML pipeline, builds its graph, and executes one wave.
Prints the results of every completed vertex as JSON.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vertexdag.builtins import register_builtins
from vertexdag.config.settings import RuntimeSettings
from vertexdag.dag.errors import VertexError
from vertexdag.dag.registry import VertexRegistry
from vertexdag.runtime.coordinator import PipelineCoordinator

logger = logging.getLogger(__name__)


def setup_vertex_registry() -> VertexRegistry:
    """
    Set up vertex registry and register all available vertex types.

    Returns:
        Configured VertexRegistry with all vertex types registered
    """
    registry = register_builtins(VertexRegistry())

    logger.info(f"Registered {len(registry.list_types())} vertex types: {registry.list_types()}")

    return registry


async def run(settings: RuntimeSettings) -> int:
    """
    Run the configured pipeline once.

    Returns:
        Process exit code (0 on success, 1 if any vertex failed)
    """
    logger.info("=" * 60)
    logger.info("vertexdag Runner Starting")
    logger.info("=" * 60)
    logger.info(f"Pipeline: {settings.pipeline}")

    registry = setup_vertex_registry()
    coordinator = PipelineCoordinator(settings.pipeline, registry)

    summary = await coordinator.run()

    metrics = coordinator.get_metrics()
    logger.info(
        f"Metrics [{metrics['pipeline']}]: "
        f"{metrics['vertices']} vertices, "
        f"states: {metrics['states']}"
    )

    print(json.dumps(
        {"results": summary.results, "errors": summary.errors, "states": summary.states},
        indent=2,
        default=str,
    ))

    return 0 if summary.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the runner.

    Usage:
        vertexdag [pipeline.yaml | pipeline_dir]

    Environment Variables:
        VERTEXDAG_PIPELINE: Pipeline path used when no argument is given
        VERTEXDAG_LOG_LEVEL: Log level (default: "INFO")
        VERTEXDAG_LOG_FORMAT: Logging format string
    """
    argv = sys.argv[1:] if argv is None else argv

    settings = RuntimeSettings.from_env()
    if argv:
        settings.pipeline = Path(argv[0])

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=settings.log_format,
    )

    if settings.pipeline is None:
        logger.error("No pipeline given: pass a path or set VERTEXDAG_PIPELINE")
        return 2

    try:
        return asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 130
    except VertexError as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
