"""
Vertex Executor

Runs a vertex's work and drives the fan-in coordinators of its children.
Children whose parents have all reported are fired in turn, so a single
execute() call carries a wave of execution down the graph.
"""

from typing import TYPE_CHECKING, Any, List, Optional, Set, Tuple
import asyncio
import inspect
import logging
import time

from ..dag.validation import run_validator
from ..dag.vertex import Vertex

if TYPE_CHECKING:
    from ..dag.graph import VertexGraph

logger = logging.getLogger(__name__)

Ready = List[Tuple[Vertex, Any]]


class VertexExecutor:
    """
    Executes vertices and propagates results to their children.

    The executor:
    1. Validates the input (if the vertex has a validator)
    2. Runs the vertex's work, awaiting it when it is asynchronous
    3. Reports the result to every child's fan-in coordinator
    4. Fires the children that became ready, each in its own task

    The wave is driven by a loop over running tasks rather than by nested
    awaits, so the depth of the graph does not grow the call stack.

    A failing vertex notifies no child; its descendants stay unfired for the
    wave and the error propagates to whoever awaited the wave.

    Example usage:
        executor = VertexExecutor(graph)
        result = await executor.execute(root, {"path": "input.csv"})
    """

    def __init__(self, graph: "VertexGraph"):
        """
        Initialize executor for a graph.

        Args:
            graph: Graph used to resolve child identities
        """
        self.graph = graph

    async def execute(self, vertex: Vertex, input: Any = None) -> Any:
        """
        Run a vertex on caller-supplied input, then the wave it triggers.

        Args:
            vertex: Vertex to run
            input: Input for the vertex's work

        Returns:
            The vertex's result, once every descendant fired by this wave settled

        Raises:
            Exception: Error of the vertex itself, or the first descendant
                       error in completion order
        """
        vertex.coordinator.begin_firing()
        result = await self._run(vertex, input)

        error = await self._drive(self._fan_out(vertex, result))
        if error is not None:
            raise error
        return result

    async def _drive(self, ready: Ready) -> Optional[BaseException]:
        """
        Fire ready vertices until the wave is quiescent.

        Returns:
            First error raised by a fired vertex, or None
        """
        running: Set["asyncio.Task[Tuple[Ready, Optional[BaseException]]]"] = set()
        first_error: Optional[BaseException] = None

        def spawn(batch: Ready) -> None:
            if len(batch) > 1:
                logger.debug(f"Fanning out to {[child.name for child, _ in batch]}")
            for child, value in batch:
                running.add(asyncio.ensure_future(self._settle(child, value)))

        spawn(ready)
        try:
            while running:
                done, running = await asyncio.wait(running, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    next_ready, error = task.result()
                    if error is not None and first_error is None:
                        first_error = error
                    spawn(next_ready)
        except BaseException:
            for task in running:
                task.cancel()
            raise

        return first_error

    async def _settle(self, vertex: Vertex, input: Any) -> Tuple[Ready, Optional[BaseException]]:
        """
        Run a vertex whose coordinator is already FIRING.

        Returns:
            Children that became ready, and the vertex's error if it failed
        """
        try:
            result = await self._run(vertex, input)
        except Exception as e:
            return [], e
        return self._fan_out(vertex, result), None

    async def _run(self, vertex: Vertex, input: Any) -> Any:
        """
        Validate input and run the vertex's work, recording the outcome.
        """
        logger.debug(f"Firing vertex '{vertex.name}'")
        started = time.perf_counter()

        try:
            value = input
            if vertex.validator is not None:
                value = run_validator(vertex.validator, vertex.name, input)

            result = vertex.work(value) if vertex.takes_input else vertex.work()
            if inspect.isawaitable(result):
                result = await result

        except Exception as e:
            vertex.error = e
            vertex.coordinator.mark_failed()
            logger.error(f"Vertex '{vertex.name}' failed: {e}", exc_info=True)
            raise

        vertex.result = result
        vertex.error = None
        vertex.coordinator.mark_done()

        logger.debug(
            f"Vertex '{vertex.name}' done in "
            f"{(time.perf_counter() - started) * 1000:.1f} ms"
        )
        return result

    def _fan_out(self, vertex: Vertex, result: Any) -> Ready:
        """
        Report a result to every child.

        Returns:
            (child, merged input) for each child whose parents have all reported
        """
        ready: Ready = []

        for child_id in vertex.child_ids:
            child = self.graph.get(child_id)
            dispatch = child.coordinator.report(vertex.id, result)
            if dispatch is not None:
                ready.append((child, dispatch.value))

        return ready
