"""Async helpers for ordering tests."""

from __future__ import annotations

import asyncio


class Gate:
    """
    Controllable pause point for async work.

    `started` is set when the work begins; the work then blocks until
    `release()` is called.
    """

    def __init__(self):
        self.started = asyncio.Event()
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def pass_through(self) -> None:
        self.started.set()
        await self._released.wait()


def gated_work(name: str, calls: list, gate: Gate, output=None, inputs: list | None = None):
    """Build async work that records start/end in `calls` and waits on `gate`."""

    async def work(input):
        if inputs is not None:
            inputs.append(input)
        calls.append(f"{name}:start")
        await gate.pass_through()
        calls.append(f"{name}:end")
        return output

    return work
