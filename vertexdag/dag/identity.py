"""
Vertex Identity

Opaque, process-unique identifiers for vertices.
Identities are minted by a monotonic counter and compared by value.
"""

from dataclasses import dataclass
from itertools import count
import threading


@dataclass(frozen=True, order=True)
class VertexId:
    """
    Identity of a single vertex.

    Two VertexId objects are equal iff they were minted with the same number.
    The number itself carries no meaning beyond creation order.
    """
    value: int

    def __repr__(self) -> str:
        return f"VertexId({self.value})"

    def __str__(self) -> str:
        return f"#{self.value}"


class IdentityGenerator:
    """
    Mints VertexId values that are never reused.

    A single generator is created at import time (see DEFAULT_GENERATOR) and
    lives for the whole process. Separate generators are only useful in tests;
    identities from different generators may collide.
    """

    def __init__(self, start: int = 1):
        self._counter = count(start)
        self._lock = threading.Lock()

    def next_id(self) -> VertexId:
        """Return a fresh identity"""
        with self._lock:
            return VertexId(next(self._counter))


DEFAULT_GENERATOR = IdentityGenerator()
