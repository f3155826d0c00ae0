from __future__ import annotations

import pytest

from vertexdag import VertexGraph


@pytest.fixture
def graph() -> VertexGraph:
    return VertexGraph()
