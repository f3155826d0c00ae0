"""
Graph construction tests: identity, edge registry, cycle guard, and
structural queries (roots, depth, topological order).
"""

from __future__ import annotations

import random

import pytest

from vertexdag import (
    CycleError,
    DuplicateEdgeError,
    SelfReferenceError,
    UnknownVertexError,
    VertexGraph,
    VertexId,
    VertexState,
)
from vertexdag.dag.identity import IdentityGenerator


def _noop(input=None):
    return input


# ======================================================================
# Identity
# ======================================================================


class TestVertexIdentity:

    def test_ids_are_unique_and_increasing(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        assert a.id != b.id
        assert a.id < b.id

    def test_equality_by_identity_not_by_work(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        assert a != b
        assert len({a, b}) == 2
        assert a == graph.get(a.id)

    def test_vertex_id_compares_by_value(self):
        assert VertexId(5) == VertexId(5)
        assert hash(VertexId(5)) == hash(VertexId(5))
        assert repr(VertexId(5)) == "VertexId(5)"

    def test_generator_never_reuses(self):
        generator = IdentityGenerator()
        ids = [generator.next_id() for _ in range(100)]
        assert len(set(ids)) == 100

    def test_default_names(self, graph):
        vertex = graph.create_vertex(_noop)
        named = graph.create_vertex(_noop, name="load")
        assert vertex.name == f"vertex-{vertex.id.value}"
        assert named.name == "load"

    def test_work_must_be_callable(self, graph):
        with pytest.raises(TypeError):
            graph.create_vertex("not callable")


# ======================================================================
# Edge registry
# ======================================================================


class TestAddChild:

    def test_children_and_parents_registered(self, graph):
        a = graph.create_vertex(_noop, name="a")
        b = graph.create_vertex(_noop, name="b")

        graph.add_child(a, b)

        assert graph.get_children(a) == {b}
        assert graph.parents(b) == frozenset({a.id})
        assert graph.get_parents(b) == {a}
        assert graph.get_children(b) == set()

    def test_self_reference_rejected(self, graph):
        a = graph.create_vertex(_noop, name="a")
        before = graph.get_children(a)

        with pytest.raises(SelfReferenceError, match="own child"):
            graph.add_child(a, a)

        assert graph.get_children(a) == before == set()
        assert graph.parents(a) == frozenset()

    def test_duplicate_edge_rejected(self, graph):
        a = graph.create_vertex(_noop, name="a")
        b = graph.create_vertex(_noop, name="b")
        graph.add_child(a, b)

        with pytest.raises(DuplicateEdgeError, match="already a child"):
            graph.add_child(a, b)

        assert a.child_ids == [b.id]
        assert graph.parents(b) == frozenset({a.id})

    def test_cycle_rejected_and_graph_unchanged(self, graph):
        a = graph.create_vertex(_noop, name="a")
        b = graph.create_vertex(_noop, name="b")
        c = graph.create_vertex(_noop, name="c")
        graph.add_child(a, b)
        graph.add_child(b, c)

        with pytest.raises(CycleError) as exc_info:
            graph.add_child(c, a)

        assert exc_info.value.path == ["a", "b", "c"]
        assert "a -> b -> c -> a" in str(exc_info.value)
        assert graph.get_children(c) == set()
        assert graph.parents(a) == frozenset()

    def test_two_vertex_cycle_rejected(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        graph.add_child(a, b)

        with pytest.raises(CycleError):
            graph.add_child(b, a)

    def test_transitive_edge_allowed(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(a, b)
        graph.add_child(b, c)
        graph.add_child(a, c)

        assert graph.get_children(a) == {b, c}
        assert graph.parents(c) == frozenset({a.id, b.id})

    def test_self_reference_checked_before_cycle(self, graph):
        # A self-loop is also a zero-length cycle
        a = graph.create_vertex(_noop)
        with pytest.raises(SelfReferenceError):
            graph.add_child(a, a)
        assert not isinstance(SelfReferenceError("a"), CycleError)

    def test_vertex_from_other_graph_rejected(self, graph):
        other = VertexGraph()
        a = graph.create_vertex(_noop)
        foreign = other.create_vertex(_noop)

        with pytest.raises(UnknownVertexError):
            graph.add_child(a, foreign)
        assert graph.get_children(a) == set()

    def test_children_snapshot_is_a_copy(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(a, b)

        snapshot = graph.get_children(a)
        graph.add_child(a, c)

        assert snapshot == {b}
        assert graph.get_children(a) == {b, c}

    def test_parents_snapshot_is_a_copy(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(a, c)

        snapshot = graph.parents(c)
        graph.add_child(b, c)

        assert snapshot == frozenset({a.id})


# ======================================================================
# Cycle guard
# ======================================================================


class TestReachability:

    def test_zero_length_path(self, graph):
        a = graph.create_vertex(_noop)
        assert graph.has_path_to(a, a)

    def test_path_follows_edge_direction(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(a, b)
        graph.add_child(b, c)

        assert graph.has_path_to(a, c)
        assert not graph.has_path_to(c, a)

    def test_diamond(self, graph):
        top = graph.create_vertex(_noop)
        left = graph.create_vertex(_noop)
        right = graph.create_vertex(_noop)
        bottom = graph.create_vertex(_noop)
        other = graph.create_vertex(_noop)
        graph.add_child(top, left)
        graph.add_child(top, right)
        graph.add_child(left, bottom)
        graph.add_child(right, bottom)

        assert graph.has_path_to(top, bottom)
        assert not graph.has_path_to(top, other)
        assert graph.descendants(top) == {left, right, bottom}

    def test_long_chain_does_not_hit_recursion_limit(self, graph):
        vertices = [graph.create_vertex(_noop) for _ in range(5000)]
        for parent, child in zip(vertices, vertices[1:]):
            graph.add_child(parent, child)

        assert graph.has_path_to(vertices[0], vertices[-1])
        with pytest.raises(CycleError):
            graph.add_child(vertices[-1], vertices[0])

    @pytest.mark.asyncio
    async def test_long_chain_executes_without_recursion(self, graph):
        vertices = [graph.create_vertex(lambda x: x + 1) for _ in range(5000)]
        for parent, child in zip(vertices, vertices[1:]):
            graph.add_child(parent, child)

        assert await graph.execute(vertices[0], 0) == 1

        assert graph.result_of(vertices[-1]) == 5000
        assert graph.state_of(vertices[-1]) is VertexState.DONE

    def test_random_insertions_stay_acyclic(self, graph):
        rng = random.Random(7)
        vertices = [graph.create_vertex(_noop) for _ in range(25)]

        for _ in range(300):
            parent, child = rng.choice(vertices), rng.choice(vertices)
            try:
                graph.add_child(parent, child)
            except (SelfReferenceError, DuplicateEdgeError, CycleError):
                pass

            for vertex in vertices:
                assert vertex not in graph.descendants(vertex)


# ======================================================================
# Structural queries
# ======================================================================


class TestGraphQueries:

    def test_chain_depths(self, graph):
        root = graph.create_vertex(_noop)
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(root, a)
        graph.add_child(a, b)
        graph.add_child(b, c)

        assert [graph.depth(v) for v in (root, a, b, c)] == [1, 2, 3, 4]

    def test_depth_uses_longest_path(self, graph):
        a = graph.create_vertex(_noop)
        b = graph.create_vertex(_noop)
        c = graph.create_vertex(_noop)
        graph.add_child(a, b)
        graph.add_child(b, c)
        graph.add_child(a, c)

        assert graph.depth(c) == 3

    def test_topological_order_respects_edges(self, graph):
        vertices = [graph.create_vertex(_noop, name=str(i)) for i in range(6)]
        edges = [(5, 0), (0, 1), (1, 2), (5, 3), (3, 2), (4, 2)]
        for parent, child in edges:
            graph.add_child(vertices[parent], vertices[child])

        order = graph.topological_order()
        position = {v.id: i for i, v in enumerate(order)}

        assert len(order) == 6
        for parent, child in edges:
            assert position[vertices[parent].id] < position[vertices[child].id]

    def test_roots_and_levels(self, graph):
        a = graph.create_vertex(_noop, name="a")
        b = graph.create_vertex(_noop, name="b")
        c = graph.create_vertex(_noop, name="c")
        d = graph.create_vertex(_noop, name="d")
        graph.add_child(a, c)
        graph.add_child(b, c)
        graph.add_child(c, d)

        assert graph.roots() == [a, b]
        assert [[v.name for v in level] for level in graph.levels()] == [["a", "b"], ["c"], ["d"]]

    def test_empty_graph(self, graph):
        assert graph.roots() == []
        assert graph.levels() == []
        assert graph.topological_order() == []
        assert len(graph) == 0
